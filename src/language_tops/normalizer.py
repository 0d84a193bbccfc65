"""Canonical language names shared across ranking sources."""

from __future__ import annotations

from types import MappingProxyType

# Keys are lowercased, trimmed aliases.
LANGUAGE_ALIASES: MappingProxyType[str, str] = MappingProxyType({
    "c/c++": "C/C++",
    "c++": "C++",
    "c#": "C#",
    "c": "C",
    "javascript": "JavaScript",
    "typescript": "TypeScript",
    "python": "Python",
    "java": "Java",
    "go": "Go",
    "golang": "Go",
    "rust": "Rust",
    "php": "PHP",
    "ruby": "Ruby",
    "swift": "Swift",
    "kotlin": "Kotlin",
    "scala": "Scala",
    "r": "R",
    "perl": "Perl",
    "lua": "Lua",
    "dart": "Dart",
    "shell": "Shell",
    "bash/shell": "Shell",
    "bash": "Shell",
    "powershell": "PowerShell",
    "html/css": "HTML/CSS",
    "html": "HTML/CSS",
    "css": "CSS",
    "sql": "SQL",
    "matlab": "MATLAB",
    "objective-c": "Objective-C",
    "objectivec": "Objective-C",
    "assembly": "Assembly",
    "assembly language": "Assembly",
    "haskell": "Haskell",
    "clojure": "Clojure",
    "elixir": "Elixir",
    "erlang": "Erlang",
    "julia": "Julia",
    "f#": "F#",
    "visual basic": "Visual Basic",
    "vba": "VBA",
    "classic visual basic": "Visual Basic",
    "delphi/pascal": "Delphi/Pascal",
    "delphi/object pascal": "Delphi/Pascal",
    "delphi": "Delphi/Pascal",
    "groovy": "Groovy",
    "cobol": "COBOL",
    "fortran": "Fortran",
    "ada": "Ada",
    "prolog": "Prolog",
    "lisp": "Lisp",
    "ocaml": "OCaml",
    "nim": "Nim",
    "zig": "Zig",
    "crystal": "Crystal",
    "coffeescript": "CoffeeScript",
    "emacs lisp": "Emacs Lisp",
})


def normalize_language_name(name: str) -> str:
    """Map a source's spelling of a language to its canonical display name.

    Names missing from :data:`LANGUAGE_ALIASES` are returned exactly as
    given so they still show up in the rankings.
    """
    return LANGUAGE_ALIASES.get(name.lower().strip(), name)
