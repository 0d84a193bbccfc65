"""Reading and writing ranking documents on disk."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from links_notation import Link, ParseError, Parser, format_links
from pydantic import BaseModel, ValidationError

from language_tops.exceptions import NotationError
from language_tops.models import SourceDocument

logger = logging.getLogger(__name__)

AGGREGATED_FILE = "aggregated.json"
LINO_FILE = "aggregated.lino"


def source_path(data_dir: Path | str, source_name: str) -> Path:
    return Path(data_dir) / f"{source_name}.json"


def load_source_documents(
    data_dir: Path | str, source_names: Iterable[str]
) -> dict[str, SourceDocument]:
    """Load ``<name>.json`` for each source that has been fetched.

    Missing or unreadable files are logged and skipped so that a run can
    proceed with whichever sources are available.
    """
    documents: dict[str, SourceDocument] = {}

    for name in source_names:
        path = source_path(data_dir, name)
        if not path.exists():
            logger.warning("%s not found, skipping", path.name)
            continue

        try:
            with open(path, encoding="utf-8") as f:
                documents[name] = SourceDocument.model_validate(json.load(f))
        except (OSError, ValueError, ValidationError) as e:
            logger.warning("Could not parse %s: %s", path.name, e)
            continue

        logger.info("Loaded %s: %d languages", name, len(documents[name].rankings))

    return documents


def write_json(
    path: Path | str, data: BaseModel | dict[str, Any], exclude_none: bool = False
) -> Path:
    """Write *data* as indented JSON, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json", by_alias=True, exclude_none=exclude_none)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
        f.write("\n")
    return path


def _reference(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _item_link(value: Any) -> Link:
    if isinstance(value, dict):
        return Link(None, [to_link(k, v) for k, v in value.items()])
    if isinstance(value, list):
        return Link(None, [_item_link(v) for v in value])
    return Link(_reference(value))


def to_link(key: str, value: Any) -> Link:
    """Convert one JSON member into a link named *key*.

    Objects become a link whose values are their members, arrays a link whose
    values are their items, and scalars a link with a single reference.
    """
    if isinstance(value, dict):
        return Link(str(key), [to_link(k, v) for k, v in value.items()])
    if isinstance(value, list):
        return Link(str(key), [_item_link(v) for v in value])
    return Link(str(key), [Link(_reference(value))])


def write_lino(path: Path | str, data: dict[str, Any]) -> Path:
    """Write a JSON-compatible mapping as links notation, one top-level link per key."""
    text = format_links([to_link(key, value) for key, value in data.items()])
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)
        f.write("\n")
    return path


def read_lino(path: Path | str) -> list[Link]:
    """Parse a links-notation file.

    Raises:
        NotationError: If the file does not parse.
    """
    with open(path, encoding="utf-8") as f:
        text = f.read()
    try:
        return Parser().parse(text)
    except ParseError as e:
        raise NotationError(str(e), line=e.line) from e
    except ValueError as e:
        raise NotationError(str(e)) from e
