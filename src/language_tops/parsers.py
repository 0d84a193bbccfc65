"""Turn raw source downloads into ranking documents.

Every function here is pure: it takes the downloaded text or JSON and
returns a :class:`~language_tops.models.SourceDocument`. HTTP lives in
:mod:`language_tops.sources`.
"""

from __future__ import annotations

import csv
import io
import re
from collections import defaultdict
from datetime import UTC, datetime
from typing import Any

from language_tops.exceptions import SourceParseError
from language_tops.models import SourceDocument

HISTORY_POINTS = 24
GITHUT_TOP_N = 50

GITHUT_METRIC_FILES: dict[str, str] = {
    "pullRequests": "gh-pull-request.json",
    "pushEvents": "gh-push-event.json",
    "starEvents": "gh-star-event.json",
    "issueEvents": "gh-issue-event.json",
}

# Pull requests track active development most closely.
GITHUT_METRIC_WEIGHTS: dict[str, float] = {
    "pullRequests": 0.40,
    "pushEvents": 0.30,
    "starEvents": 0.15,
    "issueEvents": 0.15,
}

_PYPL_LANGUAGES_RE = re.compile(
    r"\['Date',\s*//\s*begin section languages\s*([\s\S]*?)//\s*end section languages"
)
_PYPL_ROW_RE = re.compile(r"\[new Date\((\d+),(\d+),\d+\),([\d.,]+)\]")


def _now() -> str:
    return datetime.now(UTC).isoformat()


def _to_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _rank_in_place(rankings: list[dict[str, Any]], key: str) -> list[dict[str, Any]]:
    rankings.sort(key=lambda r: r[key], reverse=True)
    for index, entry in enumerate(rankings, start=1):
        entry["rank"] = index
    return rankings


# ----------------------------------------------------------------------
# PYPL
# ----------------------------------------------------------------------


def parse_pypl(raw: str, fetched_at: str | None = None) -> SourceDocument:
    """Parse the PYPL Google Trends data script.

    The script holds a ``['Date', ...languages...]`` header followed by
    ``[new Date(year, month, day), share, share, ...]`` rows with
    zero-based months.
    """
    match = _PYPL_LANGUAGES_RE.search(raw)
    if not match:
        raise SourceParseError("pypl", "could not find languages section")

    names = [
        s.strip().strip("'")
        for s in match.group(1).split(",")
    ]
    names = [n for n in names if n]

    rows: list[dict[str, Any]] = []
    for row in _PYPL_ROW_RE.finditer(raw):
        year = int(row.group(1))
        month = int(row.group(2)) + 1
        values = [float(v) for v in row.group(3).split(",") if v.strip()]
        if len(values) == len(names):
            rows.append({
                "year": year,
                "month": month,
                "date": f"{year}-{month:02d}",
                "values": values,
            })

    if not rows:
        raise SourceParseError("pypl", "no data rows matched the language header")

    latest = rows[-1]
    rankings = _rank_in_place(
        [
            {
                "name": name,
                "share": share,
                "sharePercent": f"{share * 100:.2f}%",
            }
            for name, share in zip(names, latest["values"])
        ],
        "share",
    )

    return SourceDocument.model_validate({
        "source": "PYPL",
        "sourceUrl": "https://pypl.github.io/PYPL.html",
        "description": (
            "PopularitY of Programming Language index - based on Google Trends "
            "tutorial search frequency"
        ),
        "methodology": (
            "The PYPL index is created by analyzing how often language tutorials "
            "are searched on Google."
        ),
        "updateFrequency": "monthly",
        "dataOrigin": "Google Trends",
        "fetchedAt": fetched_at or _now(),
        "latestDataDate": latest["date"],
        "totalLanguages": len(rankings),
        "rankings": rankings,
        "historicalData": {
            "languages": names,
            "dataPoints": rows[-HISTORY_POINTS:],
        },
    })


# ----------------------------------------------------------------------
# TIOBE
# ----------------------------------------------------------------------


def parse_tiobe(
    csv_text: str, data_url: str = "", fetched_at: str | None = None
) -> SourceDocument:
    """Parse a community-maintained TIOBE ratings CSV.

    Columns are ``DATE`` followed by one column per language holding the
    rating in percent. The last row is the most recent month.
    """
    reader = csv.DictReader(io.StringIO(csv_text.strip()), skipinitialspace=True)
    headers = [h.strip() for h in (reader.fieldnames or [])]
    if "DATE" not in headers:
        raise SourceParseError("tiobe", "missing DATE column")
    data = [
        {k.strip(): (v or "").strip() for k, v in row.items() if k is not None}
        for row in reader
    ]
    if not data:
        raise SourceParseError("tiobe", "no rating rows")

    latest = data[-1]
    languages = [h for h in headers if h != "DATE"]

    rankings: list[dict[str, Any]] = []
    for lang in languages:
        raw_value = _to_float(latest.get(lang))
        if raw_value <= 0:
            continue
        rankings.append({
            "name": lang,
            "share": raw_value / 100,
            "sharePercent": f"{raw_value:.2f}%",
        })
    _rank_in_place(rankings, "share")

    history = []
    for row in data[-HISTORY_POINTS:]:
        point: dict[str, Any] = {"date": row.get("DATE")}
        for lang in languages:
            if row.get(lang):
                point[lang] = _to_float(row[lang])
        history.append(point)

    ranked = {r["name"] for r in rankings}
    return SourceDocument.model_validate({
        "source": "TIOBE",
        "sourceUrl": "https://www.tiobe.com/tiobe-index/",
        "dataUrl": data_url,
        "description": (
            "TIOBE Programming Community index - based on search engine query analysis"
        ),
        "methodology": (
            "The ratings are based on the number of skilled engineers world-wide, "
            "courses and third party vendors. Popular search engines are used to "
            "calculate the ratings."
        ),
        "updateFrequency": "monthly",
        "dataOrigin": (
            "Search engines (Google, Bing, Yahoo, Wikipedia, Amazon, YouTube, Baidu)"
        ),
        "fetchedAt": fetched_at or _now(),
        "latestDataDate": latest.get("DATE"),
        "totalLanguages": len(rankings),
        "rankings": rankings,
        "historicalData": {
            "languages": [lang for lang in languages if lang in ranked],
            "dataPoints": history,
        },
    })


# ----------------------------------------------------------------------
# GitHut
# ----------------------------------------------------------------------


def process_githut_metric(data: list[dict[str, Any]], metric: str) -> dict[str, Any]:
    """Rank languages by their share of one GitHub event type in the latest quarter."""
    quarters: dict[str, list[dict[str, Any]]] = defaultdict(list)
    for entry in data:
        quarters[f"{entry['year']}-Q{entry['quarter']}"].append(entry)
    if not quarters:
        raise SourceParseError("githut", f"{metric} has no data")

    latest_key = max(quarters)
    latest = sorted(quarters[latest_key], key=lambda e: int(e["count"]), reverse=True)
    total = sum(int(e["count"]) for e in latest)
    if total == 0:
        raise SourceParseError("githut", f"{metric} has zero events in {latest_key}")

    rankings = [
        {
            "rank": index,
            "name": entry["name"],
            "count": int(entry["count"]),
            "share": int(entry["count"]) / total,
            "sharePercent": f"{int(entry['count']) / total * 100:.2f}%",
        }
        for index, entry in enumerate(latest, start=1)
    ]

    return {
        "metric": metric,
        "period": latest_key,
        "total": total,
        "rankings": rankings[:GITHUT_TOP_N],
    }


def combine_githut_metrics(metrics: dict[str, dict[str, Any]]) -> list[dict[str, Any]]:
    """Blend per-metric shares by metric weight and renormalize to sum to 1."""
    scores: dict[str, dict[str, Any]] = {}
    for metric, processed in metrics.items():
        weight = GITHUT_METRIC_WEIGHTS.get(metric, 0.25)
        for lang in processed["rankings"]:
            entry = scores.setdefault(
                lang["name"],
                {"name": lang["name"], "weightedScore": 0.0, "metrics": {}},
            )
            entry["weightedScore"] += lang["share"] * weight
            entry["metrics"][metric] = {
                "rank": lang["rank"],
                "share": lang["share"],
                "count": lang["count"],
            }

    combined = _rank_in_place(list(scores.values()), "weightedScore")
    total = sum(lang["weightedScore"] for lang in combined)
    for lang in combined:
        lang["normalizedScore"] = lang["weightedScore"] / total if total else 0.0
        lang["sharePercent"] = f"{lang['normalizedScore'] * 100:.2f}%"
    return combined


def build_githut_document(
    metrics: dict[str, dict[str, Any]], fetched_at: str | None = None
) -> SourceDocument:
    if not metrics:
        raise SourceParseError("githut", "no metrics available")

    combined = combine_githut_metrics(metrics)
    return SourceDocument.model_validate({
        "source": "GitHut",
        "sourceUrl": "https://madnight.github.io/githut/",
        "repositoryUrl": "https://github.com/madnight/githut",
        "description": (
            "GitHub Language Statistics - based on GitHub Archive data via BigQuery"
        ),
        "methodology": (
            "Aggregated rankings based on weighted combination of pull requests "
            "(40%), push events (30%), star events (15%), and issue events (15%)"
        ),
        "updateFrequency": "quarterly",
        "dataOrigin": "GitHub Archive (BigQuery)",
        "fetchedAt": fetched_at or _now(),
        "latestDataPeriod": next(iter(metrics.values()))["period"],
        "totalLanguages": len(combined),
        "metricWeights": {
            name: f"{weight * 100:.0f}%" for name, weight in GITHUT_METRIC_WEIGHTS.items()
        },
        "metricDetails": {
            name: {
                "period": m["period"],
                "totalCount": m["total"],
                "topLanguage": m["rankings"][0]["name"] if m["rankings"] else None,
            }
            for name, m in metrics.items()
        },
        "rankings": combined[:GITHUT_TOP_N],
        "individualMetrics": {
            name: m["rankings"][:30] for name, m in metrics.items()
        },
    })


# ----------------------------------------------------------------------
# Stack Overflow Developer Survey
# ----------------------------------------------------------------------

# Percent of respondents who used each language in the past year.
# https://survey.stackoverflow.co/2025/technology
STACKOVERFLOW_SURVEY: dict[str, Any] = {
    "year": 2025,
    "survey_url": "https://survey.stackoverflow.co/2025/",
    "technology_url": "https://survey.stackoverflow.co/2025/technology",
    "respondents": 49000,
    "countries": 177,
    "languages": (
        ("JavaScript", 66.2), ("HTML/CSS", 56.5), ("Python", 54.8), ("SQL", 49.3),
        ("TypeScript", 43.2), ("Bash/Shell", 34.1), ("Java", 30.5), ("C#", 27.4),
        ("C++", 20.1), ("C", 18.7), ("PHP", 17.4), ("Go", 14.2), ("Rust", 12.8),
        ("Kotlin", 9.7), ("Ruby", 6.2), ("Swift", 5.8), ("R", 5.1), ("Dart", 4.9),
        ("Scala", 2.8), ("Elixir", 2.5), ("Clojure", 1.6), ("Haskell", 1.4),
        ("Lua", 5.3), ("Assembly", 4.2), ("Perl", 2.9), ("MATLAB", 3.8),
        ("Objective-C", 2.4), ("Groovy", 2.1), ("Julia", 1.2), ("F#", 1.1),
        ("Erlang", 0.9), ("Zig", 1.5), ("Nim", 0.4), ("Crystal", 0.3),
        ("OCaml", 0.6), ("Fortran", 1.8), ("COBOL", 0.8), ("Ada", 0.5),
        ("Prolog", 0.4), ("Lisp", 0.7), ("Delphi", 1.9), ("VBA", 3.2),
        ("PowerShell", 11.2),
    ),
    "admired": (
        ("Rust", 72.1), ("Gleam", 70.0), ("Elixir", 66.4), ("Zig", 64.2),
        ("Clojure", 61.8), ("Go", 60.5), ("TypeScript", 58.9), ("Kotlin", 57.2),
        ("Python", 56.8), ("Swift", 54.1),
    ),
    "desired": (
        ("Python", 18.2), ("JavaScript", 12.1), ("Go", 11.8), ("Rust", 11.5),
        ("TypeScript", 10.9), ("Kotlin", 6.2), ("C++", 5.8), ("Java", 5.4),
        ("C#", 4.9), ("Swift", 4.2),
    ),
}


def build_stackoverflow_document(fetched_at: str | None = None) -> SourceDocument:
    """Build the survey document, enriched with admiration and desire ranks."""
    survey = STACKOVERFLOW_SURVEY
    admired = {
        name: {"admirationRank": i, "admirationScore": score}
        for i, (name, score) in enumerate(survey["admired"], start=1)
    }
    desired = {
        name: {"desireRank": i, "desireScore": score}
        for i, (name, score) in enumerate(survey["desired"], start=1)
    }

    rankings = _rank_in_place(
        [
            {
                "name": name,
                "usage": usage,
                "usagePercent": f"{usage:.1f}%",
                "share": usage / 100,
                **admired.get(name, {}),
                **desired.get(name, {}),
            }
            for name, usage in survey["languages"]
        ],
        "usage",
    )

    return SourceDocument.model_validate({
        "source": "Stack Overflow Developer Survey",
        "sourceUrl": survey["survey_url"],
        "technologyUrl": survey["technology_url"],
        "description": (
            "Annual Stack Overflow Developer Survey - usage statistics from "
            "professional developers"
        ),
        "methodology": (
            "Self-reported survey of professional developers. Usage represents "
            "percentage of respondents who reported using each language in the "
            "past year."
        ),
        "updateFrequency": "yearly",
        "dataOrigin": "Stack Overflow Developer Survey",
        "fetchedAt": fetched_at or _now(),
        "surveyYear": survey["year"],
        "respondents": survey["respondents"],
        "countries": survey["countries"],
        "totalLanguages": len(rankings),
        "rankings": rankings,
        "sentiment": {
            "mostAdmired": [
                {"name": n, "admiration": s} for n, s in survey["admired"]
            ],
            "mostDesired": [
                {"name": n, "desire": s} for n, s in survey["desired"]
            ],
        },
    })
