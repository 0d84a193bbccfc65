"""Output formatting for aggregated language rankings."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import click

from language_tops.models import AggregatedReport

if TYPE_CHECKING:
    from links_notation import Link

    from language_tops.pipeline import FetchOutcome

RULE_WIDTH = 60


def _confidence_color(confidence: float) -> str:
    if confidence >= 0.75:
        return "green"
    if confidence >= 0.5:
        return "yellow"
    return "red"


def format_cli_output(
    report: AggregatedReport, top: int = 20, verbose: bool = False
) -> str:
    """Format the aggregated report for terminal display with color."""
    title = click.style("AGGREGATED PROGRAMMING LANGUAGE RANKINGS", bold=True)
    lines: list[str] = [
        "=" * RULE_WIDTH,
        title,
        "=" * RULE_WIDTH,
        "",
        f"Sources used: {report.summary.sources_used}",
        f"Total languages ranked: {report.summary.total_languages}",
        f"Generated at: {report.meta.generated_at}",
        "",
        "Source weights:",
    ]
    for name, info in report.methodology.weights.items():
        lines.append(f"  {name}: {info.normalized_weight} ({info.description})")

    lines.append("")
    lines.append(f"Top {top} Programming Languages:")
    lines.append("-" * RULE_WIDTH)
    for lang in report.rankings[:top]:
        confidence = click.style(
            f"{lang.confidence * 100:.0f}%", fg=_confidence_color(lang.confidence)
        )
        sources = ", ".join(lang.sources)
        lines.append(
            f"  {lang.rank:>2}. {lang.name:<15} {lang.score_percent:>7} "
            f"(confidence: {confidence}, sources: {sources})"
        )

    if verbose and report.sources:
        lines.append("")
        lines.append("Source details:")
        for name, metrics in report.sources.items():
            lines.append(
                f"  {name}: {metrics.language_count} languages, "
                f"data {metrics.latest_data_date or 'N/A'}, "
                f"fetched {metrics.fetched_at or 'N/A'}"
            )

    return "\n".join(lines)


def format_json(report: AggregatedReport) -> str:
    """Format the aggregated report as JSON with camelCase keys."""
    return report.model_dump_json(indent=2, by_alias=True)


def format_fetch_summary(outcomes: Sequence[FetchOutcome]) -> str:
    """Summarize which sources were fetched and which failed."""
    succeeded = [o for o in outcomes if o.ok]
    failed = [o for o in outcomes if not o.ok]
    total = len(outcomes)

    lines: list[str] = [
        "=" * RULE_WIDTH,
        "FETCH SUMMARY",
        "=" * RULE_WIDTH,
        f"Successful: {len(succeeded)}/{total}",
    ]
    for o in succeeded:
        detail = f"{o.language_count} languages"
        if o.latest_data:
            detail += f", data {o.latest_data}"
        lines.append(f"  - {o.source}: {detail}")

    if failed:
        lines.append("")
        lines.append(click.style(f"Failed: {len(failed)}/{total}", fg="red"))
        for o in failed:
            lines.append(f"  - {o.source}: {o.error}")
        lines.append("")
        lines.append("Partial data may still be available in the data directory.")

    return "\n".join(lines)


def format_validation(path: str, links: Sequence[Link]) -> str:
    """Summarize a links-notation file that parsed cleanly."""
    rankings = next((link for link in links if link.id == "rankings"), None)
    lines = [
        click.style(f"✓ {path} parses successfully", fg="green"),
        f"  Top-level links: {len(links)}",
    ]
    if rankings is not None:
        lines.append(f"  Ranking entries: {len(rankings.values)}")
    return "\n".join(lines)
