"""Fetch-then-aggregate orchestration."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from datetime import datetime

from pydantic import BaseModel

from language_tops.aggregator import RankingAggregator
from language_tops.config import LanguageTopsConfig, load_config
from language_tops.exceptions import EmptyInputError, LanguageTopsError
from language_tops.models import AggregatedReport
from language_tops.sources import SourceClient
from language_tops.storage import (
    AGGREGATED_FILE,
    LINO_FILE,
    load_source_documents,
    source_path,
    write_json,
    write_lino,
)

logger = logging.getLogger(__name__)


class FetchOutcome(BaseModel):
    """Result of fetching a single source."""
    source: str
    path: str | None = None
    language_count: int = 0
    latest_data: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def fetch_sources(
    source_names: Sequence[str] | None = None,
    config: LanguageTopsConfig | None = None,
) -> list[FetchOutcome]:
    """Fetch sources concurrently and write each success to the data directory.

    A failing source is logged and reported in its outcome; the others are
    still written.
    """
    if config is None:
        config = load_config()

    async with SourceClient(config) as client:
        names = list(source_names) if source_names else client.available_sources
        results = await asyncio.gather(
            *(client.fetch(name) for name in names), return_exceptions=True
        )

    outcomes: list[FetchOutcome] = []
    for name, result in zip(names, results):
        if isinstance(result, LanguageTopsError):
            logger.warning("Fetching %s failed: %s", name, result)
            outcomes.append(FetchOutcome(source=name, error=str(result)))
            continue
        if isinstance(result, Exception):
            logger.error("Unexpected error fetching %s", name, exc_info=result)
            outcomes.append(FetchOutcome(source=name, error=f"{type(result).__name__}: {result}"))
            continue
        if isinstance(result, BaseException):
            raise result

        path = write_json(
            source_path(config.output.data_dir, name), result, exclude_none=True
        )
        data_date = result.data_date
        outcomes.append(FetchOutcome(
            source=name,
            path=str(path),
            language_count=len(result.rankings),
            latest_data=str(data_date) if data_date is not None else None,
        ))
        logger.info("%s data saved to %s", name, path)

    return outcomes


def run_aggregation(
    config: LanguageTopsConfig | None = None,
    generated_at: datetime | None = None,
) -> AggregatedReport:
    """Aggregate every fetched source and write ``aggregated.json``.

    A links-notation copy is also written to ``aggregated.lino``; failing to
    produce it is logged and does not fail the run.

    Raises:
        EmptyInputError: If no source files could be loaded.
    """
    if config is None:
        config = load_config()

    data_dir = config.output.data_dir
    documents = load_source_documents(data_dir, config.sources)
    if not documents:
        raise EmptyInputError(
            "No source data files found. Run the fetch command first."
        )

    logger.info("Aggregating data from %d sources", len(documents))
    report = RankingAggregator(config).build_report(documents, generated_at=generated_at)
    data = report.to_dict()
    path = write_json(data_dir / AGGREGATED_FILE, data)
    logger.info("Aggregated rankings saved to %s", path)

    try:
        lino_path = write_lino(data_dir / LINO_FILE, data)
    except (TypeError, ValueError, OSError) as e:
        logger.warning("Could not convert to lino format: %s", e)
    else:
        logger.info("Lino data saved to %s", lino_path)

    return report
