"""Example: Fetch sources and build a ranking with Language Tops."""

from __future__ import annotations

import asyncio

from language_tops import RankingAggregator
from language_tops.config import load_config
from language_tops.sources import SourceClient


async def main() -> None:
    config = load_config()

    async with SourceClient(config) as client:
        documents = {
            "tiobe": await client.fetch("tiobe"),
            "stackoverflow": await client.fetch("stackoverflow"),
        }

    report = RankingAggregator(config).build_report(documents)
    print(f"Sources used: {report.summary.sources_used}")
    print(f"Top language: {report.summary.top_language}")

    for lang in report.rankings[:10]:
        print(f"{lang.rank:>2}. {lang.name:<15} {lang.score_percent:>7} "
              f"(confidence {lang.confidence:.0%})")


if __name__ == "__main__":
    asyncio.run(main())
