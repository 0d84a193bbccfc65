"""Weighted multi-source aggregation of language rankings."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from language_tops.config import LanguageTopsConfig, load_config
from language_tops.exceptions import EmptyInputError
from language_tops.models import (
    AggregatedRanking,
    AggregatedReport,
    LanguageScore,
    Methodology,
    MethodologyWeight,
    RankingEntry,
    ReportMeta,
    ReportSummary,
    SourceContribution,
    SourceDocument,
    SourceMetrics,
)
from language_tops.normalizer import normalize_language_name

logger = logging.getLogger(__name__)

# Languages at or below this composite score are noise and are dropped.
MIN_SCORE = 0.001


def extract_score(entry: RankingEntry) -> float:
    """Return the single score in [0, 1] a source gives a language.

    The first usable field wins: ``share``, then ``normalized_score``,
    then ``usage`` (a percentage), otherwise ``0.0``. Non-finite values
    count as missing.
    """
    usage = entry.usage / 100 if entry.usage is not None else None
    for value in (entry.share, entry.normalized_score, usage):
        if value is not None and math.isfinite(value):
            return value
    return 0.0


def _raw_value(entry: RankingEntry) -> float | str | None:
    if entry.share is not None:
        return entry.share
    if entry.share_percent is not None:
        return entry.share_percent
    return entry.usage


def _coerce_documents(
    sources: Mapping[str, SourceDocument | Mapping[str, Any]],
) -> dict[str, SourceDocument]:
    return {
        name: doc if isinstance(doc, SourceDocument) else SourceDocument.model_validate(doc)
        for name, doc in sources.items()
    }


class RankingAggregator:
    """Combine per-source rankings into one weighted composite ranking."""

    def __init__(self, config: LanguageTopsConfig | None = None) -> None:
        self.config = config if config is not None else load_config()

    def aggregate(
        self, sources: Mapping[str, SourceDocument | Mapping[str, Any]]
    ) -> list[AggregatedRanking]:
        """Score, filter, sort and rank every language mentioned by *sources*.

        Raises:
            EmptyInputError: If *sources* is empty.
            ConfigError: If a source has no configured weight.
        """
        documents = _coerce_documents(sources)
        if not documents:
            raise EmptyInputError()

        scores = self._accumulate(documents)
        source_total = len(documents)

        survivors = [
            lang for lang in scores.values() if lang.final_score > MIN_SCORE
        ]
        dropped = len(scores) - len(survivors)
        if dropped:
            logger.debug("Dropped %d languages at or below %.3f", dropped, MIN_SCORE)

        # sorted() is stable, so ties keep first-encountered order
        survivors = sorted(survivors, key=lambda lang: lang.final_score, reverse=True)

        return [
            AggregatedRanking(
                rank=index,
                name=lang.name,
                score=lang.final_score,
                score_percent=f"{lang.final_score * 100:.2f}%",
                confidence=lang.source_count / source_total,
                source_count=lang.source_count,
                sources=lang.sources,
            )
            for index, lang in enumerate(survivors, start=1)
        ]

    def build_report(
        self,
        sources: Mapping[str, SourceDocument | Mapping[str, Any]],
        generated_at: datetime | None = None,
    ) -> AggregatedReport:
        """Build the full output document: meta, methodology, sources, summary, rankings."""
        from language_tops import __version__

        documents = _coerce_documents(sources)
        rankings = self.aggregate(documents)

        if generated_at is None:
            generated_at = datetime.now(UTC)

        return AggregatedReport(
            meta=ReportMeta(
                generated_at=generated_at.isoformat(),
                version=__version__,
            ),
            methodology=self._methodology(documents),
            sources=self._source_metrics(documents),
            summary=ReportSummary(
                total_languages=len(rankings),
                sources_used=len(documents),
                top_language=rankings[0].name if rankings else None,
                top10=[lang.name for lang in rankings[:10]],
            ),
            rankings=rankings,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _accumulate(
        self, documents: dict[str, SourceDocument]
    ) -> dict[str, LanguageScore]:
        """Sum weighted scores per canonical name, in first-seen order."""
        scores: dict[str, LanguageScore] = {}

        for source_name, document in documents.items():
            weight = self.config.weight_for(source_name).weight
            logger.debug(
                "Accumulating %s: %d languages at weight %.2f",
                source_name, len(document.rankings), weight,
            )

            for entry in document.rankings:
                name = normalize_language_name(entry.name)
                score = extract_score(entry)

                lang = scores.get(name)
                if lang is None:
                    lang = scores[name] = LanguageScore(name=name)

                lang.total_weighted_score += score * weight
                lang.total_weight += weight
                lang.sources[source_name] = SourceContribution(
                    rank=entry.rank,
                    score=score,
                    raw_value=_raw_value(entry),
                )

        return scores

    def _methodology(self, documents: dict[str, SourceDocument]) -> Methodology:
        """Report weights renormalized over the sources actually loaded.

        Renormalization is reporting-only; per-language scores use the raw
        configured weights.
        """
        used = {name: self.config.weight_for(name) for name in documents}
        total = sum(entry.weight for entry in used.values())

        return Methodology(
            weights={
                name: MethodologyWeight(
                    weight=entry.weight,
                    normalized_weight=f"{entry.weight / total * 100:.1f}%",
                    description=entry.description,
                )
                for name, entry in used.items()
            },
            total_weight=f"{total:.2f}",
        )

    def _source_metrics(
        self, documents: dict[str, SourceDocument]
    ) -> dict[str, SourceMetrics]:
        metrics: dict[str, SourceMetrics] = {}
        for name, document in documents.items():
            meta = self.config.weight_for(name)
            metrics[name] = SourceMetrics(
                weight=meta.weight,
                description=meta.description,
                update_frequency=meta.update_frequency,
                data_size=meta.data_size,
                methodology=meta.methodology,
                strengths=list(meta.strengths),
                weaknesses=list(meta.weaknesses),
                language_count=len(document.rankings),
                fetched_at=document.fetched_at,
                latest_data_date=document.data_date,
                data_origin=document.data_origin,
            )
        return metrics


def aggregate_rankings(
    sources: Mapping[str, SourceDocument | Mapping[str, Any]],
    config: LanguageTopsConfig | None = None,
) -> list[AggregatedRanking]:
    """Convenience function: aggregate *sources* with the given or default config."""
    return RankingAggregator(config).aggregate(sources)
