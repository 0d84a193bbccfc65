"""Data models for Language Tops rankings."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, computed_field, field_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    """Snake-case attributes, camelCase keys on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RankingEntry(_CamelModel):
    """One language in a source's ranking list."""
    model_config = ConfigDict(extra="allow")

    name: str
    share: float | None = None
    normalized_score: float | None = None
    usage: float | None = None
    rank: int | None = None
    share_percent: str | None = None


class SourceDocument(_CamelModel):
    """A single source's rankings as produced by a fetcher."""
    model_config = ConfigDict(extra="allow")

    rankings: list[RankingEntry] = []
    source: str | None = None
    description: str | None = None
    fetched_at: str | None = None
    latest_data_date: str | None = None
    latest_data_period: str | None = None
    survey_year: int | None = None
    data_origin: str | None = None

    @field_validator("rankings", mode="before")
    @classmethod
    def _null_rankings(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def data_date(self) -> str | int | None:
        """Most specific data period the source reports."""
        return self.latest_data_date or self.latest_data_period or self.survey_year


class SourceContribution(_CamelModel):
    """What one source said about one language."""
    rank: int | None = None
    score: float = 0.0
    raw_value: float | str | None = None


class LanguageScore(BaseModel):
    """Running totals for one canonical language during an aggregation run."""
    name: str
    total_weighted_score: float = 0.0
    total_weight: float = 0.0
    sources: dict[str, SourceContribution] = {}

    @computed_field  # type: ignore[prop-decorator]
    @property
    def source_count(self) -> int:
        return len(self.sources)

    @property
    def final_score(self) -> float:
        if self.total_weight > 0:
            return self.total_weighted_score / self.total_weight
        return 0.0


class AggregatedRanking(_CamelModel):
    """A ranked language in the composite output."""
    rank: int
    name: str
    score: float
    score_percent: str
    confidence: float
    source_count: int
    sources: dict[str, SourceContribution] = {}


class ReportMeta(_CamelModel):
    title: str = "Aggregated Programming Language Rankings"
    description: str = (
        "Scientifically weighted ranking of programming languages based on "
        "multiple independent data sources"
    )
    generated_at: str
    version: str


class MethodologyWeight(_CamelModel):
    weight: float
    normalized_weight: str
    description: str


class Methodology(_CamelModel):
    description: str = (
        "Languages are scored using a weighted combination of multiple data "
        "sources. Each source measures a different aspect of language popularity "
        "(learning intent, actual usage, community activity)."
    )
    weights: dict[str, MethodologyWeight] = {}
    total_weight: str
    normalized_weight_sum: str = "100%"


class SourceMetrics(_CamelModel):
    """Weight-table notes plus pass-through metadata for a loaded source."""
    weight: float
    description: str = ""
    update_frequency: str = ""
    data_size: str = ""
    methodology: str = ""
    strengths: list[str] = []
    weaknesses: list[str] = []
    language_count: int = 0
    fetched_at: str | None = None
    latest_data_date: str | int | None = None
    data_origin: str | None = None


class ReportSummary(_CamelModel):
    total_languages: int
    sources_used: int
    top_language: str | None = None
    top10: list[str] = []


class AggregatedReport(_CamelModel):
    """Complete aggregated ranking document."""
    meta: ReportMeta
    methodology: Methodology
    sources: dict[str, SourceMetrics] = {}
    summary: ReportSummary
    rankings: list[AggregatedRanking] = []

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
