"""Language Tops - weighted programming language popularity rankings."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from language_tops.aggregator import RankingAggregator, aggregate_rankings, extract_score
from language_tops.config import LanguageTopsConfig, SourceWeight
from language_tops.exceptions import EmptyInputError, LanguageTopsError
from language_tops.models import AggregatedRanking, AggregatedReport, SourceDocument
from language_tops.normalizer import normalize_language_name

try:
    __version__ = version("language-tops")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "AggregatedRanking",
    "AggregatedReport",
    "EmptyInputError",
    "LanguageTopsConfig",
    "LanguageTopsError",
    "RankingAggregator",
    "SourceDocument",
    "SourceWeight",
    "__version__",
    "aggregate_rankings",
    "extract_score",
    "normalize_language_name",
]
