"""Tests for the weighted ranking aggregator."""

from __future__ import annotations

import json
import math
from datetime import UTC, datetime

import pytest

from language_tops.aggregator import (
    MIN_SCORE,
    RankingAggregator,
    aggregate_rankings,
    extract_score,
)
from language_tops.config import LanguageTopsConfig, SourceWeight
from language_tops.exceptions import ConfigError, EmptyInputError
from language_tops.models import RankingEntry, SourceDocument


def _config(**weights: float) -> LanguageTopsConfig:
    return LanguageTopsConfig(
        sources={name: SourceWeight(weight=w) for name, w in weights.items()}
    )


def _doc(*entries: dict) -> SourceDocument:
    return SourceDocument.model_validate({"rankings": list(entries)})


class TestExtractScore:
    def test_share_wins(self) -> None:
        entry = RankingEntry(name="Python", share=0.3, normalized_score=0.5, usage=70)
        assert extract_score(entry) == 0.3

    def test_normalized_score_when_no_share(self) -> None:
        entry = RankingEntry(name="Python", normalized_score=0.5, usage=70)
        assert extract_score(entry) == 0.5

    def test_usage_is_a_percentage(self) -> None:
        entry = RankingEntry(name="Python", usage=54.8)
        assert extract_score(entry) == pytest.approx(0.548)

    def test_no_fields_scores_zero(self) -> None:
        assert extract_score(RankingEntry(name="Python")) == 0.0

    def test_zero_share_is_not_skipped(self) -> None:
        entry = RankingEntry(name="Python", share=0.0, usage=50)
        assert extract_score(entry) == 0.0

    def test_non_finite_value_falls_through(self) -> None:
        entry = RankingEntry(name="Python", share=math.nan, usage=20)
        assert extract_score(entry) == pytest.approx(0.2)

    def test_camel_case_input(self) -> None:
        entry = RankingEntry.model_validate({"name": "Go", "normalizedScore": 0.09})
        assert extract_score(entry) == 0.09


class TestAggregate:
    def test_weighted_average(self) -> None:
        aggregator = RankingAggregator(_config(a=0.3, b=0.2))
        rankings = aggregator.aggregate({
            "a": _doc({"name": "Rust", "share": 0.5}),
            "b": _doc({"name": "Rust", "share": 0.3}),
        })
        assert len(rankings) == 1
        # (0.5*0.3 + 0.3*0.2) / (0.3 + 0.2)
        assert rankings[0].score == pytest.approx(0.42)

    def test_end_to_end_merge(self, two_source_config: LanguageTopsConfig) -> None:
        rankings = aggregate_rankings(
            {
                "source1": {"rankings": [{"name": "python", "share": 0.5}]},
                "source2": {"rankings": [{"name": "Python", "share": 0.3}]},
            },
            config=two_source_config,
        )
        assert len(rankings) == 1
        python = rankings[0]
        assert python.name == "Python"
        assert python.score == pytest.approx(0.42)
        assert python.confidence == 1.0
        assert python.source_count == 2
        assert python.rank == 1
        assert python.score_percent == "42.00%"
        assert set(python.sources) == {"source1", "source2"}

    def test_confidence_uses_loaded_sources(self) -> None:
        aggregator = RankingAggregator(_config(a=0.3, b=0.3, c=0.3, d=0.1))
        rankings = aggregator.aggregate({
            "a": _doc({"name": "Go", "share": 0.2}),
            "b": _doc({"name": "Go", "share": 0.2}),
            "c": _doc({"name": "Java", "share": 0.2}),
        })
        by_name = {r.name: r for r in rankings}
        assert by_name["Go"].confidence == pytest.approx(2 / 3)
        assert by_name["Java"].confidence == pytest.approx(1 / 3)

    def test_filter_threshold(self) -> None:
        aggregator = RankingAggregator(_config(a=0.5))
        rankings = aggregator.aggregate({
            "a": _doc(
                {"name": "Tiny", "share": 0.0009},
                {"name": "Small", "share": 0.0011},
                {"name": "Exact", "share": MIN_SCORE},
            ),
        })
        assert [r.name for r in rankings] == ["Small"]

    def test_entries_without_scores_are_dropped(self) -> None:
        aggregator = RankingAggregator(_config(a=0.5))
        rankings = aggregator.aggregate({
            "a": _doc({"name": "Python", "share": 0.3}, {"name": "Mystery"}),
        })
        assert [r.name for r in rankings] == ["Python"]

    def test_sorted_descending_with_ranks(self, sample_sources) -> None:
        rankings = RankingAggregator(LanguageTopsConfig()).aggregate(sample_sources)
        assert [r.name for r in rankings] == ["Shell", "JavaScript", "Python", "Go", "C"]
        assert [r.rank for r in rankings] == [1, 2, 3, 4, 5]
        scores = [r.score for r in rankings]
        assert scores == sorted(scores, reverse=True)

    def test_default_weights_applied(self, sample_sources) -> None:
        rankings = RankingAggregator(LanguageTopsConfig()).aggregate(sample_sources)
        python = next(r for r in rankings if r.name == "Python")
        # githut 0.35, tiobe 0.25
        assert python.score == pytest.approx((0.18 * 0.35 + 0.22 * 0.25) / 0.60)
        go = next(r for r in rankings if r.name == "Go")
        assert go.sources["stackoverflow"].raw_value == 14.2
        assert go.sources["githut"].rank == 3

    def test_ties_keep_first_seen_order(self) -> None:
        aggregator = RankingAggregator(_config(a=0.5, b=0.5))
        rankings = aggregator.aggregate({
            "a": _doc({"name": "Zig", "share": 0.1}, {"name": "Nim", "share": 0.1}),
            "b": _doc({"name": "Ada", "share": 0.1}),
        })
        assert [r.name for r in rankings] == ["Zig", "Nim", "Ada"]

    def test_unknown_names_pass_through(self) -> None:
        aggregator = RankingAggregator(_config(a=0.5))
        rankings = aggregator.aggregate({"a": _doc({"name": "Brainfuck", "share": 0.01})})
        assert rankings[0].name == "Brainfuck"

    def test_duplicate_alias_within_one_source(self) -> None:
        aggregator = RankingAggregator(_config(a=0.5, b=0.5))
        rankings = aggregator.aggregate({
            "a": _doc({"name": "Bash", "share": 0.1}, {"name": "Shell", "share": 0.3}),
            "b": _doc({"name": "Java", "share": 0.2}),
        })
        shell = next(r for r in rankings if r.name == "Shell")
        assert shell.source_count == 1
        assert shell.confidence == 0.5
        assert shell.score == pytest.approx(0.2)
        assert shell.sources["a"].score == 0.3

    def test_raw_value_preference(self) -> None:
        aggregator = RankingAggregator(_config(a=0.5))
        rankings = aggregator.aggregate({
            "a": _doc(
                {"name": "Python", "share": 0.3, "sharePercent": "30.00%"},
                {"name": "Go", "normalizedScore": 0.2, "sharePercent": "20.00%"},
                {"name": "Java", "usage": 10.0},
            ),
        })
        raw = {r.name: r.sources["a"].raw_value for r in rankings}
        assert raw == {"Python": 0.3, "Go": "20.00%", "Java": 10.0}

    def test_empty_input_raises(self) -> None:
        with pytest.raises(EmptyInputError):
            RankingAggregator(LanguageTopsConfig()).aggregate({})

    def test_unweighted_source_raises(self) -> None:
        with pytest.raises(ConfigError):
            RankingAggregator(_config(a=0.5)).aggregate(
                {"unknown": _doc({"name": "Go", "share": 0.1})}
            )


class TestBuildReport:
    _NOW = datetime(2026, 1, 5, 12, 0, tzinfo=UTC)

    def test_summary(self, sample_sources) -> None:
        report = RankingAggregator(LanguageTopsConfig()).build_report(
            sample_sources, generated_at=self._NOW
        )
        assert report.summary.total_languages == 5
        assert report.summary.sources_used == 3
        assert report.summary.top_language == "Shell"
        assert report.summary.top10 == ["Shell", "JavaScript", "Python", "Go", "C"]
        assert report.meta.generated_at == "2026-01-05T12:00:00+00:00"

    def test_methodology_renormalizes_present_sources(self, sample_sources) -> None:
        report = RankingAggregator(LanguageTopsConfig()).build_report(sample_sources)
        methodology = report.methodology
        assert set(methodology.weights) == {"githut", "tiobe", "stackoverflow"}
        assert methodology.total_weight == "0.80"
        assert methodology.weights["stackoverflow"].weight == 0.20
        assert methodology.weights["stackoverflow"].normalized_weight == "25.0%"
        assert methodology.normalized_weight_sum == "100%"

    def test_source_metrics_pass_through(self, sample_sources) -> None:
        report = RankingAggregator(LanguageTopsConfig()).build_report(sample_sources)
        githut = report.sources["githut"]
        assert githut.weight == 0.35
        assert githut.language_count == 3
        assert githut.latest_data_date == "2025-Q3"
        assert githut.data_origin == "GitHub Archive (BigQuery)"
        assert report.sources["tiobe"].latest_data_date == "Dec 2025"
        assert report.sources["stackoverflow"].latest_data_date == 2025

    def test_camel_case_output(self, sample_sources) -> None:
        data = RankingAggregator(LanguageTopsConfig()).build_report(sample_sources).to_dict()
        assert set(data) == {"meta", "methodology", "sources", "summary", "rankings"}
        assert data["summary"]["topLanguage"] == "Shell"
        first = data["rankings"][0]
        assert set(first) == {
            "rank", "name", "score", "scorePercent", "confidence", "sourceCount", "sources",
        }
        assert "rawValue" in first["sources"]["stackoverflow"]
        assert "normalizedWeight" in data["methodology"]["weights"]["githut"]

    def test_deterministic(self, sample_sources) -> None:
        aggregator = RankingAggregator(LanguageTopsConfig())
        first = aggregator.build_report(sample_sources, generated_at=self._NOW)
        second = aggregator.build_report(sample_sources, generated_at=self._NOW)
        assert json.dumps(first.to_dict()) == json.dumps(second.to_dict())

    def test_top10_is_capped(self) -> None:
        aggregator = RankingAggregator(_config(a=0.5))
        doc = _doc(*[{"name": f"Lang{i}", "share": 0.5 - i * 0.01} for i in range(15)])
        report = aggregator.build_report({"a": doc})
        assert len(report.summary.top10) == 10
        assert report.summary.total_languages == 15

    def test_empty_input_raises(self) -> None:
        with pytest.raises(EmptyInputError):
            RankingAggregator(LanguageTopsConfig()).build_report({})
