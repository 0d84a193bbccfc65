"""Shared test fixtures for Language Tops tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from language_tops.config import LanguageTopsConfig, OutputConfig, SourceWeight
from language_tops.models import SourceDocument


PYPL_SCRIPT = """
var graphData = [
  ['Date', // begin section languages
   'Python','Java','JavaScript' // end section languages
  ],
  [new Date(2025,10,1),0.30,0.15,0.08],
  [new Date(2025,11,1),0.29,0.12,0.09],
  [new Date(2025,11,1),0.5]
];
"""

TIOBE_CSV = """DATE,Python,C,Java,COBOL
Nov 2025,23.37,9.68,8.72,
Dec 2025,22.61,10.11,8.34,0
"""


@pytest.fixture
def pypl_script() -> str:
    return PYPL_SCRIPT


@pytest.fixture
def tiobe_csv() -> str:
    return TIOBE_CSV


@pytest.fixture
def two_source_config() -> LanguageTopsConfig:
    return LanguageTopsConfig(
        sources={
            "source1": SourceWeight(weight=0.6, description="First source"),
            "source2": SourceWeight(weight=0.4, description="Second source"),
        }
    )


@pytest.fixture
def sample_config(tmp_path: Path) -> LanguageTopsConfig:
    return LanguageTopsConfig(output=OutputConfig(data_dir=tmp_path / "data"))


@pytest.fixture
def sample_sources() -> dict[str, SourceDocument]:
    return {
        "githut": SourceDocument.model_validate({
            "fetchedAt": "2026-01-05T00:00:00+00:00",
            "latestDataPeriod": "2025-Q3",
            "dataOrigin": "GitHub Archive (BigQuery)",
            "rankings": [
                {"rank": 1, "name": "Python", "normalizedScore": 0.18},
                {"rank": 2, "name": "JavaScript", "normalizedScore": 0.15},
                {"rank": 3, "name": "Go", "normalizedScore": 0.09},
            ],
        }),
        "tiobe": SourceDocument.model_validate({
            "fetchedAt": "2026-01-05T00:00:00+00:00",
            "latestDataDate": "Dec 2025",
            "rankings": [
                {"rank": 1, "name": "Python", "share": 0.22, "sharePercent": "22.00%"},
                {"rank": 2, "name": "C", "share": 0.10, "sharePercent": "10.00%"},
            ],
        }),
        "stackoverflow": SourceDocument.model_validate({
            "surveyYear": 2025,
            "rankings": [
                {"rank": 1, "name": "JavaScript", "usage": 66.2},
                {"rank": 2, "name": "Bash/Shell", "usage": 34.1},
                {"rank": 3, "name": "golang", "usage": 14.2},
            ],
        }),
    }
