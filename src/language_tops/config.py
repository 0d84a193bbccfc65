"""Configuration models for Language Tops."""

from __future__ import annotations

import os
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from language_tops.exceptions import ConfigError


class SourceWeight(BaseModel):
    """Weight and provenance notes for one ranking source.

    Weights are chosen by data size, update frequency, how directly the
    methodology measures usage, and independence from the other sources.
    """
    model_config = ConfigDict(frozen=True)

    weight: float = Field(gt=0.0, le=1.0)
    description: str = ""
    update_frequency: str = ""
    data_size: str = ""
    methodology: str = ""
    strengths: tuple[str, ...] = ()
    weaknesses: tuple[str, ...] = ()


DEFAULT_SOURCE_WEIGHTS: MappingProxyType[str, SourceWeight] = MappingProxyType({
    "githut": SourceWeight(
        weight=0.35,
        description="GitHub Activity (Pull Requests, Pushes, Stars, Issues)",
        update_frequency="quarterly",
        data_size="very large (all GitHub repos)",
        methodology="Direct measurement of code activity",
        strengths=("Actual code commits", "Large sample size", "Real project activity"),
        weaknesses=("Biased toward open source", "Over-represents web technologies"),
    ),
    "tiobe": SourceWeight(
        weight=0.25,
        description="Search Engine Query Analysis",
        update_frequency="monthly",
        data_size="very large (global search queries)",
        methodology="Search engine mentions and tutorials",
        strengths=("Long history (since 2001)", "Global coverage", "Independent of GitHub"),
        weaknesses=("Measures interest, not usage", "Can be gamed"),
    ),
    "pypl": SourceWeight(
        weight=0.20,
        description="Google Trends Tutorial Searches",
        update_frequency="monthly",
        data_size="large (Google search data)",
        methodology="Tutorial search frequency on Google",
        strengths=("Learning intent indicator", "Good for emerging languages"),
        weaknesses=("Only measures learning intent", "Regional bias"),
    ),
    "stackoverflow": SourceWeight(
        weight=0.20,
        description="Stack Overflow Developer Survey",
        update_frequency="yearly",
        data_size="medium (~50,000 respondents)",
        methodology="Self-reported usage survey",
        strengths=("Direct developer feedback", "Includes sentiment data"),
        weaknesses=("Selection bias", "Less frequent updates", "English-speaking bias"),
    ),
})


class FetchConfig(BaseModel):
    """HTTP fetch parameters for the source downloaders."""
    timeout: float = 30.0
    user_agent: str = "language-tops"
    pypl_url: str = (
        "https://raw.githubusercontent.com/pypl/pypl.github.io/master/PYPL/All.js"
    )
    tiobe_urls: list[str] = Field(default_factory=lambda: [
        "https://raw.githubusercontent.com/toUpperCase78/tiobe-index-ratings/master/"
        "Tiobe_Index_All_Ratings_January2026.csv",
        "https://raw.githubusercontent.com/toUpperCase78/tiobe-index-ratings/master/"
        "Tiobe_Index_All_Ratings_December2025.csv",
        "https://raw.githubusercontent.com/toUpperCase78/tiobe-index-ratings/master/"
        "Tiobe_Index_Very_Long_Term_History_2025.csv",
    ])
    githut_base_url: str = (
        "https://raw.githubusercontent.com/madnight/githut/master/src/data"
    )


class OutputConfig(BaseModel):
    """Where documents are written and how much is shown."""
    data_dir: Path = Path("data")
    top: int = 20


class LanguageTopsConfig(BaseModel):
    """Top-level configuration composing all sub-configs."""
    sources: dict[str, SourceWeight] = Field(
        default_factory=lambda: dict(DEFAULT_SOURCE_WEIGHTS)
    )
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    def weight_for(self, source_name: str) -> SourceWeight:
        """Return the configured weight entry for *source_name*."""
        try:
            return self.sources[source_name]
        except KeyError:
            raise ConfigError(f"No weight configured for source: {source_name}") from None


def _merge_sources(overrides: dict[str, Any]) -> dict[str, Any]:
    """Overlay per-source YAML overrides on the built-in weight table."""
    merged: dict[str, Any] = {
        name: entry.model_dump() for name, entry in DEFAULT_SOURCE_WEIGHTS.items()
    }
    for name, override in overrides.items():
        if not isinstance(override, dict):
            raise ConfigError(f"Source override for {name} must be a mapping")
        merged[name] = {**merged.get(name, {}), **override}
    return merged


def load_config(path: str | Path | None = None) -> LanguageTopsConfig:
    """Load configuration from YAML file, environment variables, and defaults.

    Priority (highest to lowest):
    1. Environment variables (LANGUAGE_TOPS_*)
    2. YAML config file
    3. Defaults
    """
    config_data: dict[str, Any] = {}

    # Load from YAML file
    if path is not None:
        config_path = Path(path)
        if config_path.exists():
            with open(config_path) as f:
                yaml_data = yaml.safe_load(f)
                if yaml_data:
                    config_data = yaml_data
    else:
        for default_path in [".language-tops.yml", ".language-tops.yaml"]:
            p = Path(default_path)
            if p.exists():
                with open(p) as f:
                    yaml_data = yaml.safe_load(f)
                    if yaml_data:
                        config_data = yaml_data
                break

    if not isinstance(config_data, dict):
        raise ConfigError("Configuration file must contain a mapping")

    config_data["sources"] = _merge_sources(config_data.get("sources") or {})

    # Apply environment variable overrides
    env_mapping = {
        "LANGUAGE_TOPS_DATA_DIR": ("output", "data_dir", Path),
        "LANGUAGE_TOPS_TOP": ("output", "top", int),
        "LANGUAGE_TOPS_TIMEOUT": ("fetch", "timeout", float),
    }

    for env_var, (section, key, type_fn) in env_mapping.items():
        value = os.environ.get(env_var)
        if value is not None:
            if section not in config_data:
                config_data[section] = {}
            try:
                config_data[section][key] = type_fn(value)
            except ValueError as e:
                raise ConfigError(f"Invalid value for {env_var}: {value!r}") from e

    for name in config_data["sources"]:
        value = os.environ.get(f"LANGUAGE_TOPS_WEIGHT_{name.upper()}")
        if value is not None:
            try:
                config_data["sources"][name]["weight"] = float(value)
            except ValueError as e:
                raise ConfigError(
                    f"Invalid value for LANGUAGE_TOPS_WEIGHT_{name.upper()}: {value!r}"
                ) from e

    try:
        return LanguageTopsConfig(**config_data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
