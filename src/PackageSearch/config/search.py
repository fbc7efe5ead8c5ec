"""Search domain configuration: defaults, bounds and compiler policies."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping

from PackageSearch.config.common import (
    expect_choice,
    expect_float,
    expect_float_map,
    expect_int,
    get_optional_value,
    get_section,
)
from PackageSearch.core.query import Weights
from PackageSearch.query.compiler import CompilerSettings
from PackageSearch.query.params import MAX_SCORE_EFFECT, MAX_WEIGHT, SearchDefaults
from PackageSearch.query.scoring import DEFAULT_FIELD_BOOSTS, EXACT_MATCH_CONSTANT
from PackageSearch.query.tokenizer import UNKNOWN_FOLD, UNKNOWN_POLICIES
from PackageSearch.query.weights import DEFAULT_WEIGHTS, ZERO_WEIGHTS_FALLBACK, ZERO_WEIGHTS_POLICIES

# Hard ceilings of the public API; configuration may only tighten them.
_MAX_SIZE_LIMIT = 250
_MAX_FROM_LIMIT = 5000


@dataclass(frozen=True, slots=True)
class SearchConfig:
    """Store validated search defaults, bounds and compiler policies."""

    size: int
    max_size: int
    max_from: int
    score_effect: float
    weights: Weights
    unknown_qualifiers: str
    zero_weights: str
    exact_match_constant: float
    field_boosts: Mapping[str, float]
    suggestions_size: int
    suggestions_max_size: int
    timeout: float | None

    def compiler_settings(self) -> CompilerSettings:
        """Build the query compiler settings for this configuration."""
        return CompilerSettings(
            defaults=SearchDefaults(
                size=self.size,
                max_size=self.max_size,
                max_from=self.max_from,
                score_effect=self.score_effect,
                weights=self.weights,
            ),
            unknown_qualifiers=self.unknown_qualifiers,
            zero_weights=self.zero_weights,
            exact_match_constant=self.exact_match_constant,
            field_boosts=self.field_boosts,
        )


def load_search(raw: Mapping[str, Any]) -> SearchConfig:
    """Load search domain config from raw mapping.

    Args:
        raw: Root configuration mapping.

    Returns:
        Parsed search configuration; omitted keys take the built-in defaults.

    Raises:
        TypeError: If config types are invalid.
        ValueError: If a policy value is unknown.
    """
    section = get_section(raw, "search", required=False)
    weights = get_section(section, "search.weights", required=False)
    boosts = get_optional_value(section, "field_boosts", None)
    timeout = get_optional_value(section, "timeout", None)

    return SearchConfig(
        size=expect_int(get_optional_value(section, "size", 25), "search.size"),
        max_size=expect_int(get_optional_value(section, "max_size", _MAX_SIZE_LIMIT), "search.max_size"),
        max_from=expect_int(get_optional_value(section, "max_from", _MAX_FROM_LIMIT), "search.max_from"),
        score_effect=expect_float(get_optional_value(section, "score_effect", 15.3), "search.score_effect"),
        weights=Weights(
            quality=expect_float(
                get_optional_value(weights, "quality", DEFAULT_WEIGHTS.quality),
                "search.weights.quality",
            ),
            popularity=expect_float(
                get_optional_value(weights, "popularity", DEFAULT_WEIGHTS.popularity),
                "search.weights.popularity",
            ),
            maintenance=expect_float(
                get_optional_value(weights, "maintenance", DEFAULT_WEIGHTS.maintenance),
                "search.weights.maintenance",
            ),
        ),
        unknown_qualifiers=expect_choice(
            get_optional_value(section, "unknown_qualifiers", UNKNOWN_FOLD),
            "search.unknown_qualifiers",
            UNKNOWN_POLICIES,
        ),
        zero_weights=expect_choice(
            get_optional_value(section, "zero_weights", ZERO_WEIGHTS_FALLBACK),
            "search.zero_weights",
            ZERO_WEIGHTS_POLICIES,
        ),
        exact_match_constant=expect_float(
            get_optional_value(section, "exact_match_constant", EXACT_MATCH_CONSTANT),
            "search.exact_match_constant",
        ),
        field_boosts=MappingProxyType(
            expect_float_map(boosts, "search.field_boosts") if boosts is not None else dict(DEFAULT_FIELD_BOOSTS)
        ),
        suggestions_size=expect_int(get_optional_value(section, "suggestions_size", 25), "search.suggestions_size"),
        suggestions_max_size=expect_int(
            get_optional_value(section, "suggestions_max_size", 100),
            "search.suggestions_max_size",
        ),
        timeout=expect_float(timeout, "search.timeout") if timeout is not None else None,
    )


def check_search(config: SearchConfig) -> None:
    """Validate search domain constraints.

    Raises:
        ValueError: If values violate search constraints.
    """
    if not 1 <= config.max_size <= _MAX_SIZE_LIMIT:
        raise ValueError(f"search.max_size must be between 1 and {_MAX_SIZE_LIMIT}")
    if not 1 <= config.size <= config.max_size:
        raise ValueError("search.size must be between 1 and search.max_size")
    if not 0 <= config.max_from <= _MAX_FROM_LIMIT:
        raise ValueError(f"search.max_from must be between 0 and {_MAX_FROM_LIMIT}")
    if not 0 <= config.score_effect <= MAX_SCORE_EFFECT:
        raise ValueError(f"search.score_effect must be between 0 and {MAX_SCORE_EFFECT:g}")
    for name in ("quality", "popularity", "maintenance"):
        value = getattr(config.weights, name)
        if not 0 <= value <= MAX_WEIGHT:
            raise ValueError(f"search.weights.{name} must be between 0 and {MAX_WEIGHT:g}")
    if config.weights.quality + config.weights.popularity + config.weights.maintenance <= 0:
        raise ValueError("search.weights must include at least one positive weight")
    if config.exact_match_constant <= 0:
        raise ValueError("search.exact_match_constant must be positive")
    if not config.field_boosts:
        raise ValueError("search.field_boosts must include at least one field")
    if any(boost <= 0 for boost in config.field_boosts.values()):
        raise ValueError("search.field_boosts values must be positive")
    if not 1 <= config.suggestions_size <= config.suggestions_max_size:
        raise ValueError("search.suggestions_size must be between 1 and search.suggestions_max_size")
    if config.timeout is not None and config.timeout <= 0:
        raise ValueError("search.timeout must be positive")
