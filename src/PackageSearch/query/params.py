"""Qualifier validation and defaulting.

Turns tokenizer output into a canonical ``ParsedParams``. String values bound
for exact-match filters are trimmed and lower-cased to mimic the index's raw
analyzer, so that equality comparisons (including the exact-name boost)
behave as intended.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from PackageSearch.core.errors import InvalidParameter
from PackageSearch.core.query import (
    FLAG_VOCABULARY,
    Flags,
    Keywords,
    ParsedParams,
    QualifierToken,
    QualifierValue,
    Tokenized,
    Weights,
)
from PackageSearch.query.tokenizer import UNKNOWN_FOLD, tokenize
from PackageSearch.query.weights import DEFAULT_WEIGHTS

MAX_TEXT_LENGTH = 250
MAX_KEYWORD_LENGTH = 50
MAX_KEYWORDS = 10
MAX_SCORE_EFFECT = 25.0
MAX_WEIGHT = 100.0
MAX_TERM_LENGTH = 255


@dataclass(frozen=True, slots=True)
class SearchDefaults:
    """Defaults and bounds applied to omitted or supplied parameters."""

    size: int = 25
    max_size: int = 250
    max_from: int = 5000
    score_effect: float = 15.3
    weights: Weights = DEFAULT_WEIGHTS
    boost_exact: bool = True
    flags: frozenset[str] = FLAG_VOCABULARY


def parse_query(
    raw: str,
    *,
    from_: Any = None,
    size: Any = None,
    defaults: SearchDefaults | None = None,
    unknown: str = UNKNOWN_FOLD,
) -> ParsedParams:
    """Tokenize and validate a raw query string in one step.

    Args:
        raw: Caller-supplied query string.
        from_: Optional result offset.
        size: Optional page size.
        defaults: Defaults and bounds; module defaults when omitted.
        unknown: Unknown-qualifier policy passed to the tokenizer.

    Returns:
        Fully validated parameters.

    Raises:
        InvalidParameter: On any malformed or out-of-range parameter.
    """
    return validate(tokenize(raw, unknown=unknown), from_=from_, size=size, defaults=defaults)


def validate(
    tokenized: Tokenized,
    *,
    from_: Any = None,
    size: Any = None,
    defaults: SearchDefaults | None = None,
) -> ParsedParams:
    """Validate qualifiers and fill in defaults for omitted ones.

    Args:
        tokenized: Tokenizer output.
        from_: Optional result offset (int or integer string).
        size: Optional page size (int or integer string).
        defaults: Defaults and bounds; module defaults when omitted.

    Returns:
        Fully validated parameters.

    Raises:
        InvalidParameter: On any malformed or out-of-range parameter.
    """
    defaults = defaults or SearchDefaults()
    qualifiers = tokenized.qualifiers

    text = tokenized.text.strip().lower() or None
    if text is not None and len(text) > MAX_TEXT_LENGTH:
        raise InvalidParameter(f"text must be at most {MAX_TEXT_LENGTH} characters", param="text")

    return ParsedParams(
        text=text,
        author=_identity(qualifiers.get("author")),
        maintainer=_identity(qualifiers.get("maintainer")),
        scope=_scope(qualifiers.get("scope")),
        keywords=_keywords(qualifiers.get("keywords")),
        flags=_flags(qualifiers.get("is"), qualifiers.get("not"), defaults.flags),
        boost_exact=_boolean(qualifiers.get("boost-exact"), defaults.boost_exact),
        score_effect=_number(qualifiers.get("score-effect"), defaults.score_effect, MAX_SCORE_EFFECT),
        weights=Weights(
            quality=_number(qualifiers.get("quality-weight"), defaults.weights.quality, MAX_WEIGHT),
            popularity=_number(qualifiers.get("popularity-weight"), defaults.weights.popularity, MAX_WEIGHT),
            maintenance=_number(qualifiers.get("maintenance-weight"), defaults.weights.maintenance, MAX_WEIGHT),
        ),
        from_=_integer(from_, "from", default=0, minimum=0, maximum=defaults.max_from),
        size=_integer(size, "size", default=defaults.size, minimum=1, maximum=defaults.max_size),
    )


def _single(token: QualifierToken) -> QualifierValue:
    """Return the only value of a single-valued qualifier."""
    if len(token.values) != 1:
        raise InvalidParameter(f"{token.key} accepts a single value", param=token.key)
    return token.values[0]


def _identity(token: QualifierToken | None) -> str | None:
    if token is None:
        return None
    value = _single(token)
    if value.negated:
        raise InvalidParameter(f"{token.key} does not support negation", param=token.key)
    return _lowered(value.value, token.key, MAX_TEXT_LENGTH)


def _scope(token: QualifierToken | None) -> str | None:
    scope = _identity(token)
    if scope is None:
        return None
    scope = scope.lstrip("@")
    if not scope:
        raise InvalidParameter("scope must not be empty", param="scope")
    return scope


def _keywords(token: QualifierToken | None) -> Keywords:
    if token is None:
        return Keywords()
    if len(token.values) > MAX_KEYWORDS:
        raise InvalidParameter(f"keywords accepts at most {MAX_KEYWORDS} values", param="keywords")

    include: set[str] = set()
    require: set[str] = set()
    exclude: set[str] = set()
    for value in token.values:
        keyword = _lowered(value.value, "keywords", MAX_KEYWORD_LENGTH)
        if value.negated:
            exclude.add(keyword)
        elif value.required:
            require.add(keyword)
        else:
            include.add(keyword)

    collision = (include | require) & exclude
    if collision:
        raise InvalidParameter(
            f"keywords cannot be both included and excluded: {', '.join(sorted(collision))}",
            param="keywords",
        )
    return Keywords(include=frozenset(include), require=frozenset(require), exclude=frozenset(exclude))


def _flags(
    is_token: QualifierToken | None,
    not_token: QualifierToken | None,
    vocabulary: frozenset[str],
) -> Flags:
    present: set[str] = set()
    absent: set[str] = set()

    for token, positive, negative in ((is_token, present, absent), (not_token, absent, present)):
        if token is None:
            continue
        for value in token.values:
            flag = value.value.strip().lower()
            if flag not in vocabulary:
                raise InvalidParameter(
                    f"{token.key} must be one of {sorted(vocabulary)}, got: {value.value}",
                    param=token.key,
                )
            (negative if value.negated else positive).add(flag)

    collision = present & absent
    if collision:
        raise InvalidParameter(
            f"flags cannot be both required and excluded: {', '.join(sorted(collision))}",
            param="is",
        )
    return Flags(is_=frozenset(present), not_=frozenset(absent))


def _boolean(token: QualifierToken | None, default: bool) -> bool:
    if token is None:
        return default
    value = _single(token)
    normalized = value.value.strip().lower()
    if value.negated or normalized not in ("true", "false"):
        raise InvalidParameter(f"{token.key} must be true or false", param=token.key)
    return normalized == "true"


def _number(token: QualifierToken | None, default: float, maximum: float) -> float:
    if token is None:
        return default
    value = _single(token)
    raw = f"-{value.value}" if value.negated else value.value
    try:
        number = float(raw)
    except ValueError:
        raise InvalidParameter(f"{token.key} must be a number", param=token.key) from None
    if not math.isfinite(number) or not 0 <= number <= maximum:
        raise InvalidParameter(f"{token.key} must be between 0 and {maximum:g}", param=token.key)
    return number


def _integer(value: Any, name: str, *, default: int, minimum: int, maximum: int) -> int:
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    if isinstance(value, bool):
        raise InvalidParameter(f"{name} must be an integer", param=name)
    if isinstance(value, int):
        number = value
    elif isinstance(value, float) and value.is_integer():
        number = int(value)
    elif isinstance(value, str):
        try:
            number = int(value.strip())
        except ValueError:
            raise InvalidParameter(f"{name} must be an integer", param=name) from None
    else:
        raise InvalidParameter(f"{name} must be an integer", param=name)
    if not minimum <= number <= maximum:
        raise InvalidParameter(f"{name} must be between {minimum} and {maximum}", param=name)
    return number


def _lowered(value: str, name: str, max_length: int) -> str:
    normalized = value.strip().lower()
    if not normalized:
        raise InvalidParameter(f"{name} must not be empty", param=name)
    if len(normalized) > max_length:
        raise InvalidParameter(f"{name} values must be at most {max_length} characters", param=name)
    return normalized


def validate_suggestion(
    term: Any,
    *,
    size: Any = None,
    default_size: int = 25,
    max_size: int = 100,
) -> tuple[str, int]:
    """Validate the parameters of an as-you-type suggestion request.

    Args:
        term: Partial package name typed so far.
        size: Optional number of suggestions.
        default_size: Size used when ``size`` is omitted.
        max_size: Largest accepted size.

    Returns:
        Trimmed, lower-cased term and the page size.

    Raises:
        InvalidParameter: If the term is empty or too long, or size is out of range.
    """
    if not isinstance(term, str):
        raise InvalidParameter("term must be a string", param="term")
    normalized = _lowered(term, "term", MAX_TERM_LENGTH)
    return normalized, _integer(size, "size", default=default_size, minimum=1, maximum=max_size)
