"""Query string tokenizer.

Splits a raw query such as::

    react keywords:gulpplugin,-legacy author:sindresorhus

into the free-text remainder (``react``) and qualifier tokens.

Rules
- Segments are whitespace-delimited; a double-quoted run stays one segment.
- ``key:value`` with a recognized key is a qualifier. Keys are case-folded.
- In a value list, ``,`` separates alternatives (any-of) and ``+`` joins
  values that are all required (all-of). Numeric and boolean keys keep
  ``+`` as part of the value. An empty member of a value list is an error.
- A leading ``-`` on a sub-value negates it without changing its key.
- Segments with an unrecognized key are folded back into the free text, or
  rejected, depending on the ``unknown`` policy.
"""

from __future__ import annotations

import re
from typing import Final

from PackageSearch.core.errors import InvalidParameter
from PackageSearch.core.query import QualifierToken, QualifierValue, Tokenized

QUALIFIER_KEYS: Final[tuple[str, ...]] = (
    "author",
    "maintainer",
    "scope",
    "keywords",
    "is",
    "not",
    "boost-exact",
    "score-effect",
    "quality-weight",
    "popularity-weight",
    "maintenance-weight",
)

# Single-valued numeric and boolean keys; "+" is literal in their values.
SCALAR_KEYS: Final[frozenset[str]] = frozenset(
    {"boost-exact", "score-effect", "quality-weight", "popularity-weight", "maintenance-weight"}
)

UNKNOWN_FOLD: Final = "fold"
UNKNOWN_REJECT: Final = "reject"
UNKNOWN_POLICIES: Final[frozenset[str]] = frozenset({UNKNOWN_FOLD, UNKNOWN_REJECT})

_SEGMENT_RE = re.compile(r'(?:[^\s"]+|"[^"]*")+')
_QUALIFIER_RE = re.compile(r"^([A-Za-z][A-Za-z0-9_-]*):(.*)$", re.DOTALL)
_ALTERNATIVE_RE = re.compile(r'(?:[^,"]+|"[^"]*")+')


def tokenize(raw: str, *, unknown: str = UNKNOWN_FOLD) -> Tokenized:
    """Split a raw query string into free text and qualifier tokens.

    Args:
        raw: Caller-supplied query string.
        unknown: Policy for unrecognized ``key:value`` segments, either
            ``"fold"`` (keep them as free text) or ``"reject"``.

    Returns:
        Free text joined with single spaces, and qualifiers keyed by name.
        Tokens repeating a key are merged in order of appearance.

    Raises:
        InvalidParameter: If a recognized qualifier has no value, or an
            unknown qualifier is found under the ``reject`` policy.
        ValueError: If ``unknown`` is not a known policy.
    """
    if unknown not in UNKNOWN_POLICIES:
        raise ValueError(f"Unsupported unknown-qualifier policy: {unknown}")

    text_parts: list[str] = []
    collected: dict[str, list[QualifierValue]] = {}

    for match in _SEGMENT_RE.finditer(raw or ""):
        segment = match.group(0)
        qualifier = _QUALIFIER_RE.match(segment)
        if qualifier is None:
            _append_text(text_parts, segment)
            continue

        key = qualifier.group(1).lower()
        if key not in QUALIFIER_KEYS:
            if unknown == UNKNOWN_REJECT:
                raise InvalidParameter(f"Unknown qualifier: {key}", param=key)
            _append_text(text_parts, segment)
            continue

        values = _split_values(key, qualifier.group(2))
        if not values:
            raise InvalidParameter(f"Qualifier {key} requires a value", param=key)
        collected.setdefault(key, []).extend(values)

    qualifiers = {key: QualifierToken(key=key, values=tuple(values)) for key, values in collected.items()}
    return Tokenized(text=" ".join(text_parts), qualifiers=qualifiers)


def discard_qualifiers(raw: str) -> str:
    """Return only the free-text part of a query, dropping every qualifier.

    Unknown qualifiers are kept as text, matching ``tokenize`` under the
    fold policy. Malformed recognized qualifiers are dropped instead of
    raising, since no parameter is being validated here.
    """
    text_parts: list[str] = []
    for match in _SEGMENT_RE.finditer(raw or ""):
        segment = match.group(0)
        qualifier = _QUALIFIER_RE.match(segment)
        if qualifier is not None and qualifier.group(1).lower() in QUALIFIER_KEYS:
            continue
        _append_text(text_parts, segment)
    return " ".join(text_parts)


def _append_text(parts: list[str], segment: str) -> None:
    text = _unquote(segment).strip()
    if text:
        parts.append(" ".join(text.split()))


def _split_values(key: str, raw_value: str) -> list[QualifierValue]:
    """Split a qualifier value list into negation-aware sub-values.

    Raises:
        InvalidParameter: If a ``+`` group has an empty member or a value is
            empty after its ``-`` prefix.
    """
    values: list[QualifierValue] = []
    for alternative in _ALTERNATIVE_RE.findall(raw_value):
        if key in SCALAR_KEYS:
            conjuncts = [alternative.strip()]
        else:
            conjuncts = _split_conjuncts(alternative)
        required = len(conjuncts) > 1
        if required and not all(conjuncts):
            raise InvalidParameter(f"Qualifier {key} has an empty value around '+': {alternative}", param=key)
        for part in conjuncts:
            negated = part.startswith("-")
            value = _unquote(part[1:] if negated else part).strip()
            if not value:
                raise InvalidParameter(f"Qualifier {key} has an empty value: {alternative}", param=key)
            values.append(QualifierValue(value=value, negated=negated, required=required))
    return values


def _split_conjuncts(alternative: str) -> list[str]:
    """Split on ``+`` outside double quotes, keeping empty members."""
    parts = [""]
    quoted = False
    for char in alternative:
        if char == '"':
            quoted = not quoted
        if char == "+" and not quoted:
            parts.append("")
        else:
            parts[-1] += char
    return [part.strip() for part in parts]


def _unquote(text: str) -> str:
    return text.replace('"', "")
