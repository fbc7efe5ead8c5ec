from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Sequence


FLAG_VOCABULARY: frozenset[str] = frozenset({"deprecated", "unstable", "insecure"})


@dataclass(frozen=True, slots=True)
class QualifierValue:
    """One sub-value of a ``key:value`` qualifier.

    Attributes:
        value: Raw sub-value text without the negation prefix.
        negated: Whether the sub-value carried a leading ``-``.
        required: Whether the sub-value was joined with ``+`` (all-of group)
            rather than listed with ``,`` (any-of alternatives).
    """

    value: str
    negated: bool = False
    required: bool = False


@dataclass(frozen=True, slots=True)
class QualifierToken:
    """All values collected for one qualifier key, in order of appearance."""

    key: str
    values: Sequence[QualifierValue] = ()


@dataclass(frozen=True, slots=True)
class Tokenized:
    """Tokenizer output: free-text remainder plus qualifiers by key."""

    text: str
    qualifiers: Mapping[str, QualifierToken] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Keywords:
    """Keyword filters.

    The keys are intentionally explicit:

    - `include`: any of these keywords must be present
    - `require`: all of these keywords must be present
    - `exclude`: none of these keywords may be present
    """

    include: frozenset[str] = frozenset()
    require: frozenset[str] = frozenset()
    exclude: frozenset[str] = frozenset()

    def __bool__(self) -> bool:
        return bool(self.include or self.require or self.exclude)


@dataclass(frozen=True, slots=True)
class Flags:
    """Flag presence (`is_`) and absence (`not_`) requirements."""

    is_: frozenset[str] = frozenset()
    not_: frozenset[str] = frozenset()

    def __bool__(self) -> bool:
        return bool(self.is_ or self.not_)


@dataclass(frozen=True, slots=True)
class Weights:
    """Raw, pre-normalization ranking weights."""

    quality: float
    popularity: float
    maintenance: float


@dataclass(frozen=True, slots=True)
class NormalizedWeights:
    """Ranking weights rescaled into a convex combination (sum == 1)."""

    quality: float
    popularity: float
    maintenance: float


@dataclass(frozen=True, slots=True)
class ParsedParams:
    """Canonical, fully validated search request.

    Built once per request by the validator and passed down the compiler
    pipeline by value; no stage mutates it.

    Attributes:
        text: Trimmed, lower-cased free text, or None when only qualifiers
            were given.
        author: Author identity filter.
        maintainer: Maintainer identity filter.
        scope: Package scope filter (without the leading ``@``).
        keywords: Keyword include/require/exclude sets.
        flags: Flag presence/absence sets.
        boost_exact: Whether an exact name match short-circuits scoring.
        score_effect: Exponent applied to the weighted quality blend.
        weights: Raw ranking weights as supplied or defaulted.
        from_: Result offset.
        size: Page size.
    """

    text: str | None
    author: str | None
    maintainer: str | None
    scope: str | None
    keywords: Keywords
    flags: Flags
    boost_exact: bool
    score_effect: float
    weights: Weights
    from_: int
    size: int
