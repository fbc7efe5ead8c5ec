"""Filter compiler.

Compiles the structured qualifiers of a ``ParsedParams`` into a
backend-neutral predicate tree. Each backend renders the tree in its own
native syntax (see ``sources.elasticsearch.query``).

Mapping to index fields
- author     -> any of (author.name, author.username, author.email)
- maintainer -> any of (maintainers.username, maintainers.email)
- scope      -> scope
- keywords   -> keywords (any-of include, all-of require, none-of exclude)
- is / not   -> presence / absence of flags.<flag>
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Union

from PackageSearch.core.query import ParsedParams


@dataclass(frozen=True, slots=True)
class Term:
    """Exact equality on a raw (un-analyzed) field."""

    field: str
    value: str


@dataclass(frozen=True, slots=True)
class Terms:
    """Membership test: the field holds any of the values."""

    field: str
    values: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class Exists:
    """Presence test on a marker field."""

    field: str


@dataclass(frozen=True, slots=True)
class Not:
    clause: "Predicate"


@dataclass(frozen=True, slots=True)
class AllOf:
    clauses: tuple["Predicate", ...]


@dataclass(frozen=True, slots=True)
class AnyOf:
    clauses: tuple["Predicate", ...]


Predicate = Union[Term, Terms, Exists, Not, AllOf, AnyOf]


@dataclass(frozen=True, slots=True)
class FilterFields:
    """Index field names used by the filter compiler."""

    author: tuple[str, ...] = ("package.author.name", "package.author.username", "package.author.email")
    maintainer: tuple[str, ...] = ("package.maintainers.username", "package.maintainers.email")
    scope: str = "package.scope"
    keywords: str = "package.keywords"
    flag_prefix: str = "flags."

    def flag(self, name: str) -> str:
        return f"{self.flag_prefix}{name}"


DEFAULT_FILTER_FIELDS = FilterFields()


def compile_filters(params: ParsedParams, *, fields: FilterFields = DEFAULT_FILTER_FIELDS) -> Predicate | None:
    """Compile qualifier filters into a conjunctive predicate tree.

    Args:
        params: Validated request parameters.
        fields: Index field names for each filter role.

    Returns:
        ``AllOf`` every present clause, or None when no filter applies.
        Absent qualifiers contribute no clause at all.
    """
    clauses: list[Predicate] = []

    if params.author:
        clauses.append(_identity(fields.author, params.author))
    if params.maintainer:
        clauses.append(_identity(fields.maintainer, params.maintainer))
    if params.scope:
        clauses.append(Term(fields.scope, params.scope))

    keywords = params.keywords
    if keywords.include:
        clauses.append(Terms(fields.keywords, tuple(sorted(keywords.include))))
    for keyword in sorted(keywords.require):
        clauses.append(Term(fields.keywords, keyword))
    if keywords.exclude:
        clauses.append(Not(Terms(fields.keywords, tuple(sorted(keywords.exclude)))))

    for flag in sorted(params.flags.is_):
        clauses.append(Exists(fields.flag(flag)))
    for flag in sorted(params.flags.not_):
        clauses.append(Not(Exists(fields.flag(flag))))

    if not clauses:
        return None
    return AllOf(tuple(clauses))


def _identity(field_names: Sequence[str], value: str) -> Predicate:
    return AnyOf(tuple(Term(name, value) for name in field_names))
