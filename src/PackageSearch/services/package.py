"""Package info service: merges document-store metadata with index scores."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping, Protocol, Sequence

from PackageSearch.core.errors import InvalidParameter, NotFound
from PackageSearch.core.models import PackageInfo
from PackageSearch.utils.log import log

MAX_NAME_LENGTH = 214
MAX_MGET_NAMES = 250

_NAME_RE = re.compile(r"^(?:@[a-z0-9-~][a-z0-9-._~]*/)?[a-z0-9-~][a-z0-9-._~]*$")
_RESERVED_NAMES = frozenset({"node_modules", "favicon.ico"})


class ScoreSource(Protocol):
    def fetch_scores(self, names: Sequence[str], *, timeout: float | None = None) -> list[Mapping[str, Any] | None]:
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError


class MetadataSource(Protocol):
    def fetch_metadata(self, names: Sequence[str], *, timeout: float | None = None) -> list[Mapping[str, Any] | None]:
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError


def validate_package_name(name: Any) -> str:
    """Validate an npm package name.

    Args:
        name: Candidate name; surrounding whitespace is trimmed.

    Returns:
        The trimmed name.

    Raises:
        InvalidParameter: If the name could not be published to the registry.
    """
    if not isinstance(name, str):
        raise InvalidParameter("name must be a string", param="name")
    name = name.strip()
    if not name:
        raise InvalidParameter("name length must be greater than zero", param="name")
    if name.startswith((".", "_")):
        raise InvalidParameter(f'name cannot start with a period or an underscore ("{name}")', param="name")
    if len(name) > MAX_NAME_LENGTH:
        raise InvalidParameter(f'name can no longer contain more than {MAX_NAME_LENGTH} characters ("{name}")', param="name")
    if name in _RESERVED_NAMES:
        raise InvalidParameter(f'{name} is a blacklisted name ("{name}")', param="name")
    if name.lower() != name:
        raise InvalidParameter(f'name can no longer contain capital letters ("{name}")', param="name")
    if not _NAME_RE.match(name):
        raise InvalidParameter(f'name can only contain URL-friendly characters ("{name}")', param="name")
    return name


@dataclass(slots=True)
class PackageInfoService:
    """Application service answering package info lookups."""

    scores: ScoreSource
    metadata: MetadataSource

    def info(self, name: Any, *, timeout: float | None = None) -> PackageInfo:
        """Return merged info for one package.

        Raises:
            InvalidParameter: If the name is invalid.
            NotFound: If either backend has no record of the package.
            UpstreamUnavailable: If a backend fails.
        """
        valid = validate_package_name(name)
        infos = self._fetch([valid], timeout=timeout)
        if infos[0] is None:
            raise NotFound(f"Package not found: {valid}")
        return infos[0]

    def mget(self, names: Sequence[Any], *, timeout: float | None = None) -> dict[str, PackageInfo]:
        """Return merged info for several packages, keyed by name.

        Packages missing from either backend are omitted.

        Raises:
            InvalidParameter: If the list is empty, too long, or holds an
                invalid name.
            UpstreamUnavailable: If a backend fails.
        """
        unique = list(dict.fromkeys(validate_package_name(name) for name in names))
        if not unique:
            raise InvalidParameter("names must contain at least 1 item", param="names")
        if len(unique) > MAX_MGET_NAMES:
            raise InvalidParameter(f"names must contain at most {MAX_MGET_NAMES} items", param="names")

        infos = self._fetch(unique, timeout=timeout)
        return {info.name: info for info in infos if info is not None}

    def close(self) -> None:
        self.scores.close()
        self.metadata.close()

    def _fetch(self, names: list[str], *, timeout: float | None) -> list[PackageInfo | None]:
        log.debug("Will fetch info names=%s", names)
        metadata = self.metadata.fetch_metadata(names, timeout=timeout)
        scores = self.scores.fetch_scores(names, timeout=timeout)

        infos: list[PackageInfo | None] = []
        for name, meta, score in zip(names, metadata, scores):
            if meta is None or score is None:
                infos.append(None)
                continue
            infos.append(
                PackageInfo(
                    name=name,
                    analyzed_at=meta.get("analyzedAt"),
                    collected=meta.get("collected") or {},
                    evaluation=meta.get("evaluation") or {},
                    score=score,
                )
            )
        log.debug("Got info found=%d/%d", sum(info is not None for info in infos), len(names))
        return infos
