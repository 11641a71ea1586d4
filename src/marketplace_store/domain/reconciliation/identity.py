"""Identity predicates locating the stored counterpart of a release.

A matcher is the conjunction of the release's required fields and of those
optional version components that are *present* on the release. Absent
components contribute no term at all, so matching is asymmetric: a matcher
built from a release without ``patch`` matches stored documents with any
``patch`` value, including ones where it is set.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from marketplace_store.domain.model import Release

TermValue: TypeAlias = str | int


@dataclass(frozen=True, slots=True)
class MatchTerm:
    """Equality constraint on one (dotted) document field."""

    field: str
    value: TermValue

    def matches(self, release: Release) -> bool:
        return _resolve(release, self.field) == self.value


def optional_term(field: str, value: TermValue | None) -> MatchTerm | None:
    if value is None:
        return None
    return MatchTerm(field, value)


@dataclass(frozen=True, slots=True)
class ReleaseMatcher:
    terms: tuple[MatchTerm, ...]

    @classmethod
    def for_release(cls, release: Release) -> ReleaseMatcher:
        version = release.version_data
        required = (
            MatchTerm("release_name", release.release_name),
            MatchTerm("release_link", release.release_link),
            MatchTerm("vendor", release.vendor),
            MatchTerm("version_data.openjdk_version", version.openjdk_version),
            MatchTerm("version_data.major", version.major),
        )
        optional = (
            optional_term("version_data.build", version.build),
            optional_term("version_data.minor", version.minor),
            optional_term("version_data.pre", version.pre),
            optional_term("version_data.optional", version.optional),
            optional_term("version_data.patch", version.patch),
            optional_term("version_data.security", version.security),
        )
        return cls(required + tuple(term for term in optional if term is not None))

    @property
    def fields(self) -> tuple[str, ...]:
        return tuple(term.field for term in self.terms)

    def matches(self, release: Release) -> bool:
        return all(term.matches(release) for term in self.terms)


def _resolve(release: Release, path: str) -> object:
    target: object = release
    for part in path.split("."):
        target = getattr(target, part)
    return target


__all__ = ["MatchTerm", "ReleaseMatcher", "TermValue", "optional_term"]
