"""Version descriptors attached to published releases."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, TypeAlias

# Order in which components take part in ``VersionData.compare_to``.
ORDERED_COMPONENTS: Final[tuple[str, ...]] = (
    "major",
    "minor",
    "security",
    "patch",
    "pre",
    "build",
    "optional",
)

_ComponentKey: TypeAlias = tuple[()] | tuple[int | str]


def _component_key(value: int | str | None) -> _ComponentKey:
    # absent components sort before any present value
    if value is None:
        return ()
    return (value,)


@dataclass(frozen=True, slots=True, kw_only=True)
class VersionData:
    """Version of a release as published by its vendor.

    ``openjdk_version`` and ``major`` are always present. Every other component
    is optional and ``None`` means "not published", which is distinct from any
    concrete value (``minor=None`` is not ``minor=0``).
    """

    openjdk_version: str
    major: int
    minor: int | None = None
    security: int | None = None
    patch: int | None = None
    build: int | None = None
    pre: str | None = None
    optional: str | None = None

    def sort_key(self) -> tuple[_ComponentKey, ...]:
        return tuple(_component_key(getattr(self, name)) for name in ORDERED_COMPONENTS)

    def compare_to(self, other: VersionData) -> int:
        """Return a negative, zero or positive number like a classic comparator.

        ``openjdk_version`` is descriptive only and does not take part.
        """

        mine = self.sort_key()
        theirs = other.sort_key()
        if mine < theirs:
            return -1
        if mine > theirs:
            return 1
        return 0


__all__ = ["ORDERED_COMPONENTS", "VersionData"]
