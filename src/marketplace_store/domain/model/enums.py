"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class Vendor(StrEnum):
    ADOPTIUM = "adoptium"
    ALIBABA = "alibaba"
    AZUL = "azul"
    HUAWEI = "huawei"
    IBM = "ibm"
    MICROSOFT = "microsoft"
    REDHAT = "redhat"


class UpsertOutcome(StrEnum):
    """What a single-document upsert did to the store."""

    INSERTED = "inserted"
    MODIFIED = "modified"
    UNCHANGED = "unchanged"
