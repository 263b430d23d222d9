from __future__ import annotations

from typing import Dict, List, Mapping


class CatalogError(Exception):
    """Base class for errors raised by the catalogue persistence layer."""


class ValidationError(CatalogError):
    """
    One or more field-level validation failures, collected over a whole record.

    ``errors`` maps a field name to its messages, e.g.
    ``{"price": ["is invalid"], "sku": ["stock warning level value ..."]}``.
    """

    def __init__(self, errors: Mapping[str, List[str]]) -> None:
        self.errors: Dict[str, List[str]] = {k: list(v) for k, v in errors.items()}
        super().__init__("Validation failed: " + ", ".join(self.full_messages()))

    def full_messages(self) -> List[str]:
        return [f"{field} {msg}" for field, msgs in self.errors.items() for msg in msgs]


class RestrictionError(CatalogError):
    """Deletion refused because dependent records still exist."""

    def __init__(self, record: str, dependent: str) -> None:
        self.record = record
        self.dependent = dependent
        super().__init__(f"Cannot delete {record} because dependent {dependent} exist")
