"""
Core domain models for location suggestions.
These are framework-agnostic and can be used across all services.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class LocationKind(str, Enum):
    """What kind of place a suggestion refers to."""
    CITY = "city"
    REMOTE = "remote"
    UNKNOWN = "unknown"  # provider returned a type we don't map yet


class SuggestionOrigin(str, Enum):
    """
    Which tier produced a suggestion.

    Only used for UI affordances (the "popular" / fast marker) and for the
    local-before-remote ordering rule.
    """
    LOCAL = "local"
    REMOTE = "remote"


@dataclass(frozen=True)
class LocationEntry:
    """A curated place in the built-in dataset."""
    name: str
    country_code: str  # ISO-like code, or "REMOTE" / "EU" / "GLOBAL"
    kind: LocationKind = LocationKind.CITY


@dataclass(frozen=True)
class Suggestion:
    """
    A single autocomplete suggestion.

    `name` is the value committed to the form field on selection and the key
    used for de-duplication. `display_name` is the longer descriptive text,
    shown as secondary text when it differs from `name`.
    """
    display_name: str
    name: str
    kind: LocationKind
    origin: SuggestionOrigin

    @property
    def is_local(self) -> bool:
        return self.origin == SuggestionOrigin.LOCAL

    @classmethod
    def from_entry(cls, entry: LocationEntry) -> "Suggestion":
        return cls(
            display_name=entry.name,
            name=entry.name,
            kind=entry.kind,
            origin=SuggestionOrigin.LOCAL,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "display_name": self.display_name,
            "name": self.name,
            "kind": self.kind.value,
            "origin": self.origin.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Suggestion":
        try:
            kind = LocationKind(data.get("kind"))
        except ValueError:
            kind = LocationKind.UNKNOWN
        return cls(
            display_name=data.get("display_name") or data.get("name", ""),
            name=data.get("name", ""),
            kind=kind,
            origin=SuggestionOrigin(data.get("origin", SuggestionOrigin.REMOTE.value)),
        )
