"""Town record and info panel models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from townsync._constants import (
    DEFAULT_ADVISORY_FOREIGN,
    DEFAULT_ADVISORY_LOCAL,
    DEFAULT_DISTANCE_LABEL,
    URL_SENTINEL,
)


class Language(StrEnum):
    """Display language of the info panel."""

    ES = "es"
    EN = "en"


def is_link(value: str) -> bool:
    """Return ``True`` when *value* is a usable URL (not empty, not ``#``)."""
    stripped = value.strip()
    return bool(stripped) and stripped != URL_SENTINEL


class TownRecord(BaseModel):
    """One validated row of tourism data.

    Field order is part of the change fingerprint: the serialized form of
    a record always lists fields in declaration order.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        str_strip_whitespace=True,
    )

    name: str = Field(..., min_length=1)
    latitude: float = Field(..., allow_inf_nan=False)
    longitude: float = Field(..., allow_inf_nan=False)
    security_advisory_local: str = DEFAULT_ADVISORY_LOCAL
    security_advisory_foreign: str = DEFAULT_ADVISORY_FOREIGN
    distance_label: str = DEFAULT_DISTANCE_LABEL
    route_url: str = URL_SENTINEL
    tourism_url: str = URL_SENTINEL

    @field_validator("route_url", "tourism_url")
    @classmethod
    def _sentinel_for_empty_url(cls, value: str) -> str:
        return value or URL_SENTINEL

    @property
    def has_route_url(self) -> bool:
        return is_link(self.route_url)

    @property
    def has_tourism_url(self) -> bool:
        return is_link(self.tourism_url)

    def security_advisory(self, language: Language | str = Language.ES) -> str:
        """Advisory text in *language* (local text for Spanish, foreign otherwise)."""
        if Language(language) == Language.EN:
            return self.security_advisory_foreign
        return self.security_advisory_local


class TownInfo(BaseModel):
    """Everything an info panel needs to describe one municipality.

    ``known`` is ``False`` for municipalities that have no row in the
    current snapshot; their fields then carry the record defaults.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    language: Language
    known: bool
    distance_label: str
    security_advisory: str
    route_url: str
    tourism_url: str
    has_route_url: bool
    has_tourism_url: bool
    infographic: str | None = None
