"""Tests for the town record model."""

from __future__ import annotations

import math

import pytest
from pydantic import ValidationError

from townsync.models.town import Language, TownRecord, is_link


class TestTownRecord:
    def test_defaults(self) -> None:
        record = TownRecord(name="Cocula", latitude=20.36, longitude=-103.82)

        assert record.distance_label == "N/A"
        assert record.route_url == "#"
        assert record.tourism_url == "#"
        assert record.has_route_url is False
        assert record.has_tourism_url is False

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TownRecord(name="   ", latitude=1.0, longitude=1.0)

    @pytest.mark.parametrize("bad", [math.inf, -math.inf, math.nan])
    def test_non_finite_coordinates_rejected(self, bad: float) -> None:
        with pytest.raises(ValidationError):
            TownRecord(name="Cocula", latitude=bad, longitude=1.0)

    def test_frozen(self) -> None:
        record = TownRecord(name="Cocula", latitude=20.36, longitude=-103.82)
        with pytest.raises(ValidationError):
            record.name = "Other"  # type: ignore[misc]

    def test_empty_url_becomes_sentinel(self) -> None:
        record = TownRecord(name="Cocula", latitude=1.0, longitude=1.0, route_url="", tourism_url="  ")
        assert record.route_url == "#"
        assert record.tourism_url == "#"

    def test_security_advisory_by_language(self) -> None:
        record = TownRecord(
            name="Mascota",
            latitude=20.52,
            longitude=-104.79,
            security_advisory_local="Local",
            security_advisory_foreign="Foreign",
        )
        assert record.security_advisory() == "Local"
        assert record.security_advisory(Language.EN) == "Foreign"
        assert record.security_advisory("es") == "Local"


def test_is_link() -> None:
    assert is_link("https://example.com") is True
    assert is_link("#") is False
    assert is_link(" ") is False
