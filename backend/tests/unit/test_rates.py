"""Unit tests for base nightly rate resolution.

Precedence per night:
- site-specific seasonal rate
- site-class seasonal rate
- site-class default rate
"""

import datetime as dt

import pytest

from campquote.models import (
    RateResolutionError,
    RateSource,
    SeasonalRate,
    SiteClass,
    SiteNotFoundError,
    StayWindow,
)
from campquote.services.rates import RateResolver

SITE_CLASS_ID = "rv-full"
SITE_ID = "site-a1"
STAY = StayWindow(arrival=dt.date(2025, 6, 5), departure=dt.date(2025, 6, 8))


def _rate(rate_id: str, cents: int, start: str, end: str, **kwargs) -> SeasonalRate:
    return SeasonalRate(
        rate_id=rate_id,
        site_class_id=SITE_CLASS_ID,
        start_date=start,
        end_date=end,
        nightly_rate_cents=cents,
        **kwargs,
    )


class TestDefaultRates:
    """Tests for the site-class default rate."""

    def test_scenario_a_default_rate_for_every_night(self, make_snapshot) -> None:
        """$50/night for 3 nights gives a 15000 cent subtotal."""
        resolved = RateResolver(make_snapshot()).resolve(STAY, SITE_CLASS_ID)

        assert [n.rate_cents for n in resolved.nights] == [5000, 5000, 5000]
        assert all(n.source == RateSource.CLASS_DEFAULT for n in resolved.nights)
        assert resolved.base_subtotal_cents == 15000

    def test_nights_are_consecutive_dates(self, make_snapshot) -> None:
        resolved = RateResolver(make_snapshot()).resolve(STAY, SITE_CLASS_ID)

        assert [n.date for n in resolved.nights] == [
            dt.date(2025, 6, 5),
            dt.date(2025, 6, 6),
            dt.date(2025, 6, 7),
        ]

    def test_missing_rate_is_fatal(self, make_snapshot) -> None:
        """A site class without default or override cannot be quoted."""
        snapshot = make_snapshot(
            site_classes=[SiteClass(site_class_id=SITE_CLASS_ID, default_rate_cents=None)]
        )

        with pytest.raises(RateResolutionError) as exc_info:
            RateResolver(snapshot).resolve(STAY, SITE_CLASS_ID)

        assert exc_info.value.details == {
            "site_class_id": SITE_CLASS_ID,
            "night": "2025-06-05",
        }

    def test_gap_in_overrides_without_default_is_fatal(self, make_snapshot) -> None:
        """Overrides that miss one night still fail the whole stay."""
        snapshot = make_snapshot(
            site_classes=[SiteClass(site_class_id=SITE_CLASS_ID)],
            seasonal_rates=[_rate("june-a", 6000, "2025-06-01", "2025-06-06")],
        )

        with pytest.raises(RateResolutionError) as exc_info:
            RateResolver(snapshot).resolve(STAY, SITE_CLASS_ID)

        assert exc_info.value.details["night"] == "2025-06-07"


class TestSeasonalOverrides:
    """Tests for seasonal rate precedence."""

    def test_class_override_replaces_default(self, make_snapshot) -> None:
        snapshot = make_snapshot(
            seasonal_rates=[_rate("fri", 6000, "2025-06-06", "2025-06-06")]
        )

        resolved = RateResolver(snapshot).resolve(STAY, SITE_CLASS_ID)

        assert [n.rate_cents for n in resolved.nights] == [5000, 6000, 5000]
        assert resolved.nights[1].source == RateSource.CLASS_OVERRIDE

    def test_end_date_is_inclusive(self, make_snapshot) -> None:
        snapshot = make_snapshot(
            seasonal_rates=[_rate("thu-fri", 5500, "2025-06-05", "2025-06-06")]
        )

        resolved = RateResolver(snapshot).resolve(STAY, SITE_CLASS_ID)

        assert [n.rate_cents for n in resolved.nights] == [5500, 5500, 5000]

    def test_site_override_outranks_class_override(self, make_snapshot) -> None:
        snapshot = make_snapshot(
            seasonal_rates=[
                _rate("class", 6000, "2025-06-01", "2025-06-30"),
                _rate("site", 7000, "2025-06-01", "2025-06-30", site_id=SITE_ID),
            ]
        )
        resolver = RateResolver(snapshot)

        with_site = resolver.resolve(STAY, SITE_CLASS_ID, site_id=SITE_ID)
        without_site = resolver.resolve(STAY, SITE_CLASS_ID)

        assert {n.rate_cents for n in with_site.nights} == {7000}
        assert {n.source for n in with_site.nights} == {RateSource.SITE_OVERRIDE}
        assert {n.rate_cents for n in without_site.nights} == {6000}

    def test_other_site_override_is_ignored(self, make_snapshot) -> None:
        snapshot = make_snapshot(
            seasonal_rates=[
                _rate("site-b", 9000, "2025-06-01", "2025-06-30", site_id="site-b2"),
            ]
        )

        resolved = RateResolver(snapshot).resolve(STAY, SITE_CLASS_ID, site_id=SITE_ID)

        assert {n.rate_cents for n in resolved.nights} == {5000}

    def test_inactive_override_is_ignored(self, make_snapshot) -> None:
        snapshot = make_snapshot(
            seasonal_rates=[
                _rate("off", 9000, "2025-06-01", "2025-06-30", is_active=False)
            ]
        )

        resolved = RateResolver(snapshot).resolve(STAY, SITE_CLASS_ID)

        assert resolved.base_subtotal_cents == 15000

    def test_latest_starting_override_wins(self, make_snapshot) -> None:
        snapshot = make_snapshot(
            seasonal_rates=[
                _rate("june", 5500, "2025-06-01", "2025-06-30"),
                _rate("festival", 6500, "2025-06-06", "2025-06-10"),
            ]
        )

        resolved = RateResolver(snapshot).resolve(STAY, SITE_CLASS_ID)

        assert [n.rate_cents for n in resolved.nights] == [5500, 6500, 6500]

    def test_same_start_ties_go_to_lowest_rate_id(self, make_snapshot) -> None:
        snapshot = make_snapshot(
            seasonal_rates=[
                _rate("b-rate", 5200, "2025-06-01", "2025-06-30"),
                _rate("a-rate", 5100, "2025-06-01", "2025-06-30"),
            ]
        )

        resolved = RateResolver(snapshot).resolve(STAY, SITE_CLASS_ID)

        assert {n.rate_cents for n in resolved.nights} == {5100}


class TestSiteClassResolution:
    """Tests for resolving the site class of a request."""

    def test_site_resolves_to_its_class(self, make_snapshot) -> None:
        resolver = RateResolver(make_snapshot())

        assert resolver.resolve_site_class(site_id=SITE_ID) == SITE_CLASS_ID

    def test_site_class_is_validated(self, make_snapshot) -> None:
        resolver = RateResolver(make_snapshot())

        assert resolver.resolve_site_class(site_class_id=SITE_CLASS_ID) == SITE_CLASS_ID

    def test_unknown_site_raises(self, make_snapshot) -> None:
        with pytest.raises(SiteNotFoundError) as exc_info:
            RateResolver(make_snapshot()).resolve_site_class(site_id="nope")

        assert exc_info.value.details == {"site_id": "nope"}

    def test_unknown_site_class_raises(self, make_snapshot) -> None:
        with pytest.raises(SiteNotFoundError):
            RateResolver(make_snapshot()).resolve_site_class(site_class_id="tent")
