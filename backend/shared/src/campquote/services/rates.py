"""Base nightly rate resolution.

For each night the most specific active rate wins:
site-specific seasonal override > site-class seasonal override > site-class
default. Quoting stops with RateResolutionError if any night has no rate.
"""

import datetime as dt

from pydantic import BaseModel, ConfigDict

from campquote.models import (
    PricingSnapshot,
    RateResolutionError,
    RateSource,
    SeasonalRate,
    SiteNotFoundError,
    StayWindow,
)


class ResolvedNight(BaseModel):
    """Base rate for one night and where it came from."""

    model_config = ConfigDict(frozen=True)

    date: dt.date
    rate_cents: int
    source: RateSource


class ResolvedRates(BaseModel):
    """Per-night base rates for a stay."""

    model_config = ConfigDict(frozen=True)

    site_class_id: str
    nights: tuple[ResolvedNight, ...]

    @property
    def base_subtotal_cents(self) -> int:
        return sum(n.rate_cents for n in self.nights)


def _pick_override(candidates: list[SeasonalRate]) -> SeasonalRate | None:
    """Most recently starting override wins; ties go to the lowest rate_id."""
    if not candidates:
        return None
    return sorted(candidates, key=lambda r: (-r.start_date.toordinal(), r.rate_id))[0]


class RateResolver:
    """Resolves base nightly rates from a configuration snapshot."""

    def __init__(self, snapshot: PricingSnapshot) -> None:
        self.snapshot = snapshot

    def resolve_site_class(
        self,
        site_id: str | None = None,
        site_class_id: str | None = None,
    ) -> str:
        """Return the site class for a site, or validate a given site class.

        Raises:
            SiteNotFoundError: If the site or site class is unknown
        """
        if site_id is not None:
            site = self.snapshot.find_site(site_id)
            if site is None:
                raise SiteNotFoundError(details={"site_id": site_id})
            site_class_id = site.site_class_id

        if site_class_id is None or self.snapshot.find_site_class(site_class_id) is None:
            raise SiteNotFoundError(details={"site_class_id": str(site_class_id)})

        return site_class_id

    def resolve_night(
        self,
        night: dt.date,
        site_class_id: str,
        site_id: str | None = None,
    ) -> ResolvedNight:
        """Resolve the base rate for a single night.

        Raises:
            RateResolutionError: If no rate is configured for the night
        """
        covering = [
            r
            for r in self.snapshot.seasonal_rates
            if r.site_class_id == site_class_id and r.covers(night)
        ]

        if site_id is not None:
            override = _pick_override([r for r in covering if r.site_id == site_id])
            if override is not None:
                return ResolvedNight(
                    date=night, rate_cents=override.nightly_rate_cents, source=RateSource.SITE_OVERRIDE
                )

        override = _pick_override([r for r in covering if r.site_id is None])
        if override is not None:
            return ResolvedNight(
                date=night, rate_cents=override.nightly_rate_cents, source=RateSource.CLASS_OVERRIDE
            )

        site_class = self.snapshot.find_site_class(site_class_id)
        if site_class is not None and site_class.default_rate_cents is not None:
            return ResolvedNight(
                date=night, rate_cents=site_class.default_rate_cents, source=RateSource.CLASS_DEFAULT
            )

        raise RateResolutionError(
            details={"site_class_id": site_class_id, "night": night.isoformat()}
        )

    def resolve(
        self,
        stay: StayWindow,
        site_class_id: str,
        site_id: str | None = None,
    ) -> ResolvedRates:
        """Resolve base rates for every night of a stay."""
        nights = tuple(
            self.resolve_night(night, site_class_id, site_id) for night in stay.dates()
        )
        return ResolvedRates(site_class_id=site_class_id, nights=nights)
