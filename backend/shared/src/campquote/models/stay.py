"""Stay window model."""

import datetime as dt
from collections.abc import Iterator

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .errors import InvalidStayWindowError


class StayWindow(BaseModel):
    """Arrival and (exclusive) departure dates of a stay."""

    model_config = ConfigDict(frozen=True)

    arrival: dt.date = Field(..., description="Arrival date (first night)")
    departure: dt.date = Field(..., description="Departure date (exclusive)")

    @model_validator(mode="after")
    def _check_order(self) -> "StayWindow":
        if self.departure <= self.arrival:
            raise InvalidStayWindowError(
                details={
                    "arrival": self.arrival.isoformat(),
                    "departure": self.departure.isoformat(),
                }
            )
        return self

    @property
    def nights(self) -> int:
        return (self.departure - self.arrival).days

    def dates(self) -> Iterator[dt.date]:
        """Yield the date of each night of the stay."""
        for offset in range(self.nights):
            yield self.arrival + dt.timedelta(days=offset)
