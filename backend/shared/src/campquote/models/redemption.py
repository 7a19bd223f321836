"""Models for recording promotion and referral usage at booking confirmation."""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RedemptionRequest(BaseModel):
    """Discount usage to record for a confirmed booking."""

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "examples": [
                {
                    "campground_id": "cg-riverbend",
                    "booking_id": "BK-2025-000123",
                    "promotion_id": "promo-summer10",
                    "referral_program_id": None,
                }
            ]
        },
    )

    campground_id: str = Field(..., min_length=1)
    booking_id: str = Field(
        ..., min_length=1, description="Idempotency key: one redemption per booking"
    )
    promotion_id: str | None = None
    referral_program_id: str | None = None

    @model_validator(mode="after")
    def _check_something_to_redeem(self) -> "RedemptionRequest":
        if self.promotion_id is None and self.referral_program_id is None:
            raise ValueError("promotion_id or referral_program_id is required")
        return self


class RedemptionResult(BaseModel):
    """Outcome of a redemption attempt."""

    model_config = ConfigDict(strict=True, frozen=True)

    booking_id: str
    campground_id: str
    promotion_id: str | None = None
    referral_program_id: str | None = None
    redeemed_at: dt.datetime
    duplicate: bool = Field(
        default=False,
        description="True when this booking was already redeemed; counters unchanged",
    )
