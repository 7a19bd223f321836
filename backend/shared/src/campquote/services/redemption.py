"""Booking-confirmation redemption of promotion and referral usage.

This is the only code that changes usage counters. Quoting never imports
it. A redemption is one DynamoDB transaction:

1. Put a redemption record keyed by booking_id (fails if it exists)
2. Increment the promotion's usage_count, guarded by its usage_limit
3. Increment the referral program's redemption_count

Repeating a booking_id returns the stored record without touching the
counters again.
"""

import datetime as dt

from campquote.models import (
    PromotionView,
    RedemptionRequest,
    RedemptionResult,
    ReferralProgram,
    UsageLimitReachedError,
)
from campquote.utils.logging import get_logger, log_redemption

from .config_store import ENTITY_TABLES, REDEMPTIONS_TABLE
from .dynamodb import DynamoDBService, get_dynamodb_service, serialize_item

logger = get_logger(__name__)


class RedemptionService:
    """Records discount usage for confirmed bookings, exactly once."""

    def __init__(self, db: DynamoDBService | None = None) -> None:
        self.db = db or get_dynamodb_service()

    def get_redemption(self, campground_id: str, booking_id: str) -> RedemptionResult | None:
        item = self.db.get_item(
            REDEMPTIONS_TABLE, {"campground_id": campground_id, "booking_id": booking_id}
        )
        if not item:
            return None
        return RedemptionResult(
            booking_id=item["booking_id"],
            campground_id=item["campground_id"],
            promotion_id=item.get("promotion_id"),
            referral_program_id=item.get("referral_program_id"),
            redeemed_at=dt.datetime.fromisoformat(item["redeemed_at"]),
        )

    def _build_transaction(
        self, request: RedemptionRequest, redeemed_at: dt.datetime
    ) -> list[dict]:
        record = {
            "campground_id": request.campground_id,
            "booking_id": request.booking_id,
            "redeemed_at": redeemed_at.isoformat(),
        }
        if request.promotion_id:
            record["promotion_id"] = request.promotion_id
        if request.referral_program_id:
            record["referral_program_id"] = request.referral_program_id

        items: list[dict] = [
            {
                "Put": {
                    "TableName": self.db.table_name(REDEMPTIONS_TABLE),
                    "Item": serialize_item(record),
                    "ConditionExpression": "attribute_not_exists(booking_id)",
                }
            }
        ]

        if request.promotion_id:
            table, range_key = ENTITY_TABLES[PromotionView]
            items.append(
                {
                    "Update": {
                        "TableName": self.db.table_name(table),
                        "Key": serialize_item(
                            {
                                "campground_id": request.campground_id,
                                range_key: request.promotion_id,
                            }
                        ),
                        "UpdateExpression": "SET usage_count = if_not_exists(usage_count, :zero) + :one",
                        "ConditionExpression": (
                            "attribute_exists(promotion_id) AND is_active = :true AND "
                            "(attribute_not_exists(usage_limit) OR usage_count < usage_limit)"
                        ),
                        "ExpressionAttributeValues": serialize_item(
                            {":zero": 0, ":one": 1, ":true": True}
                        ),
                    }
                }
            )

        if request.referral_program_id:
            table, range_key = ENTITY_TABLES[ReferralProgram]
            items.append(
                {
                    "Update": {
                        "TableName": self.db.table_name(table),
                        "Key": serialize_item(
                            {
                                "campground_id": request.campground_id,
                                range_key: request.referral_program_id,
                            }
                        ),
                        "UpdateExpression": (
                            "SET redemption_count = if_not_exists(redemption_count, :zero) + :one"
                        ),
                        "ConditionExpression": "attribute_exists(program_id) AND is_active = :true",
                        "ExpressionAttributeValues": serialize_item(
                            {":zero": 0, ":one": 1, ":true": True}
                        ),
                    }
                }
            )

        return items

    def redeem(self, request: RedemptionRequest) -> RedemptionResult:
        """Record usage for a confirmed booking.

        Args:
            request: Booking id and the promotion/referral to redeem

        Returns:
            RedemptionResult; ``duplicate`` is True when the booking was
            already redeemed

        Raises:
            UsageLimitReachedError: If the promotion is exhausted, inactive
                or missing
        """
        redeemed_at = dt.datetime.now(dt.timezone.utc)
        committed = self.db.transact_write(self._build_transaction(request, redeemed_at))

        if committed:
            log_redemption(
                logger,
                request.booking_id,
                promotion_id=request.promotion_id,
                referral_program_id=request.referral_program_id,
                result="success",
            )
            return RedemptionResult(
                booking_id=request.booking_id,
                campground_id=request.campground_id,
                promotion_id=request.promotion_id,
                referral_program_id=request.referral_program_id,
                redeemed_at=redeemed_at,
            )

        # Cancelled: either this booking was already redeemed or a guard failed
        existing = self.get_redemption(request.campground_id, request.booking_id)
        if existing is not None:
            log_redemption(
                logger,
                request.booking_id,
                promotion_id=existing.promotion_id,
                referral_program_id=existing.referral_program_id,
                result="duplicate",
            )
            return existing.model_copy(update={"duplicate": True})

        log_redemption(
            logger,
            request.booking_id,
            promotion_id=request.promotion_id,
            referral_program_id=request.referral_program_id,
            result="rejected",
        )
        raise UsageLimitReachedError(
            details={"promotion_id": str(request.promotion_id)}
        )
