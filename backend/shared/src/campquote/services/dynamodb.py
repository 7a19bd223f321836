"""DynamoDB access with environment-aware table names.

Only the low-level client is used: clients are thread-safe, so one service
instance can serve the concurrent snapshot reads. Items go in and come out
as plain dicts; numbers come back as Decimal.
"""

import os
from typing import Any

import boto3
from boto3.dynamodb.types import TypeDeserializer, TypeSerializer
from botocore.exceptions import ClientError

# Module-level singleton so boto3 clients are reused across requests
_dynamodb_service_instance: "DynamoDBService | None" = None

_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


def get_dynamodb_service(environment: str | None = None) -> "DynamoDBService":
    """Get or create the shared DynamoDB service instance.

    Args:
        environment: Environment name. Only used on first call.

    Returns:
        Shared DynamoDBService instance
    """
    global _dynamodb_service_instance
    if _dynamodb_service_instance is None:
        _dynamodb_service_instance = DynamoDBService(environment)
    return _dynamodb_service_instance


def reset_dynamodb_service() -> None:
    """Reset the singleton instance (for testing only).

    Lets tests create a fresh service inside a mock_aws context.
    """
    global _dynamodb_service_instance
    _dynamodb_service_instance = None


def serialize_item(item: dict[str, Any]) -> dict[str, Any]:
    """Convert a plain item to the typed form the client expects."""
    return {k: _serializer.serialize(v) for k, v in item.items()}


def deserialize_item(item: dict[str, Any]) -> dict[str, Any]:
    """Convert a typed client item back to plain Python values."""
    return {k: _deserializer.deserialize(v) for k, v in item.items()}


class DynamoDBService:
    """Table operations over a shared boto3 DynamoDB client."""

    def __init__(self, environment: str | None = None) -> None:
        """Initialize DynamoDB service.

        Args:
            environment: Environment name (dev/prod). Defaults to ENVIRONMENT env var.
        """
        self.environment = environment or os.getenv("ENVIRONMENT", "dev")
        # DYNAMODB_TABLE_PREFIX overrides the derived prefix (used by tests)
        self.name_prefix = os.getenv(
            "DYNAMODB_TABLE_PREFIX", f"campquote-{self.environment}"
        )
        self._client = boto3.client("dynamodb")

    def table_name(self, table: str) -> str:
        """Full table name with prefix."""
        return f"{self.name_prefix}-{table}"

    def get_item(self, table: str, key: dict[str, Any]) -> dict[str, Any] | None:
        """Get a single item by key.

        Args:
            table: Table name without prefix
            key: Primary key dict

        Returns:
            Item dict or None if not found
        """
        response = self._client.get_item(
            TableName=self.table_name(table),
            Key=serialize_item(key),
            ConsistentRead=True,
        )
        item = response.get("Item")
        return deserialize_item(item) if item else None

    def put_item(
        self,
        table: str,
        item: dict[str, Any],
        condition_expression: str | None = None,
    ) -> bool:
        """Put an item into the table.

        Args:
            table: Table name without prefix
            item: Item to store
            condition_expression: Optional condition for write

        Returns:
            True if written, False if the condition failed
        """
        kwargs: dict[str, Any] = {
            "TableName": self.table_name(table),
            "Item": serialize_item(item),
        }
        if condition_expression:
            kwargs["ConditionExpression"] = condition_expression
        try:
            self._client.put_item(**kwargs)
            return True
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                return False
            raise

    def query_partition(
        self,
        table: str,
        partition_key: str,
        value: str,
    ) -> list[dict[str, Any]]:
        """Return every item in a partition, following pagination.

        Args:
            table: Table name without prefix
            partition_key: Hash key attribute name
            value: Hash key value

        Returns:
            Items in range-key order
        """
        kwargs: dict[str, Any] = {
            "TableName": self.table_name(table),
            "KeyConditionExpression": "#pk = :pk",
            "ExpressionAttributeNames": {"#pk": partition_key},
            "ExpressionAttributeValues": {":pk": _serializer.serialize(value)},
        }
        items: list[dict[str, Any]] = []
        while True:
            response = self._client.query(**kwargs)
            items.extend(deserialize_item(i) for i in response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return items
            kwargs["ExclusiveStartKey"] = last_key

    def transact_write(self, items: list[dict[str, Any]]) -> bool:
        """Execute a transactional write.

        Args:
            items: TransactWriteItem dicts with table names already prefixed
                and values in typed form (see serialize_item)

        Returns:
            True if committed, False if any condition cancelled the transaction
        """
        try:
            self._client.transact_write_items(TransactItems=items)  # type: ignore[arg-type]
            return True
        except ClientError as e:
            if e.response["Error"]["Code"] == "TransactionCanceledException":
                return False
            raise

    def create_table(self, table: str, range_key: str | None = None) -> None:
        """Create an on-demand table keyed by campground_id (and range_key).

        Used by local seeding and tests; deployed tables come from infrastructure.
        """
        key_schema = [{"AttributeName": "campground_id", "KeyType": "HASH"}]
        attributes = [{"AttributeName": "campground_id", "AttributeType": "S"}]
        if range_key:
            key_schema.append({"AttributeName": range_key, "KeyType": "RANGE"})
            attributes.append({"AttributeName": range_key, "AttributeType": "S"})
        self._client.create_table(
            TableName=self.table_name(table),
            KeySchema=key_schema,
            AttributeDefinitions=attributes,
            BillingMode="PAY_PER_REQUEST",
        )
