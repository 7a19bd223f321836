"""FastAPI dependency injection providers for shared services.

Services are lazily instantiated and cached with @lru_cache so every
request reuses the same boto3 clients.

Usage in routes:
    from campquote_api.dependencies import get_quote_service

    @router.post("/quotes")
    async def create_quote(
        service: QuoteService = Depends(get_quote_service),
    ):
        ...

Service Dependency Graph:
    DynamoDBService (singleton via get_dynamodb_service)
        ├── ConfigStore
        │       └── SnapshotLoader
        │               └── QuoteService
        └── RedemptionService

Testing:
    Use reset_services() to clear cached instances between tests.
"""

from functools import lru_cache

from campquote.services.config_store import ConfigStore, SnapshotLoader
from campquote.services.dynamodb import get_dynamodb_service
from campquote.services.quotes import QuoteService
from campquote.services.redemption import RedemptionService


@lru_cache
def get_config_store() -> ConfigStore:
    """Get cached ConfigStore instance."""
    return ConfigStore(get_dynamodb_service())


@lru_cache
def get_snapshot_loader() -> SnapshotLoader:
    """Get cached SnapshotLoader instance.

    Worker count comes from SNAPSHOT_FETCH_WORKERS.
    """
    return SnapshotLoader(get_config_store())


@lru_cache
def get_quote_service() -> QuoteService:
    """Get cached QuoteService instance.

    Returns:
        QuoteService that loads configuration through the snapshot loader.
    """
    return QuoteService(get_snapshot_loader())


@lru_cache
def get_redemption_service() -> RedemptionService:
    """Get cached RedemptionService instance."""
    return RedemptionService(get_dynamodb_service())


def reset_services() -> None:
    """Clear all cached service instances.

    Call between tests so new instances are created inside mock_aws.
    """
    get_config_store.cache_clear()
    get_snapshot_loader.cache_clear()
    get_quote_service.cache_clear()
    get_redemption_service.cache_clear()
