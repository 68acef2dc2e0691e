"""FastAPI dependency injection — catalog provider selection."""
from typing import AsyncGenerator

from panel_estimator import config
from panel_estimator.db import AsyncSessionLocal
from panel_estimator.services.catalog_provider import (
    CatalogProvider,
    DatabaseCatalogProvider,
    StaticCatalogProvider,
)

_STATIC_PROVIDER = StaticCatalogProvider()


async def get_catalog_provider() -> AsyncGenerator[CatalogProvider, None]:
    """
    Catalog for the current request: the price book when CATALOG_SOURCE is
    ``static``, otherwise the catalog tables through a request-scoped session.
    """
    if config.CATALOG_SOURCE != "database":
        yield _STATIC_PROVIDER
        return
    async with AsyncSessionLocal() as session:
        yield DatabaseCatalogProvider(session)
