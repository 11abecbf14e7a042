"""Provider Context - the init() call, readiness signal and process-wide handle.

Invariants:
    - init_provider() registers the schema and derives every address exactly once
    - Registry, matcher and targets are immutable after init_provider() returns
    - ready is True only after on_create() created every table
    - CRUD through the router before readiness raises ProviderNotReadyError

Design Decisions:
    - Explicit context object passed to request handlers instead of module-level
      singletons (schema, address table and storage handle live together here)
    - Readiness reported as a boolean, not raised: callers must check on_create()
"""

import logging
from typing import Iterable

from simpledb.config import Settings
from simpledb.core.address_matcher import AddressMatcher
from simpledb.core.domain_types import ID_COLUMN
from simpledb.core.schema_registry import SchemaRegistry
from simpledb.core.schema_types import Table
from simpledb.core.storage_protocols import StorageBackend
from simpledb.infrastructure.notifications import ChangeNotifier
from simpledb.infrastructure.storage import StorageAdapter
from simpledb.schemas.schema_definition import load_schema_file
from simpledb.services.operation_router import OperationRouter

logger = logging.getLogger(__name__)


class ProviderContext:
    """Everything one provider needs: schema, addresses, storage, notifier, router."""

    def __init__(
        self,
        registry: SchemaRegistry,
        matcher: AddressMatcher,
        storage: StorageBackend,
        notifier: ChangeNotifier,
        strict_projection: bool = True,
    ):
        self.registry = registry
        self.matcher = matcher
        self.storage = storage
        self.notifier = notifier
        self.ready = False
        self.router = OperationRouter(
            matcher, storage, notifier,
            strict_projection=strict_projection,
            is_ready=lambda: self.ready,
        )

    async def on_create(self) -> bool:
        """Create all tables. Returns the readiness flag."""
        self.ready = await self.registry.create_all(self.storage)
        if not self.ready:
            logger.error(
                "Storage creation incomplete; provider is not ready",
                extra={"error_code": "STORAGE_INIT_FAILED"},
            )
        return self.ready

    async def close(self) -> None:
        self.ready = False
        dispose = getattr(self.storage, "dispose", None)
        if dispose is not None:
            await dispose()

    def describe(self) -> dict:
        """Schema, codes and URIs for every registered resource."""
        schema = self.registry.schema
        return {
            "provider": self.matcher.provider_name,
            "name": schema.name,
            "version": schema.version,
            "ready": self.ready,
            "tables": [
                {
                    "name": table.name,
                    "columns": [
                        {"name": ID_COLUMN, "type": "integer", "nullable": False},
                        *(
                            {"name": c.name, "type": c.type.value, "nullable": c.nullable}
                            for c in table.columns
                        ),
                    ],
                    "collection": {
                        "code": self.matcher.resolve(table.name),
                        "uri": self.matcher.content_uri(table.name),
                    },
                    "row": {
                        "code": self.matcher.resolve(f"{table.name}/1"),
                        "uri": self.matcher.content_uri(f"{table.name}/{{id}}"),
                    },
                }
                for table in schema.tables
            ],
        }


def init_provider(
    provider_name: str,
    store_name: str,
    store_version: int,
    tables: Iterable[Table],
    *,
    storage: StorageBackend,
    notifier: ChangeNotifier | None = None,
    scheme: str = "content",
    strict_projection: bool = True,
) -> ProviderContext:
    """Register the schema and derive addresses. Call once, before any CRUD."""
    registry = SchemaRegistry(store_name, store_version)
    registry.register(tables)
    matcher = AddressMatcher(registry.tables, provider_name, scheme)
    logger.info(
        "Provider %s initialized with %d resource code(s)",
        provider_name, len(matcher.codes()),
    )
    return ProviderContext(
        registry, matcher, storage, notifier or ChangeNotifier(),
        strict_projection=strict_projection,
    )


def build_provider(settings: Settings) -> ProviderContext:
    """Wire a provider from settings: schema file, SQLAlchemy storage, notifier."""
    definition = load_schema_file(settings.schema_path)
    storage = StorageAdapter(
        settings.resolved_database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    return init_provider(
        settings.provider_name,
        settings.store_name,
        settings.store_version,
        definition.to_tables(),
        storage=storage,
        notifier=ChangeNotifier(settings.notification_queue_size),
        scheme=settings.uri_scheme,
        strict_projection=settings.strict_projection,
    )
