"""Request Dependencies - hand the process-wide ProviderContext to route handlers.

Invariants:
    - The provider lives on app.state, set once by the lifespan
    - A missing provider is a 503, never an AttributeError

Design Decisions:
    - Depends() over module globals: tests swap the provider via dependency_overrides
"""

from fastapi import Depends, Request

from simpledb.core.errors import ProviderNotReadyError
from simpledb.services.operation_router import OperationRouter
from simpledb.services.provider import ProviderContext


def get_provider(request: Request) -> ProviderContext:
    provider = getattr(request.app.state, "provider", None)
    if provider is None:
        raise ProviderNotReadyError()
    return provider


def get_router(
    provider: ProviderContext = Depends(get_provider),
) -> OperationRouter:
    return provider.router
