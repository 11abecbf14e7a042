"""Schema Route - describes registered tables with their codes and URIs."""

from fastapi import APIRouter, Depends

from simpledb.api.dependencies import get_provider
from simpledb.services.provider import ProviderContext

router = APIRouter(prefix="/api/v1/schema", tags=["schema"])


@router.get("")
async def describe_schema(provider: ProviderContext = Depends(get_provider)):
    """Registered schema: tables, columns, resource codes and content URIs."""
    return provider.describe()
