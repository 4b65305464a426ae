"""
Model catalog endpoint.

Routes: GET /models

Dependencies: chatflow.models.catalog
System role: Model picker options
"""

from fastapi import APIRouter

from chatflow.models.catalog import MODEL_CATALOG, ModelOption

router = APIRouter(prefix="/models", tags=["models"])


@router.get("", response_model=list[ModelOption])
async def list_models() -> list[ModelOption]:
    """List the selectable model identifiers with display labels."""
    return list(MODEL_CATALOG)
