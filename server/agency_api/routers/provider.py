"""Provider router for the add-on services catalog."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import AdminAuth
from ..core.exceptions import ProblemDetailsException
from ..schemas.provider import CreateProviderRequest, ListProvidersRequest, ListProvidersResponse, Provider
from ..services.provider_service import ProviderService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/provider", tags=["provider"])

DB_DEPENDENCY = Depends(get_db)


@router.post("/create", response_model=Provider, dependencies=[AdminAuth])
async def create_provider(
    request: CreateProviderRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    try:
        provider = await ProviderService(db).create_provider(request)
        return JSONResponse(status_code=200, content=Provider.model_validate(provider).model_dump(mode="json"))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in provider creation",
            extra={"name": request.name, "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.post("/list", response_model=ListProvidersResponse)
async def list_providers(
    request: ListProvidersRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """List the extras clients can add to a booking."""
    try:
        providers = await ProviderService(db).list_providers(active_only=request.active_only)
        response_data = ListProvidersResponse(items=[Provider.model_validate(p) for p in providers])
        return JSONResponse(status_code=200, content=response_data.model_dump(mode="json"))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error("Unexpected error in provider listing", extra={"error": str(e)}, exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error") from e
