"""Back-office router for clients and tour passenger lists."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import AdminAuth
from ..core.exceptions import ProblemDetailsException
from ..schemas.client import (
    CancelClientRequest,
    Client,
    GetClientRequest,
    ListClientsRequest,
    ListClientsResponse,
    PaxListRequest,
    PaxListResponse,
    SaveClientRequest,
)
from ..services.client_service import ClientService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/client", tags=["client"], dependencies=[AdminAuth])

DB_DEPENDENCY = Depends(get_db)


@router.post("/save", response_model=Client)
async def save_client(
    request: SaveClientRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """
    Create or update a client.

    Party size, rooms and total are recomputed from the tour's rates.
    """
    try:
        client = await ClientService(db).save_client(request)
        return JSONResponse(status_code=200, content=Client.model_validate(client).model_dump(mode="json"))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error saving client",
            extra={"client_id": str(request.client_id), "tour_id": str(request.tour_id), "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.post("/get", response_model=Client)
async def get_client(
    request: GetClientRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    try:
        client = await ClientService(db).get_client_by_id_or_raise(request.client_id)
        return JSONResponse(status_code=200, content=Client.model_validate(client).model_dump(mode="json"))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in client retrieval",
            extra={"client_id": str(request.client_id), "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.post("/list", response_model=ListClientsResponse)
async def list_clients(
    request: ListClientsRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    try:
        clients, next_cursor = await ClientService(db).list_clients(request)
        response_data = ListClientsResponse(
            items=[Client.model_validate(c) for c in clients],
            next_cursor=next_cursor
        )
        return JSONResponse(status_code=200, content=response_data.model_dump(mode="json"))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error("Unexpected error in client listing", extra={"error": str(e)}, exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.post("/cancel", response_model=Client)
async def cancel_client(
    request: CancelClientRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Cancel a client; its tour and bus seats become available again."""
    try:
        client = await ClientService(db).cancel_client(request.client_id, request.reason)
        return JSONResponse(status_code=200, content=Client.model_validate(client).model_dump(mode="json"))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error cancelling client",
            extra={"client_id": str(request.client_id), "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.post("/pax-list", response_model=PaxListResponse)
async def pax_list(
    request: PaxListRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Non-cancelled clients of a tour with their seats."""
    try:
        response_data = await ClientService(db).pax_list(request.tour_id)
        return JSONResponse(status_code=200, content=response_data.model_dump(mode="json"))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error building passenger list",
            extra={"tour_id": str(request.tour_id), "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e
