"""Agency settings router."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import AdminAuth
from ..core.exceptions import ProblemDetailsException
from ..schemas.agency import AgencySettings, UpdateAgencySettingsRequest
from ..services.agency_service import AgencyService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/agency", tags=["agency"])

DB_DEPENDENCY = Depends(get_db)


@router.post("/settings/get", response_model=AgencySettings)
async def get_settings(db: AsyncSession = DB_DEPENDENCY) -> JSONResponse:
    """Current agency name, advance per person and payment mode."""
    try:
        row = await AgencyService(db).get_settings()
        await db.commit()
        return JSONResponse(status_code=200, content=AgencySettings.model_validate(row).model_dump(mode="json"))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error("Unexpected error reading agency settings", extra={"error": str(e)}, exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.post("/settings/update", response_model=AgencySettings, dependencies=[AdminAuth])
async def update_settings(
    request: UpdateAgencySettingsRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Change agency settings; new tours pick up the advance amount."""
    try:
        row = await AgencyService(db).update_settings(request)
        return JSONResponse(status_code=200, content=AgencySettings.model_validate(row).model_dump(mode="json"))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error("Unexpected error updating agency settings", extra={"error": str(e)}, exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error") from e
