import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from auth_service.app.services.unit_of_work import UnitOfWork
from auth_service.depends import get_unit_of_work

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(uow: UnitOfWork = Depends(get_unit_of_work)):
    """Liveness plus a database round trip"""
    try:
        await uow.session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.error("Health check: database unavailable", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unhealthy", "database": "unavailable"},
        )
    return {"status": "healthy", "database": "ok"}
