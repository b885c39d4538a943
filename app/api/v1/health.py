"""Health check endpoint reporting user store status."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.core.config import Settings
from app.core.dependencies import get_app_settings, get_user_store
from app.schemas.health import HealthResponse
from app.services.user_store import UserStore

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(
    store: Annotated[UserStore, Depends(get_user_store)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> JSONResponse:
    """
    Return service health and user data file accessibility.
    Used by load balancers and monitoring; 503 when the store is unusable.
    """
    data_file_path = str(store.data_file.resolve())
    accessible = store.is_data_file_accessible()
    if accessible and store.is_ready:
        body = HealthResponse(
            status="UP",
            environment=settings.APP_ENV,
            message="User store is healthy",
            user_count=store.count(),
            data_file_accessible=True,
            data_file_path=data_file_path,
        )
        code = status.HTTP_200_OK
    else:
        body = HealthResponse(
            status="DOWN",
            environment=settings.APP_ENV,
            message="Data file is not accessible" if not accessible else "User store is not initialized",
            data_file_accessible=accessible,
            data_file_path=data_file_path,
        )
        code = status.HTTP_503_SERVICE_UNAVAILABLE
    return JSONResponse(status_code=code, content=body.model_dump(mode="json"))
