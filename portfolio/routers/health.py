import os
from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends

from portfolio.deps import get_storage
from portfolio.schemas import HealthResponse
from portfolio.storage import MediaStorage

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health(storage: Annotated[MediaStorage, Depends(get_storage)]) -> HealthResponse:
    return HealthResponse(
        status="OK",
        timestamp=datetime.now(UTC),
        environment=os.getenv("ENVIRONMENT", "development"),
        storage_backend=storage.name,
    )
