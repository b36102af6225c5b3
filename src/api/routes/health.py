"""Health check endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from api.v1.dependencies import get_consistency_validator
from core.config import settings
from domain.services.consistency_validator import ManifestConsistencyValidator
from infrastructure.database.session import get_async_session

SERVICE_VERSION = "1.0.0"

router = APIRouter(tags=["health"])


class ManifestHealth(BaseModel):
    """Counts from a non-raising manifest consistency run."""

    types: int
    errors: int
    warnings: int


class HealthResponse(BaseModel):
    status: str
    version: str
    timestamp: str
    environment: str
    database: str | None = None
    manifests: ManifestHealth | None = None


async def _database_status(db: AsyncSession) -> str:
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        return f"unhealthy: {e}"
    return "healthy"


def _manifest_health(validator: ManifestConsistencyValidator) -> ManifestHealth:
    report = validator.collect()
    return ManifestHealth(
        types=report.checked_types,
        errors=len(report.errors),
        warnings=len(report.warnings),
    )


@router.get("/health", response_model=HealthResponse, summary="Basic health check")
async def health_check() -> HealthResponse:
    """Liveness probe for load balancers. Touches no dependencies."""
    return HealthResponse(
        status="healthy",
        version=SERVICE_VERSION,
        timestamp=datetime.utcnow().isoformat(),
        environment=settings.app_env,
    )


@router.get(
    "/health/detailed",
    response_model=HealthResponse,
    summary="Detailed health check",
)
async def detailed_health_check(
    db: AsyncSession = Depends(get_async_session),
    validator: ManifestConsistencyValidator = Depends(get_consistency_validator),
) -> HealthResponse:
    """
    Readiness check covering the delivery log database and the manifests.

    Reports ``degraded`` when the database is unreachable or the manifests
    disagree with the event map or the shipped templates.
    """
    database = await _database_status(db)
    manifests = _manifest_health(validator)
    degraded = database != "healthy" or manifests.errors > 0

    return HealthResponse(
        status="degraded" if degraded else "healthy",
        version=SERVICE_VERSION,
        timestamp=datetime.utcnow().isoformat(),
        environment=settings.app_env,
        database=database,
        manifests=manifests,
    )
