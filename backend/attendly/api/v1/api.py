"""API v1 router configuration."""

from fastapi import APIRouter

# Import endpoint routers
from attendly.api.v1.endpoints import attendance, organizations, statistics, visitors

# Create API v1 router
api_router = APIRouter()

# Include endpoint routers
api_router.include_router(
    organizations.router,
    tags=["Organizations"],
)
api_router.include_router(
    attendance.router,
    tags=["Attendance"],
)
api_router.include_router(
    statistics.router,
    tags=["Statistics"],
)
api_router.include_router(
    visitors.router,
    tags=["Visitors"],
)


# Health check for API v1
@api_router.get("/health", tags=["Health"])
async def api_health() -> dict[str, str]:
    """API v1 health check."""
    return {
        "status": "healthy",
        "api_version": "v1",
    }
