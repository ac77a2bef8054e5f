"""
Health check route - public, no authentication required.
"""
from fastapi import APIRouter, Request

from inspection_intake import __version__, config

router = APIRouter()


@router.get(
    "",
    summary="System health check",
)
async def health_check(request: Request):
    """
    Check service health.

    Reports whether the submission service is wired up and which
    submission policies it runs with.
    """
    health = {
        "status": "healthy",
        "service": "Inspection Intake API",
        "version": __version__,
        "environment": config.RUNTIME_ENVIRONMENT,
        "components": {},
    }

    service = getattr(request.app.state, "submission_service", None)
    if service is None:
        health["components"]["submission_service"] = "unavailable"
        health["status"] = "degraded"
        return health

    health["components"]["submission_service"] = "ok"
    intake_config = service.config
    health["policies"] = {
        "folder_layout": intake_config.folder_layout,
        "row_layout": intake_config.row_layout,
        "photo_cell": intake_config.photo_cell_style,
    }
    return health
