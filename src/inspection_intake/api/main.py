"""
FastAPI application factory.
Creates the app with CORS, builds the submission service at startup, and
registers the routers.
Swagger UI available at /docs, ReDoc at /redoc.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from inspection_intake import __version__, config
from inspection_intake.errors import ConfigurationError
from inspection_intake.utils.logger import get_logger


def build_submission_service():
    """Load configuration and wire the Drive and Sheets gateways into a SubmissionService."""
    from inspection_intake.drive_gateway import DriveGateway
    from inspection_intake.sheets.inspection_sheet import InspectionSheet
    from inspection_intake.submission_service import SubmissionService

    intake_config = config.IntakeConfig.from_env()

    # A malformed private key surfaces here, when google-auth parses it
    try:
        drive_gateway = DriveGateway(intake_config)
        sheet_gateway = InspectionSheet(intake_config)
    except Exception as e:
        raise ConfigurationError(f"Could not build Google API clients: {e}") from e

    return SubmissionService(
        intake_config,
        drive_gateway=drive_gateway,
        sheet_gateway=sheet_gateway,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown logic for the FastAPI app."""
    logger = get_logger()
    logger.info(
        f"Starting Inspection Intake API on port {config.API_PORT} ({config.RUNTIME_ENVIRONMENT})",
        component="API",
    )

    if app.state.submission_service is None:
        try:
            app.state.submission_service = build_submission_service()
        except ConfigurationError as e:
            logger.critical(f"Startup failed: {e}", component="API")
            raise

    logger.info("Submission service ready", component="API")
    yield
    logger.info("Shutting down API server", component="API")


def create_app(submission_service=None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        submission_service: pre-built service (tests); when None the
            service is built from the environment at startup.
    """
    app = FastAPI(
        title="Inspection Intake API",
        description=(
            "Receives store inspection submissions from the mobile form, "
            "files photos in Google Drive and appends rows to the inspection sheet."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.submission_service = submission_service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.API_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from inspection_intake.api.routes.inspection_routes import router as inspection_router
    from inspection_intake.api.routes.health_routes import router as health_router

    app.include_router(inspection_router, prefix="/api/inspection", tags=["Inspections"])
    app.include_router(health_router, prefix="/health", tags=["Health"])

    @app.get("/", tags=["Root"])
    async def root():
        """API root - points at docs and health."""
        return {
            "service": "Inspection Intake API",
            "version": __version__,
            "docs": "/docs",
            "health": "/health",
        }

    return app
