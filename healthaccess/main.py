from contextlib import asynccontextmanager
import logging
import sys

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy import text
import uvicorn

from healthaccess.core.config import settings
from healthaccess.db.session import SessionLocal
from healthaccess.services.events import event_publisher
from healthaccess.services.reminders import ConsultationReminderDispatcher
from healthaccess.workflow.exceptions import (
    CollaboratorFailure,
    DuplicateConsultationError,
    ValidationError,
)


def configure_logging():
    handlers = [logging.StreamHandler(sys.stdout)]
    if settings.LOG_FILE:
        handlers.append(logging.FileHandler(settings.LOG_FILE))
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info(f"Starting {settings.PROJECT_NAME} ({settings.ENVIRONMENT.value})")

    dispatcher = None
    if settings.REMINDERS_ENABLED:
        dispatcher = ConsultationReminderDispatcher(
            event_publisher,
            SessionLocal,
            interval=settings.REMINDER_SCAN_INTERVAL_SECONDS,
        )
        await dispatcher.start()
    app.state.reminder_dispatcher = dispatcher

    yield

    if dispatcher is not None:
        await dispatcher.stop()
    logger.info(f"{settings.PROJECT_NAME} shutdown complete")


def create_application() -> FastAPI:
    """Create and configure the FastAPI application"""
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Healthcare Accessibility App - appointments, consultations and prescriptions",
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        docs_url=f"{settings.API_V1_STR}/docs",
        redoc_url=f"{settings.API_V1_STR}/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    from healthaccess.api.v1.api import api_router

    app.include_router(api_router, prefix=settings.API_V1_STR)
    return app


app = create_application()


@app.get("/", include_in_schema=False)
async def root():
    return RedirectResponse(url=f"{settings.API_V1_STR}/docs")


@app.get("/health", tags=["Health Check"])
def health_check():
    """Health check endpoint"""
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        db_status = "healthy"
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        db_status = "unhealthy"
    finally:
        db.close()

    return {
        "status": "healthy" if db_status == "healthy" else "degraded",
        "version": settings.VERSION,
        "project": settings.PROJECT_NAME,
        "database": db_status,
    }


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    logger.info(f"Rejected {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=400, content={"detail": exc.message})


@app.exception_handler(DuplicateConsultationError)
async def duplicate_consultation_handler(request: Request, exc: DuplicateConsultationError):
    return JSONResponse(
        status_code=409,
        content={"detail": str(exc), "consultation_id": exc.consultation_id},
    )


@app.exception_handler(CollaboratorFailure)
async def collaborator_failure_handler(request: Request, exc: CollaboratorFailure):
    logger.error(f"{exc} - {request.url}")
    return JSONResponse(status_code=502, content={"detail": f"{exc.collaborator} unavailable"})


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Global HTTP exception handler"""
    if exc.status_code >= 500:
        logger.error(f"HTTP {exc.status_code}: {exc.detail} - {request.url}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=exc.headers)


if __name__ == "__main__":
    uvicorn.run(
        "healthaccess.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=settings.is_development,
    )
