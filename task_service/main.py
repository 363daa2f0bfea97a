import asyncio
import contextlib
import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .core.config import get_settings
from .core.database import SessionLocal, check_db_connection, init_db
from .core.exceptions import StorageError, TaskNotFound, ValidationFailed
from .core.rabbitmq import TaskEventPublisher
from .repositories.sqlalchemy_repository import SqlAlchemyTaskRepository
from .routers import tasks
from .services.lifecycle import TaskService
from .services.sweep import run_overdue_sweeper

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def create_app(
    task_service: Optional[TaskService] = None,
    sweep_enabled: Optional[bool] = None,
) -> FastAPI:
    """
    Build the FastAPI application

    Without an explicit task_service the app stores tasks through SQLAlchemy
    and, when RABBITMQ_ENABLED is set, publishes lifecycle events.
    """
    publisher = None
    if task_service is None:
        if settings.rabbitmq_enabled:
            publisher = TaskEventPublisher.from_settings(settings)
        task_service = TaskService(SqlAlchemyTaskRepository(SessionLocal), publisher=publisher)

    if sweep_enabled is None:
        sweep_enabled = settings.sweep_enabled

    # None when tasks are not stored in a database
    db_bind = getattr(task_service.repository, "bind", None)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialize application on startup, clean up on shutdown"""
        logger.info("Starting Task Service...")
        if db_bind is None:
            logger.info("Task storage is not database-backed, skipping table creation")
        elif init_db(db_bind):
            logger.info("Database initialized successfully")
        else:
            logger.error("Database initialization failed")

        if publisher is not None:
            if publisher.connect():
                logger.info("RabbitMQ connection established")
            else:
                logger.warning("RabbitMQ connection failed - events will not be published")

        sweeper = None
        if sweep_enabled:
            sweeper = asyncio.create_task(
                run_overdue_sweeper(app.state.task_service, settings.sweep_interval_seconds)
            )
        logger.info("Task Service startup completed")

        yield

        logger.info("Shutting down Task Service...")
        if sweeper is not None:
            sweeper.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await sweeper
        if publisher is not None:
            publisher.close()
        logger.info("Task Service shutdown completed")

    app = FastAPI(
        title="Task Service",
        description="Task management service with title macros and overdue tracking",
        version=settings.service_version,
        lifespan=lifespan,
    )
    app.state.task_service = task_service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(tasks.router, prefix=settings.api_prefix + "/tasks", tags=["tasks"])

    @app.exception_handler(TaskNotFound)
    async def task_not_found_handler(request: Request, exc: TaskNotFound):
        logger.info(f"Task not found: {exc.task_id}")
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"error": "task not found"})

    @app.exception_handler(ValidationFailed)
    async def validation_failed_handler(request: Request, exc: ValidationFailed):
        logger.info(f"Validation failed on {request.url.path}: {exc.reason}")
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": exc.reason})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = errors[0].get("msg", "invalid request") if errors else "invalid request"
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error(f"Storage error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "internal server error"}
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "internal server error" if not settings.debug else str(exc)}
        )

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "service": settings.service_name,
            "version": settings.service_version,
            "status": "running",
            "message": "Task Service is operational"
        }

    @app.get("/health")
    def health_check():
        """Health check endpoint"""
        if db_bind is None:
            db_healthy, db_state = True, "not configured"
        else:
            db_healthy = check_db_connection(db_bind)
            db_state = "connected" if db_healthy else "disconnected"
        return {
            "service": settings.service_name,
            "version": settings.service_version,
            "status": "healthy" if db_healthy else "unhealthy",
            "database": db_state,
            "timestamp": time.time()
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("task_service.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
