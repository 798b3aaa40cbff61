from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from loguru import logger
import sys
import time

from app.config import settings
from app.services.database import MongoDB
from app.routes import auth, debug, tasks
from app.utils.errors import InternalError, TaskboardError

logger.remove()
logger.add(
    sys.stdout,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
    level=settings.LOG_LEVEL
)
if settings.LOG_FILE:
    logger.add(
        settings.LOG_FILE,
        rotation="500 MB",
        retention="10 days",
        level=settings.LOG_LEVEL
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 Starting Taskboard API...")

    try:
        await MongoDB.connect()
        logger.info("✓ MongoDB connected")

        logger.info("✓ Taskboard API started successfully!")

    except Exception as e:
        logger.error(f"❌ Startup failed: {e}")
        raise

    yield

    logger.info("Shutting down Taskboard API...")
    await MongoDB.disconnect()
    logger.info("✓ MongoDB disconnected")


async def taskboard_error_handler(request: Request, exc: TaskboardError):
    content = exc.to_dict()

    if isinstance(exc, InternalError):
        logger.error(f"Internal error on {request.method} {request.url.path}: {exc.message}")
        if settings.is_production:
            content["message"] = "Internal server error"

    return JSONResponse(status_code=exc.status_code, content=content)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Invalid request body"

    if errors:
        first = errors[0]
        ctx_error = first.get("ctx", {}).get("error")
        if isinstance(ctx_error, ValueError):
            message = str(ctx_error)
        else:
            field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
            message = f"{field}: {first.get('msg')}" if field else first.get("msg", message)

    return JSONResponse(status_code=400, content={"success": False, "message": message})


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None)
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")

    content = {"success": False, "message": "Internal server error"}
    if not settings.is_production:
        content["error"] = str(exc)

    return JSONResponse(status_code=500, content=content)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Taskboard",
        description="Multi-user task management API with JWT authentication",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/api/docs",
        redoc_url="/api/redoc"
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"{request.method} {request.url.path} - {response.status_code} ({elapsed_ms:.1f}ms)"
        )
        return response

    app.add_exception_handler(TaskboardError, taskboard_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(auth.router)
    app.include_router(tasks.router)

    if settings.ENABLE_DEBUG_ROUTES and not settings.is_production:
        logger.warning("Debug routes enabled at /debug")
        app.include_router(debug.router)

    @app.get("/")
    async def root():
        endpoints = {
            "auth": "/auth",
            "tasks": "/api/tasks",
            "health": "/health",
            "docs": "/api/docs"
        }
        if settings.ENABLE_DEBUG_ROUTES and not settings.is_production:
            endpoints["debug"] = "/debug"

        return {
            "name": "Taskboard",
            "version": "1.0.0",
            "message": "Task Manager API is running!",
            "status": "running",
            "endpoints": endpoints
        }

    @app.get("/health")
    async def health_check():
        health_status = {
            "status": "healthy",
            "api": "running",
            "version": "1.0.0"
        }

        try:
            await MongoDB.client.admin.command('ping')
            health_status["mongodb"] = "connected"
        except Exception as e:
            health_status["mongodb"] = f"error: {str(e)}"
            health_status["status"] = "degraded"

        return health_status

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=not settings.is_production,
        log_level="info"
    )
