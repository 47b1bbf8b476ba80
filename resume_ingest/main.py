from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
import logging
import os

from .config import get_settings
from .database import init_db
from .exceptions import RateLimited, ResumeProcessingError
from .routers import process_resume_router

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    await init_db()
    yield
    # Shutdown
    pass


app = FastAPI(
    title=settings.app_name,
    description="Resume summarization and structured extraction API",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,  # Disable docs in production
    redoc_url="/redoc" if settings.debug else None,
)

# CORS middleware - uses origins from environment variable
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
)


# Cache control middleware - prevents browser caching of API responses
from starlette.middleware.base import BaseHTTPMiddleware


class NoCacheMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        # Add no-cache headers to API responses (not static files)
        if request.url.path.startswith(settings.api_prefix + "/"):
            response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"
            response.headers["Pragma"] = "no-cache"
            response.headers["Expires"] = "0"
        return response

app.add_middleware(NoCacheMiddleware)


# Error envelope: {"success": false, "error": ..., "code": ..., "details"?: ...}
def error_body(message: str, code: str, details=None) -> dict:
    body = {"success": False, "error": message, "code": code}
    if details and not get_settings().is_production:
        body["details"] = details
    return body


@app.exception_handler(ResumeProcessingError)
async def resume_processing_error_handler(request: Request, exc: ResumeProcessingError):
    content = error_body(exc.message, exc.code, exc.details)
    if isinstance(exc, RateLimited):
        content["rateLimit"] = {"remaining": exc.remaining, "resetTime": exc.reset_seconds}
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', []))}: {error.get('msg')}"
        for error in exc.errors()
    )
    return JSONResponse(
        status_code=400,
        content=error_body("Invalid request body. Send JSON with fileUrl and fileName.", "MissingInput", errors),
    )


# Include routers
app.include_router(process_resume_router, prefix=settings.api_prefix)

# Mount uploads directory so stored resumes are reachable by URL
uploads_dir = settings.uploads_dir
os.makedirs(uploads_dir, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=uploads_dir), name="uploads")


@app.get("/")
async def root():
    return {"message": settings.app_name, "status": "running", "version": "1.0.0"}


@app.get("/health")
async def health_check():
    """Health check endpoint for load balancer"""
    return {"status": "healthy"}
