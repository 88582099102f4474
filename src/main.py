"""Main FastAPI application for BlogPlatformAPI."""

import os
import logging
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from src.database import init_db
from src.errors import BlogAPIError
from src.routers import auth, blog_posts, comments, users
from src.storage import PATH_UPLOADS, UPLOADS_URL_PATH, init_buckets

# Load environment variables
load_dotenv()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(),
        logging.FileHandler(os.getenv("PATH_LOG_FILE", "blog_platform_api.log"))
    ]
)

logger = logging.getLogger(__name__)

# Get configuration from environment
NAME_APP = os.getenv("NAME_APP", "BlogPlatformAPI")
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]

# Create FastAPI application
app = FastAPI(
    title=NAME_APP,
    description="API for blog posts with media attachments, comments and user authentication",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "x-api-key", "X-API-Key"],
)

# Include routers
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(blog_posts.router)
app.include_router(comments.router)


@app.exception_handler(BlogAPIError)
async def handle_api_error(request: Request, exc: BlogAPIError):
    """Translate domain errors into JSON responses."""
    logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(request: Request, exc: RequestValidationError):
    """Report malformed request bodies as validation errors (400)."""
    logger.warning(f"Invalid request to {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


# Ensure buckets exist before mounting them
init_buckets()

# Mount static files for serving uploaded media
app.mount(UPLOADS_URL_PATH, StaticFiles(directory=PATH_UPLOADS), name="uploads")
logger.info(f"Mounted static files at {UPLOADS_URL_PATH} from {PATH_UPLOADS}")


@app.on_event("startup")
def startup_event():
    """Initialize database tables and storage buckets on application startup."""
    logger.info(f"Starting {NAME_APP}")
    init_db()
    logger.info("Database initialized successfully")
    init_buckets()
    logger.info("Storage buckets ready")


@app.get("/")
def root():
    """Root endpoint."""
    return {
        "name": NAME_APP,
        "version": "1.0.0",
        "status": "running"
    }


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
