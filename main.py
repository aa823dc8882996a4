import logging
import uvicorn
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware
from app.api.routers import files
from app.core.config import Settings, settings
from app.core.exceptions import UploadStoreError

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("upload_store")


def error_body(message: str, errors: Optional[list] = None) -> dict:
    body = {"message": message}
    if errors:
        body["errors"] = errors
    return body


async def upload_store_error_handler(request: Request, exc: UploadStoreError):
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message, exc.errors))


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', 'invalid')}"
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("Invalid request.", errors),
    )


def create_app(app_settings: Settings = settings) -> FastAPI:
    """
    Build the application around an explicit settings object.
    """
    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        logger.info(f"Server is running on http://localhost:{app_settings.PORT}")
        logger.info(f"Serving uploads from {app_settings.UPLOAD_DIR}")
        if not app_settings.API_KEY:
            logger.warning("API_KEY is not set; every upload and delete request will be rejected")
        yield

    application = FastAPI(title=app_settings.PROJECT_NAME, lifespan=lifespan)
    application.state.settings = app_settings

    application.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.add_exception_handler(UploadStoreError, upload_store_error_handler)
    application.add_exception_handler(StarletteHTTPException, http_error_handler)
    application.add_exception_handler(RequestValidationError, validation_error_handler)

    # Include routers
    application.include_router(files.router)

    # Serve stored files publicly
    application.mount("/uploads", StaticFiles(directory=str(app_settings.UPLOAD_DIR)), name="uploads")

    return application


# Create FastAPI application
app = create_app(settings)

if __name__ == "__main__":
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT, reload=settings.RELOAD)
