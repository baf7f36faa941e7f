"""
Face Enrollment API Server
FastAPI application exposing health, upload, enroll and verify endpoints.
"""

from pathlib import Path
from typing import Callable, Optional, TypeVar

import uvicorn
from fastapi import FastAPI, File, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from faceauth import __version__
from faceauth.api.uploads import save_upload
from faceauth.core.config import Config, get_config
from faceauth.core.errors import FaceAuthError, NoFileUploaded, ProcessingFailure
from faceauth.core.interfaces import EmbeddingProvider
from faceauth.core.logging_config import get_logger
from faceauth.services.descriptor_store import DescriptorStore, EnrollmentState
from faceauth.services.enrollment import EnrollmentService
from faceauth.services.extraction import discard_upload
from faceauth.services.verification import VerificationService

logger = get_logger(__name__)

T = TypeVar("T")


def create_app(
    config: Optional[Config] = None,
    provider: Optional[EmbeddingProvider] = None,
    store: Optional[DescriptorStore] = None,
) -> FastAPI:
    """Build the FastAPI application.

    This is the composition root: the descriptor store is loaded from disk
    here, and the face model is only created when no provider is injected.

    Args:
        config: Configuration. If None, loads from .env
        provider: Embedding provider. If None, the configured backend is built
        store: Descriptor store. If None, one is created at config.descriptor_path

    Returns:
        Configured FastAPI application.
    """
    config = config or get_config()

    if store is None:
        store = DescriptorStore(config.descriptor_path)
    if store.state is EnrollmentState.UNINITIALIZED:
        store.load()

    if provider is None:
        from faceauth.backends.factory import create_provider

        provider = create_provider(config)

    config.upload_dir.mkdir(parents=True, exist_ok=True)

    enrollment = EnrollmentService(provider=provider, store=store)
    verification = VerificationService(provider=provider, store=store)

    app = FastAPI(title="Face Enrollment API", version=__version__)
    app.state.config = config
    app.state.store = store
    app.state.enrollment = enrollment
    app.state.verification = verification

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(FaceAuthError)
    async def faceauth_error_handler(request: Request, exc: FaceAuthError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{request.url.path} failed: {exc.message} ({exc.details})")
        else:
            logger.info(f"{request.url.path} rejected: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        # An ``image`` form field that is not a file counts as no upload
        if any("image" in err.get("loc", ()) for err in exc.errors()):
            return await faceauth_error_handler(request, NoFileUploaded())
        return await request_validation_exception_handler(request, exc)

    async def store_upload(image: Optional[UploadFile]) -> Path:
        if image is None:
            raise NoFileUploaded()

        try:
            return await save_upload(image, config.upload_dir)
        except Exception as e:
            logger.error(f"Could not store upload {image.filename!r}: {e}", exc_info=True)
            raise ProcessingFailure(details=str(e)) from e

    async def process_upload(operation: Callable[..., T], image: Optional[UploadFile]) -> T:
        path = await store_upload(image)
        try:
            return await run_in_threadpool(operation, path)
        except FaceAuthError:
            raise
        except Exception as e:
            logger.error(f"Unexpected error processing {path.name}: {e}", exc_info=True)
            raise ProcessingFailure(details=str(e)) from e
        finally:
            discard_upload(path)

    @app.get("/health")
    async def health_check() -> dict:
        """Liveness probe."""
        return {"status": "ok"}

    @app.post("/upload")
    async def upload(image: Optional[UploadFile] = File(None)) -> dict:
        """Store an image in the upload directory and report where it went."""
        path = await store_upload(image)
        logger.info(f"Stored upload {path.name}")
        return {"filename": path.name, "path": str(path)}

    @app.post("/enroll")
    async def enroll(image: Optional[UploadFile] = File(None)) -> dict:
        """Enroll the face in the uploaded image, replacing any previous one."""
        outcome = await process_upload(enrollment.enroll, image)
        return outcome.to_dict()

    @app.post("/verify")
    async def verify(image: Optional[UploadFile] = File(None)) -> dict:
        """Compare the face in the uploaded image with the enrolled face."""
        result = await process_upload(verification.verify, image)
        return result.to_dict()

    logger.info(f"Application ready (enrollment state: {store.state.value})")
    return app


def run_server(host: Optional[str] = None, port: Optional[int] = None) -> None:
    """Run the API with uvicorn using the environment configuration."""
    config = get_config()
    host = host or config.host
    port = port or config.port

    logger.info(f"Starting server on {host}:{port}")
    uvicorn.run(create_app(config), host=host, port=port, log_level=config.log_level.lower())


if __name__ == "__main__":
    run_server()
