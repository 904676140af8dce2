"""HTTP API for Echo Digest: submit a file or URL, get a ProcessingResult back."""

import logging
from pathlib import Path
from typing import Literal, Optional
from urllib.parse import quote, urlparse

from fastapi import FastAPI, File, HTTPException, Query, Request, UploadFile, status
from fastapi.responses import JSONResponse, Response

from config import Config, create_use_case, get_config
from domain.errors import (
    ConfigurationError, DecodeError, PipelineError, ProviderError,
    UnavailableSourceError, UnsupportedFormatError,
)
from domain.models import FileSubmission, RemoteSubmission
from mappers import (
    dto_to_result, export_filename, result_to_dto, to_json_export, to_text_export,
)
from models import ProcessingResultResponse, RemoteSubmissionRequest
from use_cases.process_submission import ProcessSubmissionUseCase

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = {"audio/mpeg", "audio/wav", "audio/mp3", "audio/m4a", "audio/ogg"}
ALLOWED_EXTENSIONS = {".mp3", ".wav", ".m4a", ".ogg"}

_ERROR_STATUS = [
    (DecodeError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (UnsupportedFormatError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (UnavailableSourceError, status.HTTP_404_NOT_FOUND),
    (ProviderError, status.HTTP_502_BAD_GATEWAY),
    (ConfigurationError, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def _status_for(error: PipelineError) -> int:
    for error_type, code in _ERROR_STATUS:
        if isinstance(error, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _is_allowed_upload(filename: str, content_type: Optional[str]) -> bool:
    mime = (content_type or "").split(";")[0].strip().lower()
    return mime in ALLOWED_MIME_TYPES or Path(filename).suffix.lower() in ALLOWED_EXTENSIONS


def create_app(
    config: Optional[Config] = None,
    use_case: Optional[ProcessSubmissionUseCase] = None,
) -> FastAPI:
    cfg = config or get_config()
    pipeline = use_case or create_use_case(cfg)

    app = FastAPI(title="Echo Digest", version="0.1.0")

    @app.exception_handler(PipelineError)
    async def pipeline_error_handler(request: Request, exc: PipelineError):
        code = _status_for(exc)
        logger.error(f"{request.url.path} failed ({code}): {exc}")
        return JSONResponse(status_code=code, content={"detail": str(exc)})

    @app.get("/health")
    async def health():
        return {"status": "ok", **cfg.as_dict()}

    @app.post("/v1/process/file", response_model=ProcessingResultResponse)
    async def process_file(file: UploadFile = File(...)):
        filename = file.filename or "audio"
        if not _is_allowed_upload(filename, file.content_type):
            raise HTTPException(
                status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
                detail="Please upload a valid audio file (MP3, WAV, M4A, OGG)",
            )

        content = await file.read()
        if len(content) > cfg.max_upload_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File size must be less than {cfg.max_upload_mb}MB",
            )

        logger.info(f"Processing upload {filename} ({len(content)} bytes)")
        result = await pipeline.execute(
            FileSubmission(filename=filename, content=content, mime_type=file.content_type)
        )
        return result_to_dto(result)

    @app.post("/v1/process/url", response_model=ProcessingResultResponse)
    async def process_url(body: RemoteSubmissionRequest):
        url = body.url.strip()
        if urlparse(url).scheme not in ("http", "https"):
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="Please enter a valid http(s) recording URL",
            )

        logger.info(f"Processing remote recording {url}")
        result = await pipeline.execute(RemoteSubmission(url=url))
        return result_to_dto(result)

    @app.post("/v1/export")
    async def export(
        body: ProcessingResultResponse,
        format: Literal["txt", "json"] = Query("txt"),
    ):
        result = dto_to_result(body)
        if format == "txt":
            content, media_type = to_text_export(result), "text/plain; charset=utf-8"
        else:
            content, media_type = to_json_export(result), "application/json"
        filename = export_filename(result, format)
        return Response(
            content=content,
            media_type=media_type,
            headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"},
        )

    return app
