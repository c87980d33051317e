"""HTTP route handlers for the summarizer API."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Type

import orjson
from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from notes_summarizer import __version__ as app_version
from notes_summarizer.config import Settings
from notes_summarizer.errors import MailerError, SummaryValidationError, UploadRejected
from notes_summarizer.mailer import SummaryMailer
from notes_summarizer.summarizer.models import SummarizationRequest
from notes_summarizer.summarizer.service import SummarizationService
from notes_summarizer.uploads import ingest_text_upload

from .schemas import (
    EmailResponseModel,
    ErrorResponseModel,
    SendEmailRequestModel,
    SummarizeRequestModel,
    SummaryResponseModel,
    UploadResponseModel,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

MAILER_NOT_CONFIGURED = (
    "Email service not configured. Please check your EMAIL_USER and "
    "EMAIL_APP_PASSWORD in .env file."
)


def error_response(
    status_code: int, error: str, details: Optional[Any] = None
) -> JSONResponse:
    payload = ErrorResponseModel(error=error, details=details)
    return JSONResponse(
        status_code=status_code, content=payload.model_dump(exclude_none=True)
    )


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_summarization_service(request: Request) -> SummarizationService:
    return request.app.state.summarizer


def get_mailer(request: Request) -> Optional[SummaryMailer]:
    return request.app.state.mailer


async def _load_request_model(
    http_request: Request, model_cls: Type[BaseModel], settings: Settings
) -> BaseModel:
    header_length = http_request.headers.get("content-length")
    if header_length:
        try:
            content_length = int(header_length)
        except ValueError:
            content_length = None
        if content_length is not None and content_length > settings.max_payload_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail={
                    "success": False,
                    "error": "Payload too large",
                    "details": f"Limit is {settings.max_payload_bytes} bytes",
                },
            )

    body_bytes = await http_request.body()
    if body_bytes and len(body_bytes) > settings.max_payload_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail={
                "success": False,
                "error": "Payload too large",
                "details": f"Limit is {settings.max_payload_bytes} bytes",
            },
        )

    if not body_bytes:
        data: Dict[str, Any] = {}
    else:
        try:
            data = orjson.loads(body_bytes)
        except orjson.JSONDecodeError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"success": False, "error": "Invalid JSON", "details": str(exc)},
            ) from exc
    if not isinstance(data, dict):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "success": False,
                "error": "Invalid request",
                "details": "Request body must be a JSON object.",
            },
        )

    try:
        return model_cls.model_validate(data)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors()) from exc


async def load_summarize_request(http_request: Request) -> SummarizeRequestModel:
    settings = get_app_settings(http_request)
    return await _load_request_model(http_request, SummarizeRequestModel, settings)


async def load_email_request(http_request: Request) -> SendEmailRequestModel:
    settings = get_app_settings(http_request)
    return await _load_request_model(http_request, SendEmailRequestModel, settings)


async def _run_summary(
    service: SummarizationService, request: SummarizationRequest
) -> JSONResponse:
    try:
        result = await service.summarize(request)
    except SummaryValidationError as exc:
        return error_response(status.HTTP_400_BAD_REQUEST, str(exc))
    except Exception as exc:
        logger.exception("Summarization error")
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Failed to generate summary",
            details=str(exc),
        )
    response_payload = SummaryResponseModel.from_domain(result)
    return JSONResponse(content=response_payload.model_dump(by_alias=True))


@router.get("/health", tags=["health"])
async def health(settings: Settings = Depends(get_app_settings)) -> Dict[str, Any]:
    return {
        "status": "OK",
        "message": "Server is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "port": settings.port,
        "version": app_version,
    }


@router.get("/test", tags=["health"])
async def configuration_check(
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    return {
        "message": "Backend server is working!",
        "env": {
            "hasHuggingFaceToken": bool(settings.hugging_face_token),
            "hasEmailUser": bool(settings.email_user),
            "hasEmailPassword": bool(settings.email_app_password),
            "port": settings.port,
        },
    }


@router.post("/summarize")
async def summarize_text(
    summary_request: SummarizeRequestModel = Depends(load_summarize_request),
    service: SummarizationService = Depends(get_summarization_service),
):
    logger.info("Received summarize request")
    return await _run_summary(
        service,
        SummarizationRequest(
            text=summary_request.text, style_hint=summary_request.style_hint
        ),
    )


@router.post("/summarize-upload")
async def summarize_upload(
    file: Optional[UploadFile] = File(None),
    custom_prompt: Optional[str] = Form(None, alias="customPrompt"),
    settings: Settings = Depends(get_app_settings),
    service: SummarizationService = Depends(get_summarization_service),
):
    if file is None:
        return error_response(status.HTTP_400_BAD_REQUEST, "No file uploaded")
    try:
        ingested = await ingest_text_upload(file, settings)
    except UploadRejected as exc:
        return error_response(exc.status_code, exc.message)
    except (UnicodeDecodeError, OSError) as exc:
        logger.error(f"File upload error: {exc}")
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "File upload failed", details=str(exc)
        )
    return await _run_summary(
        service,
        SummarizationRequest(text=ingested.content, style_hint=custom_prompt or ""),
    )


@router.post("/upload")
async def upload_file(
    file: Optional[UploadFile] = File(None),
    settings: Settings = Depends(get_app_settings),
):
    if file is None:
        return error_response(status.HTTP_400_BAD_REQUEST, "No file uploaded")
    try:
        ingested = await ingest_text_upload(file, settings)
    except UploadRejected as exc:
        return error_response(exc.status_code, exc.message)
    except (UnicodeDecodeError, OSError) as exc:
        logger.error(f"File upload error: {exc}")
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "File upload failed", details=str(exc)
        )
    response_payload = UploadResponseModel(
        content=ingested.content, filename=ingested.filename
    )
    return JSONResponse(content=response_payload.model_dump())


@router.post("/send-email")
async def send_email(
    email_request: SendEmailRequestModel = Depends(load_email_request),
    mailer: Optional[SummaryMailer] = Depends(get_mailer),
    settings: Settings = Depends(get_app_settings),
):
    logger.info("Received email request")
    if mailer is None:
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, MAILER_NOT_CONFIGURED
        )

    recipients = email_request.to or []
    if not recipients:
        return error_response(status.HTTP_400_BAD_REQUEST, "Recipients are required")

    body = email_request.body or ""
    if not body.strip():
        return error_response(status.HTTP_400_BAD_REQUEST, "Email body is required")

    subject = email_request.subject or settings.default_email_subject
    try:
        await mailer.send_summary(recipients, subject, body)
    except MailerError as exc:
        logger.error(f"Email sending error: {exc}")
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Failed to send email",
            details=str(exc),
        )

    response_payload = EmailResponseModel(
        message="Email sent successfully", recipients=len(recipients)
    )
    return JSONResponse(content=response_payload.model_dump())
