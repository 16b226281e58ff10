"""FastAPI application for the formatting checker.

This module exposes the checking pass and rule extraction over HTTP and
keeps the active rule record in a JSON file.

Usage (from project root, after installing fastapi and uvicorn):

    uvicorn docx_format_checker.api.app:app --reload

Then send a multipart/form-data POST request to
/word-formatting-api/check-doc with a `file` field.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import quote

from fastapi import APIRouter, FastAPI, File, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, Response
from starlette.concurrency import run_in_threadpool

from ..exceptions import DecodeError, FormatCheckError, IntegrityError, SchemaError
from ..generators.annotation_writer import AnnotationConfig
from ..generators.report_renderer import ReportRenderer
from ..pipeline import extract_rules, run_pass
from ..rules.rule_store import RuleStore
from ..rules.schema_parser import parse_rule_schema


logger = logging.getLogger(__name__)

API_PREFIX = "/word-formatting-api"
DOCX_MEDIA_TYPE = "application/octet-stream"
TIMESTAMP_FORMAT = "%Y.%m.%d %H-%M"

ERROR_STATUS = {
    DecodeError: 400,
    SchemaError: 400,
    IntegrityError: 422,
}


def _env_flag(name: str, default: bool) -> bool:
    """Read a boolean environment variable.

    Accepted truthy values: "1", "true", "yes", "y" (case-insensitive).
    """
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y"}


@dataclass
class ServiceConfig:
    """Configuration for the HTTP service."""

    rules_path: str = "resources/formatting-rules.json"
    comment_author: str = "Format Checker"
    highlight_runs: bool = True

    @classmethod
    def from_env(cls) -> "ServiceConfig":
        """Build the configuration from FORMAT_CHECKER_* environment variables."""
        defaults = cls()
        return cls(
            rules_path=os.getenv("FORMAT_CHECKER_RULES_PATH", defaults.rules_path),
            comment_author=os.getenv("FORMAT_CHECKER_COMMENT_AUTHOR", defaults.comment_author),
            highlight_runs=_env_flag("FORMAT_CHECKER_HIGHLIGHT", defaults.highlight_runs),
        )

    def annotation_config(self) -> AnnotationConfig:
        initials = "".join(word[0] for word in self.comment_author.split()).upper()
        return AnnotationConfig(
            author=self.comment_author,
            initials=initials or "FC",
            highlight_runs=self.highlight_runs,
        )


def checked_filename(filename: str, now: Optional[datetime] = None) -> str:
    """Name of the annotated copy of an uploaded file."""
    path = Path(filename)
    timestamp = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
    return f"{path.stem} (checked {timestamp}){path.suffix}"


def _content_disposition(filename: str) -> str:
    quoted = quote(filename)
    if quoted != filename:
        return f"attachment; filename*=utf-8''{quoted}"
    return f'attachment; filename="{filename}"'


async def _read_docx_upload(upload: UploadFile) -> bytes:
    """Read an uploaded .docx file, rejecting empty uploads and other types."""
    if Path(upload.filename or "").suffix.lower() != ".docx":
        raise HTTPException(status_code=400, detail="Wrong file extension, only .docx is supported.")
    content = await upload.read()
    if not content:
        raise HTTPException(status_code=400, detail="No file uploaded.")
    return content


def create_app(config: Optional[ServiceConfig] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Service configuration, read from the environment if not given.

    Returns:
        The configured application.
    """
    config = config or ServiceConfig.from_env()
    store = RuleStore(config.rules_path)
    renderer = ReportRenderer()

    app = FastAPI(title="Word Formatting Checker API", version="0.1.0")
    app.state.config = config
    app.state.rule_store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"],
    )

    @app.exception_handler(FormatCheckError)
    async def format_check_error_handler(request: Request, exc: FormatCheckError) -> JSONResponse:
        status_code = ERROR_STATUS.get(type(exc), 500)
        logger.warning(f"{request.url.path} failed with {exc.category} error: {exc}")
        return JSONResponse(
            status_code=status_code,
            content={"detail": {"category": exc.category, "message": exc.message}},
        )

    @app.get("/", response_class=PlainTextResponse)
    async def index() -> str:
        return "Welcome to Document Formatting Web API..."

    router = APIRouter(prefix=API_PREFIX)

    @router.post("/check-doc")
    async def check_doc(file: UploadFile = File(..., description="Word document (.docx)")) -> Response:
        """Check an uploaded document against the stored rules.

        Returns the annotated document as an attachment named
        "<name> (checked YYYY.MM.DD HH-MM).docx".
        """
        content = await _read_docx_upload(file)
        record = await run_in_threadpool(store.read)
        result = await run_in_threadpool(run_pass, content, record, config.annotation_config())
        filename = checked_filename(file.filename or "document.docx")
        return Response(
            content=result.output,
            media_type=DOCX_MEDIA_TYPE,
            headers={
                "Content-Disposition": _content_disposition(filename),
                "X-Violation-Count": str(len(result.violations)),
            },
        )

    @router.post("/check-report", response_class=HTMLResponse)
    async def check_report(file: UploadFile = File(..., description="Word document (.docx)")) -> str:
        """Check an uploaded document and return an HTML list of the violations."""
        content = await _read_docx_upload(file)
        record = await run_in_threadpool(store.read)
        result = await run_in_threadpool(run_pass, content, record, config.annotation_config())
        return renderer.render(file.filename or "document.docx", result.violations, result.schema.language)

    @router.get("/get-rules")
    async def get_rules() -> Dict[str, Any]:
        """Return the stored rule record."""
        record = await run_in_threadpool(store.read)
        if not record:
            raise HTTPException(status_code=404, detail="Rules file not found.")
        return record

    @router.post("/setup-rules")
    async def setup_rules(request: Request) -> Dict[str, Any]:
        """Validate and store a rule record.

        The body is either the rule object itself or a JSON string holding it.
        """
        try:
            body = await request.json()
            if isinstance(body, str):
                body = json.loads(body)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=f"Body is not valid JSON: {exc}")

        if not isinstance(body, dict) or not body:
            raise HTTPException(status_code=400, detail="Empty json object.")

        schema = parse_rule_schema(body)
        await run_in_threadpool(store.write, body)
        return {"message": "Rules saved successfully.", "warnings": list(schema.warnings)}

    @router.post("/get-rules-from-file")
    async def get_rules_from_file(file: UploadFile = File(..., description="Exemplar document (.docx)")) -> Dict[str, Any]:
        """Infer a rule record from an exemplar document."""
        content = await _read_docx_upload(file)
        return await run_in_threadpool(extract_rules, content)

    app.include_router(router)
    return app


app = create_app()
