"""
HTTP adapter for the figma2jsx conversion pipeline.

Architectural role:
- Expose the input-acquisition surface and the conversion orchestrator to a
  browser front end.
- Translate multipart uploads and JSON bodies into surface calls.
- Shape orchestrator state into JSON responses.

Endpoint responsibilities:
- `GET /v1/input`: describe the active input modality.
- `POST /v1/input/file`: select a screenshot file.
- `POST /v1/input/paste`: submit the entries of one clipboard paste.
- `PUT /v1/input/text`: set Figma JSON text.
- `DELETE /v1/input`: clear the input and revoke its preview.
- `GET /v1/previews/{preview_id}`: serve the active image preview.
- `POST /v1/convert`: run one conversion and return the final state.
- `GET /v1/conversion`: current conversion state.
- `GET /v1/export`: generated code as plain text for clipboard copy.

Session model:
- One in-process session (surface + orchestrator) shared by all requests,
  built lazily from `load_config()` on first use.

Error handling strategy:
- Rejected input -> HTTP 400.
- Conversion requested while one is running -> HTTP 409.
- Export or preview without content -> HTTP 404.
- Pipeline failures are not HTTP errors: they are reported as a `failed`
  conversion state with a message.

Side effects:
- Loads environment variables at import time via `load_dotenv()`.
"""

from dotenv import load_dotenv

load_dotenv()

import logging
import os

import uvicorn
from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.responses import PlainTextResponse, Response
from pydantic import BaseModel

from figma2jsx.api.multimodal.image_encoder import resolve_mime_type
from figma2jsx.api.multimodal.input_surface import InputSurface
from figma2jsx.api.multimodal.preview_store import PreviewStore
from figma2jsx.core.conversion_types import (
    ClipboardItem,
    ConversionState,
    ImageBlob,
    ImageInput,
    StructuredText,
)
from figma2jsx.core.engine import ConversionOrchestrator
from figma2jsx.core.errors import InputRejected, NothingToExport
from figma2jsx.llm.client import CompletionClient
from figma2jsx.llm.provider_config import load_config


logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)

app = FastAPI(title="figma2jsx")


# ============================================================
# Session
# ============================================================

class Session:
    """Input surface and orchestrator serving one browser user."""

    def __init__(self, surface: InputSurface, orchestrator: ConversionOrchestrator):
        self.surface = surface
        self.orchestrator = orchestrator


_SESSION: Session | None = None


def build_session() -> Session:
    config = load_config()
    surface = InputSurface(PreviewStore(), max_image_bytes=config.max_image_bytes)
    orchestrator = ConversionOrchestrator(
        surface,
        CompletionClient(config),
        settings=config.models,
    )
    return Session(surface, orchestrator)


def get_session() -> Session:
    global _SESSION
    if _SESSION is None:
        _SESSION = build_session()
    return _SESSION


def set_session(session: Session | None) -> None:
    """Override or clear the shared session (used by tests and embedders)."""
    global _SESSION
    _SESSION = session


# ============================================================
# Response Schemas
# ============================================================

class InputState(BaseModel):
    kind: str
    preview_url: str | None = None
    file_name: str | None = None
    text_length: int = 0


class StructuredTextBody(BaseModel):
    text: str


class PasteResult(BaseModel):
    handled: bool
    input: InputState


class ConversionStateBody(BaseModel):
    status: str
    code: str | None = None
    message: str | None = None


def _input_state(surface: InputSurface) -> InputState:
    modality = surface.modality
    if isinstance(modality, ImageInput):
        preview_id = PreviewStore.preview_id(modality.handle.preview_url)
        return InputState(
            kind="image",
            preview_url=f"/v1/previews/{preview_id}",
            file_name=modality.handle.blob.file_name,
        )
    if isinstance(modality, StructuredText):
        return InputState(kind="structured_text", text_length=len(modality.content))
    return InputState(kind="none")


def _state_body(state: ConversionState) -> ConversionStateBody:
    return ConversionStateBody(
        status=state.status.value,
        code=state.code,
        message=state.message,
    )


# ============================================================
# Input Endpoints
# ============================================================

@app.get("/v1/input")
def get_input() -> InputState:
    return _input_state(get_session().surface)


def _reject_oversized(file: UploadFile, max_bytes: int) -> None:
    """Refuse an upload whose reported size is over the limit before reading it."""
    if file.size is not None and file.size > max_bytes:
        logger.info("Rejected upload %s: %d bytes", file.filename, file.size)
        raise HTTPException(status_code=400, detail="File exceeds max size limit")


@app.post("/v1/input/file")
async def select_file(file: UploadFile = File(...)) -> InputState:
    session = get_session()
    _reject_oversized(file, session.surface.max_image_bytes)
    blob = ImageBlob(
        data=await file.read(),
        mime_type=file.content_type,
        file_name=file.filename,
    )
    try:
        session.surface.select_file(blob)
    except InputRejected as err:
        logger.info("Rejected upload %s: %s", file.filename, err)
        raise HTTPException(status_code=400, detail=str(err))
    return _input_state(session.surface)


@app.post("/v1/input/paste")
async def paste_items(items: list[UploadFile] = File(...)) -> PasteResult:
    """Accept the clipboard entries of one paste event, in clipboard order."""
    session = get_session()
    for item in items:
        if "image" in (item.content_type or "").lower():
            _reject_oversized(item, session.surface.max_image_bytes)
            break

    clipboard_items = [
        ClipboardItem(
            mime_type=item.content_type or "",
            data=await item.read(),
            file_name=item.filename,
        )
        for item in items
    ]
    try:
        handled = session.surface.paste_clipboard_items(clipboard_items)
    except InputRejected as err:
        logger.info("Rejected pasted image: %s", err)
        raise HTTPException(status_code=400, detail=str(err))
    return PasteResult(handled=handled, input=_input_state(session.surface))


@app.put("/v1/input/text")
def set_text(body: StructuredTextBody) -> InputState:
    session = get_session()
    session.surface.set_structured_text(body.text)
    return _input_state(session.surface)


@app.delete("/v1/input")
def clear_input() -> InputState:
    session = get_session()
    session.surface.clear()
    return _input_state(session.surface)


@app.get("/v1/previews/{preview_id}")
def get_preview(preview_id: str):
    blob = get_session().surface.preview_store.resolve(preview_id)
    if blob is None:
        raise HTTPException(status_code=404, detail="Preview not found")

    if blob.data is not None:
        payload = blob.data
    else:
        try:
            with open(blob.path, "rb") as f:
                payload = f.read()
        except OSError:
            raise HTTPException(status_code=404, detail="Preview not found")

    media_type = resolve_mime_type(blob, payload) or "application/octet-stream"
    return Response(content=payload, media_type=media_type)


# ============================================================
# Conversion Endpoints
# ============================================================

@app.post("/v1/convert")
async def convert() -> ConversionStateBody:
    orchestrator = get_session().orchestrator
    if orchestrator.is_busy:
        raise HTTPException(status_code=409, detail="A conversion is already in progress")

    state = await orchestrator.start()
    return _state_body(state)


@app.get("/v1/conversion")
def get_conversion() -> ConversionStateBody:
    return _state_body(get_session().orchestrator.state)


@app.get("/v1/export", response_class=PlainTextResponse)
def export_code() -> PlainTextResponse:
    try:
        code = get_session().orchestrator.export_code()
    except NothingToExport as err:
        raise HTTPException(status_code=404, detail=str(err))
    return PlainTextResponse(code)


def run() -> None:
    """Serve the adapter with uvicorn (`HOST`/`PORT` from the environment)."""
    uvicorn.run(
        app,
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
    )
