"""Page and static file routes.

`/` hands out a fresh subject URL; the UUID in the path is the subject id
the browser uses for every API call.
"""

import mimetypes
import re
import uuid
from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse, RedirectResponse

from mnexium.demo.dependencies import SettingsDep
from mnexium.demo.exceptions import PageNotFoundError
from mnexium.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()

DEFAULT_STATIC_DIR = Path(__file__).resolve().parent.parent / "static"
STATIC_SUFFIXES = {".html", ".css", ".js"}
SUBJECT_PATTERN = re.compile(r"[a-f0-9-]+")


def static_root(static_dir: str | None) -> Path:
    return Path(static_dir).resolve() if static_dir else DEFAULT_STATIC_DIR


def resolve_static(root: Path, relative: str) -> Path:
    """Map a request path onto a file under root.

    Raises:
        PageNotFoundError: Path escapes root, has a disallowed suffix,
            or does not exist
    """
    candidate = (root / relative.lstrip("/")).resolve()
    if not candidate.is_relative_to(root):
        raise PageNotFoundError()
    if candidate.suffix not in STATIC_SUFFIXES or not candidate.is_file():
        raise PageNotFoundError()
    return candidate


def _file_response(path: Path) -> FileResponse:
    media_type, _ = mimetypes.guess_type(path.name)
    return FileResponse(path, media_type=media_type or "application/octet-stream")


def _check_subject(subject_id: str) -> None:
    if not SUBJECT_PATTERN.fullmatch(subject_id):
        raise PageNotFoundError()


@router.get("/")
async def index() -> RedirectResponse:
    """Redirect to a page for a new subject."""
    subject_id = uuid.uuid4()
    logger.debug("subject_assigned", subject_id=str(subject_id))
    return RedirectResponse(f"/u/{subject_id}", status_code=302)


@router.get("/u/{subject_id}")
async def chat_page(subject_id: str, settings: SettingsDep) -> FileResponse:
    """Serve the chat page."""
    _check_subject(subject_id)
    return _file_response(resolve_static(static_root(settings.demo.static_dir), "index.html"))


@router.get("/u/{subject_id}/memories")
async def memories_page(subject_id: str, settings: SettingsDep) -> FileResponse:
    """Serve the memories page."""
    _check_subject(subject_id)
    return _file_response(
        resolve_static(static_root(settings.demo.static_dir), "memories.html")
    )


@router.get("/{path:path}")
async def static_file(path: str, request: Request, settings: SettingsDep) -> FileResponse:
    """Serve a static .html, .css or .js file."""
    logger.debug("static_request", path=request.url.path)
    return _file_response(resolve_static(static_root(settings.demo.static_dir), path))
