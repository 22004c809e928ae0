"""
Aula Web Backend — Static Files & SPA Fallback
================================================

What:  Serves files from PUBLIC_DIR and falls back to the SPA entry document.
Why:   The frontend uses client-side routing; a reload on /alumnos/nuevo
       must return index.html instead of a 404.
How:   A single catch-all GET route, included LAST in create_app() so the
       API routes above it always win.

Resolution order for GET /<path>:
    1. <PUBLIC_DIR>/<path> is a file inside PUBLIC_DIR  → that file
    2. <PUBLIC_DIR>/<path>/index.html exists            → that file
    3. anything else                                    → <PUBLIC_DIR>/index.html

Security:
    Resolved paths must stay within PUBLIC_DIR; "../" tricks fall through
    to the entry document instead of reading arbitrary files.
"""

import logging
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse

from aulaweb.config import Settings
from aulaweb.exceptions import NotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Static"])


def resolve_static_file(public_root: Path, index_file: str, requested: str) -> Optional[Path]:
    """
    Map a request path to a file under public_root, or None.
    """
    if not requested:
        return None
    candidate = (public_root / requested).resolve()
    if not candidate.is_relative_to(public_root):
        logger.warning("Rejected path outside public directory: %s", requested)
        return None
    if candidate.is_file():
        return candidate
    if candidate.is_dir() and (candidate / index_file).is_file():
        return candidate / index_file
    return None


@router.get(
    "/{full_path:path}",
    include_in_schema=False,
)
async def serve_spa(full_path: str, request: Request) -> FileResponse:
    settings: Settings = request.app.state.settings
    public_root = settings.public_path

    static_file = resolve_static_file(public_root, settings.index_file, full_path)
    if static_file is not None:
        return FileResponse(path=str(static_file))

    entry = public_root / settings.index_file
    if not entry.is_file():
        raise NotFoundError(resource="entry document", resource_id=settings.index_file)

    return FileResponse(path=str(entry), media_type="text/html")
