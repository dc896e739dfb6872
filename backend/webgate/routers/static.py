"""
Static File Fallback

Registered last: any request not claimed by an API route is looked up under
STATIC_DIR. "/" serves index.html.
"""
import logging
import os

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse

from webgate.configuration import get_settings
from webgate.errors import Errors

logger = logging.getLogger(__name__)

router = APIRouter(tags=["static"])


def resolve_static_path(root: str, request_path: str):
    """
    Map a URL path to a file under ``root``.

    Returns:
        Absolute file path, or None when missing or outside ``root``
    """
    relative = request_path.strip("/") or "index.html"
    root = os.path.realpath(root)
    candidate = os.path.realpath(os.path.join(root, relative))

    if os.path.commonpath([root, candidate]) != root:
        logger.warning(f"[Static] Rejected path outside static root: {request_path}")
        return None
    if os.path.isdir(candidate):
        candidate = os.path.join(candidate, "index.html")
    if not os.path.isfile(candidate):
        return None
    return candidate


@router.api_route(
    "/{file_path:path}",
    methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
def serve_static(request: Request, file_path: str):
    if request.method not in ("GET", "HEAD"):
        raise Errors.not_found("Not found")

    path = resolve_static_path(get_settings().STATIC_DIR, file_path)
    if path is None:
        raise Errors.not_found("Not found")
    return FileResponse(path)
