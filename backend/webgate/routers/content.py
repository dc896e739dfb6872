"""
Page Content Router

Operator-only read and save of multilingual page sections.
"""
import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from webgate.constants import DEFAULT_CONTENT_LANGUAGE, DEFAULT_CONTENT_PAGE
from webgate.database import get_db
from webgate.dependencies import require_operator
from webgate.errors import Errors
from webgate.models.accounts import OperatorAccount
from webgate.schemas.content import ContentResponse, ContentUpdate
from webgate.schemas.registration import MessageResponse
from webgate.services.content_store import ContentStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/content", tags=["content"])


@router.get("", response_model=ContentResponse)
def get_content(
    page: str = Query(DEFAULT_CONTENT_PAGE, min_length=1, max_length=100),
    lang: str = Query(DEFAULT_CONTENT_LANGUAGE, min_length=1, max_length=10),
    db: Session = Depends(get_db),
    _operator: OperatorAccount = Depends(require_operator),
):
    """Sections of one page in one language; empty when nothing was saved yet."""
    try:
        content = ContentStore(db).get(page, lang)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[Content] Database error while loading: {e}", exc_info=True)
        raise Errors.persistence("Failed to load content", details=type(e).__name__)

    return ContentResponse(content=content)


@router.api_route("", methods=["POST", "PUT"], response_model=MessageResponse)
def update_content(
    data: ContentUpdate,
    db: Session = Depends(get_db),
    operator: OperatorAccount = Depends(require_operator),
):
    """Save every section in the body atomically; existing sections are overwritten."""
    if data.content is None:
        raise Errors.validation("Content is required")

    editor = data.modifiedBy or operator.email
    try:
        ContentStore(db).upsert(data.page, data.lang, editor, data.content)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[Content] Database error while saving: {e}", exc_info=True)
        raise Errors.persistence("Failed to update content", details=type(e).__name__)

    return MessageResponse(success=True, message="Content updated successfully")
