from pydantic import BaseModel, Field
from typing import Dict, Optional

from webgate.constants import DEFAULT_CONTENT_LANGUAGE, DEFAULT_CONTENT_PAGE


class ContentUpdate(BaseModel):
    """Content editor save: section id -> body for one page and language"""
    page: str = Field(DEFAULT_CONTENT_PAGE, min_length=1, max_length=100)
    lang: str = Field(DEFAULT_CONTENT_LANGUAGE, min_length=1, max_length=10)
    content: Optional[Dict[str, Optional[str]]] = None
    modifiedBy: Optional[str] = Field(None, max_length=255)


class ContentResponse(BaseModel):
    success: bool = True
    content: Dict[str, Optional[str]]
