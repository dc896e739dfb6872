"""
Page Content Model

Editable page sections, one row per (page, section, language).
"""
from sqlalchemy import Column, Integer, String, Text, TIMESTAMP, UniqueConstraint
from sqlalchemy.sql import func
from webgate.database import Base


class PageContent(Base):
    """Page content table"""
    __tablename__ = "page_content"
    __table_args__ = (
        UniqueConstraint("page_id", "section_id", "language", name="uq_page_section_language"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    page_id = Column(String(100), nullable=False, index=True)
    section_id = Column(String(100), nullable=False)
    language = Column(String(10), nullable=False, default="en")
    content = Column(Text, nullable=True)
    modified_by = Column(String(255), nullable=True)
    modified_at = Column(TIMESTAMP, nullable=True)
