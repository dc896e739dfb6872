import logging
from datetime import datetime
from typing import Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from webgate.models.page_content import PageContent
from webgate.utils.tokens import utcnow

logger = logging.getLogger(__name__)


class ContentStore:
    """Language-scoped page sections, last write wins."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def get(self, page: str, language: str) -> Dict[str, Optional[str]]:
        rows = (
            self.db.query(PageContent)
            .filter(PageContent.page_id == page, PageContent.language == language)
            .order_by(PageContent.id)
            .all()
        )
        return {row.section_id: row.content for row in rows}

    def upsert(
        self,
        page: str,
        language: str,
        editor: Optional[str],
        sections: Dict[str, Optional[str]],
        now: Optional[datetime] = None,
    ) -> int:
        """
        Write every section in one transaction.

        Returns:
            Number of sections written
        """
        modified_at = now or utcnow()

        for attempt in range(2):
            try:
                existing = {
                    row.section_id: row
                    for row in self.db.query(PageContent).filter(
                        PageContent.page_id == page,
                        PageContent.language == language,
                        PageContent.section_id.in_(list(sections)),
                    )
                }
                for section_id, body in sections.items():
                    row = existing.get(section_id)
                    if row is None:
                        row = PageContent(page_id=page, section_id=section_id, language=language)
                        self.db.add(row)
                    row.content = body
                    row.modified_by = editor
                    row.modified_at = modified_at
                self.db.commit()
                break
            except IntegrityError:
                # A concurrent writer inserted one of the sections first
                self.db.rollback()
                if attempt:
                    raise

        logger.info(
            f"[Content] {len(sections)} section(s) written for page={page} lang={language}"
        )
        return len(sections)
