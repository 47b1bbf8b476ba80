"""
Persistence for processed resumes.
"""
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import PersistenceFailed
from ..models import ResumeRecord
from ..schemas.resume import ResumeRecordCreate

logger = logging.getLogger(__name__)


class ResumeRecordRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def insert(self, data: ResumeRecordCreate) -> ResumeRecord:
        """Insert and commit; id and created_at are assigned here."""
        record = ResumeRecord(**data.model_dump())
        try:
            self.db.add(record)
            await self.db.commit()
            await self.db.refresh(record)
        except SQLAlchemyError as e:
            logger.exception("Failed to save resume record")
            await self.db.rollback()
            raise PersistenceFailed(details=str(e))
        return record
