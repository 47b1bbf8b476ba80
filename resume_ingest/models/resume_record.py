"""
Resume Record Model - One row per successfully processed resume.
"""
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Text, DateTime, JSON
from ..database import Base


class ResumeRecord(Base):
    """
    Summary and structured data produced for an uploaded resume.
    Rows are insert-only.
    """
    __tablename__ = "resume_records"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    resume_url = Column(String(500), nullable=False)
    summary_of_resume = Column(Text, nullable=False)

    # Native JSON, not an escaped string
    structured_data = Column(JSON, nullable=True)

    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
    )
