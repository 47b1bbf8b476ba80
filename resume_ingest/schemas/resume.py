"""
Resume processing schemas for requests and persisted records
"""
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field
from datetime import datetime


# ============================================================================
# Request Schemas
# ============================================================================

class ProcessResumeRequest(BaseModel):
    """Body of POST /process-resume. Presence is checked by the pipeline."""
    file_url: Optional[str] = Field(default=None, alias="fileUrl")
    file_name: Optional[str] = Field(default=None, alias="fileName")
    user_name: Optional[str] = Field(default=None, alias="userName")
    extract_json: bool = Field(default=True, alias="extractJSON")

    class Config:
        populate_by_name = True


# ============================================================================
# Persisted Record Schemas
# ============================================================================

class ResumeRecordCreate(BaseModel):
    name: str
    resume_url: str
    summary_of_resume: str
    structured_data: Optional[Dict[str, Any]] = None


class ResumeRecordResponse(BaseModel):
    id: str
    name: str
    resume_url: str
    summary_of_resume: str
    structured_data: Optional[Dict[str, Any]] = None
    created_at: datetime

    class Config:
        from_attributes = True
