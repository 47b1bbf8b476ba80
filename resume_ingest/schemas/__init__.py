from .resume import ProcessResumeRequest, ResumeRecordCreate, ResumeRecordResponse

__all__ = [
    "ProcessResumeRequest",
    "ResumeRecordCreate",
    "ResumeRecordResponse",
]
