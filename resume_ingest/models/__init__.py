from .resume_record import ResumeRecord

__all__ = [
    "ResumeRecord",
]
