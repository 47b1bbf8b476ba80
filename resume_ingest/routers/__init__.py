from .process_resume import router as process_resume_router

__all__ = [
    "process_resume_router"
]
