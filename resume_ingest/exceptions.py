"""
Error taxonomy for resume ingestion.

Each error carries the HTTP status it maps to and a stable machine-readable
code, so routers can raise them directly and a single handler renders them.
"""
from typing import Dict, Optional


class ResumeProcessingError(Exception):
    """Base class for every error the ingestion pipeline raises on purpose."""

    status_code: int = 500
    code: str = "UnknownError"
    default_message: str = "An unexpected error occurred while processing the resume."

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.message = message or self.default_message
        self.details = details
        self.headers = headers
        super().__init__(self.message)


class MissingInput(ResumeProcessingError):
    status_code = 400
    code = "MissingInput"
    default_message = "Both fileUrl and fileName are required."


class FileTooLarge(ResumeProcessingError):
    status_code = 413
    code = "FileTooLarge"
    default_message = "File exceeds the maximum allowed size."


class UnsupportedFileType(ResumeProcessingError):
    status_code = 415
    code = "UnsupportedFileType"
    default_message = "Unsupported file type. Upload a PDF, DOCX or TXT resume."


class LegacyFormatUnsupported(ResumeProcessingError):
    status_code = 400
    code = "LegacyFormatUnsupported"
    default_message = (
        "Legacy .doc files are not supported. "
        "Please convert the resume to .docx or PDF and upload it again."
    )


class NoReadableText(ResumeProcessingError):
    status_code = 400
    code = "NoReadableText"
    default_message = (
        "No readable text found in the document. "
        "Scanned or image-only files are not supported."
    )


class TextTooShort(ResumeProcessingError):
    status_code = 400
    code = "TextTooShort"
    default_message = "The document does not contain enough text to analyze."


class DocumentFetchFailed(ResumeProcessingError):
    status_code = 400
    code = "DocumentFetchFailed"
    default_message = "Could not fetch resume from storage."


class CompletionApiError(ResumeProcessingError):
    status_code = 502
    code = "CompletionApiError"
    default_message = "The AI completion service returned an error."

    def __init__(self, message: Optional[str] = None, upstream_status: Optional[int] = None, **kwargs):
        self.upstream_status = upstream_status
        super().__init__(message, **kwargs)


class InvalidModelJson(ResumeProcessingError):
    status_code = 502
    code = "InvalidModelJson"
    default_message = "The AI model returned structured data that is not valid JSON."


class SummarizationFailed(ResumeProcessingError):
    status_code = 502
    code = "SummarizationFailed"
    default_message = "The AI service could not summarize the resume. Please try again later."


class StructuredExtractionFailed(ResumeProcessingError):
    status_code = 502
    code = "StructuredExtractionFailed"
    default_message = "The AI service could not extract structured resume data. Please try again later."


class PersistenceFailed(ResumeProcessingError):
    status_code = 500
    code = "PersistenceFailed"
    default_message = (
        "The AI analysis succeeded but saving the result failed. "
        "You may resubmit the resume."
    )


class RateLimited(ResumeProcessingError):
    status_code = 429
    code = "RateLimited"
    default_message = "Rate limit exceeded. Please wait before trying again."

    def __init__(self, message: Optional[str] = None, remaining: int = 0, reset_seconds: int = 60, **kwargs):
        self.remaining = remaining
        self.reset_seconds = reset_seconds
        kwargs.setdefault("headers", {
            "Retry-After": str(reset_seconds),
            "X-RateLimit-Remaining": str(remaining),
            "X-RateLimit-Reset": str(reset_seconds),
        })
        super().__init__(message, **kwargs)


class ServiceNotConfigured(ResumeProcessingError):
    status_code = 503
    code = "ServiceNotConfigured"
    default_message = "AI service not configured. Please contact administrator."


class UnknownError(ResumeProcessingError):
    pass
