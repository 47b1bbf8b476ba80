"""
Prompt templates for resume summarization and structured extraction.
Changing wording here is a content change: bump PROMPT_VERSION.
"""
import json
from typing import Any, Dict

PROMPT_VERSION = "2024.2"

# ============================================================================
# Structured Resume Schema
# ============================================================================

# List entries show the shape of one item; empty defaults use [] instead.
RESUME_SCHEMA_SKELETON: Dict[str, Any] = {
    "personalInfo": {
        "name": "",
        "title": "",
        "location": "",
        "summary": "",
        "contact": {
            "email": "",
            "phone": "",
            "github": "",
            "linkedin": "",
            "portfolio": "",
            "website": "",
        },
    },
    "education": [
        {
            "institution": "",
            "degree": "",
            "fieldOfStudy": "",
            "startDate": "",
            "endDate": "",
            "grade": "",
            "location": "",
            "highlights": [],
        }
    ],
    "experience": [
        {
            "company": "",
            "position": "",
            "location": "",
            "startDate": "",
            "endDate": "",
            "current": "",
            "description": "",
            "achievements": [],
            "technologies": [],
        }
    ],
    "projects": [
        {
            "name": "",
            "description": "",
            "role": "",
            "technologies": [],
            "url": "",
            "repository": "",
            "startDate": "",
            "endDate": "",
        }
    ],
    "skills": {
        "technical": [],
        "programmingLanguages": [],
        "frameworks": [],
        "tools": [],
        "databases": [],
        "cloud": [],
        "soft": [],
        "languages": [],
    },
    "certifications": [
        {"name": "", "issuer": "", "date": "", "expiryDate": "", "credentialId": "", "url": ""}
    ],
    "awards": [
        {"title": "", "issuer": "", "date": "", "description": ""}
    ],
    "publications": [
        {"title": "", "publisher": "", "date": "", "url": "", "authors": []}
    ],
    "volunteering": [
        {"organization": "", "role": "", "startDate": "", "endDate": "", "description": ""}
    ],
    "onlinePresence": {
        "github": "",
        "linkedin": "",
        "portfolio": "",
        "blog": "",
        "twitter": "",
        "stackoverflow": "",
        "other": [],
    },
    "interests": [],
    "references": [
        {"name": "", "position": "", "company": "", "contact": "", "relationship": ""}
    ],
    "additionalSections": {},
}


def empty_like(value: Any) -> Any:
    """Empty-typed copy of a skeleton value: dicts keep their keys, lists become []."""
    if isinstance(value, dict):
        return {key: empty_like(item) for key, item in value.items()}
    if isinstance(value, list):
        return []
    return ""


def empty_resume_record() -> Dict[str, Any]:
    return empty_like(RESUME_SCHEMA_SKELETON)


# ============================================================================
# Templates
# ============================================================================

SUMMARY_PROMPT_TEMPLATE = """You are an expert technical recruiter and HR professional reviewing a candidate's resume.

Write a concise, well-structured summary of the resume below using these sections:

**Personal Information**: Name, contact details, location
**Professional Summary**: Current role, years of experience, key areas of expertise
**Core Skills**: Top 5-7 technical and professional skills
**Work Experience**: The 2-3 most recent positions with key achievements
**Education**: Highest degree and institution
**Overall Assessment**: Main strengths, notable gaps, and the roles this candidate suits best

Only use facts stated in the resume. Do not invent names, dates, employers or metrics.

Resume Content:
\"\"\"
{text}
\"\"\"

Provide a clear, professional summary in the format above."""


EXTRACTION_PROMPT_TEMPLATE = """You are a resume parsing engine. Extract every piece of information from the resume below into JSON.

RULES:
1. Return ONLY a single JSON object. No markdown, no code fences, no commentary.
2. Use EXACTLY the structure of the schema below. Every key must be present.
3. Never omit a key. Use "" for unknown strings, [] for empty lists and {{}} for empty objects.
4. List entries in the schema show the shape of ONE item; repeat that shape for each entry found.
5. Copy URLs, emails and phone numbers exactly as written. Do not invent data.
6. Dates: keep the resume's format; use "Present" for ongoing roles and set "current" to "true".
7. Put sections that fit nowhere else in "additionalSections" as "Section Title": "content".

SCHEMA:
{schema}

Resume Content:
\"\"\"
{text}
\"\"\"

JSON:"""


def build_summary_prompt(text: str) -> str:
    return SUMMARY_PROMPT_TEMPLATE.format(text=text)


def build_extraction_prompt(text: str) -> str:
    schema = json.dumps(RESUME_SCHEMA_SKELETON, indent=2)
    return EXTRACTION_PROMPT_TEMPLATE.format(schema=schema, text=text)
