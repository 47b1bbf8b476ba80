"""
Parses the model's JSON extraction and merges in regex-harvested URLs.
"""
import json
import logging
from typing import Any, Dict

from ..exceptions import InvalidModelJson
from .prompts import RESUME_SCHEMA_SKELETON, empty_like
from .url_harvester import HarvestedUrls

logger = logging.getLogger(__name__)

# Contact fields backfilled from harvested URLs of the same category
ENRICHED_CONTACT_FIELDS = ("github", "linkedin", "portfolio")


def strip_code_fence(text: str) -> str:
    """Remove a leading ```json / ``` and trailing ``` wrapper if present."""
    text = (text or "").strip()
    if text.lower().startswith("```json"):
        text = text[7:]
    elif text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def _fill_missing_keys(data: Dict[str, Any], skeleton: Dict[str, Any]) -> Dict[str, Any]:
    """
    Add skeleton keys the model left out (or set to null) with empty-typed defaults.
    Nested objects are filled recursively; list items and extra keys pass through.
    """
    for key, template in skeleton.items():
        value = data.get(key)
        if value is None:
            data[key] = empty_like(template)
        elif isinstance(template, dict) and isinstance(value, dict):
            _fill_missing_keys(value, template)
    return data


def _safe_get(obj, *keys, default=None):
    """Safely traverse nested dicts."""
    for key in keys:
        if isinstance(obj, dict):
            obj = obj.get(key)
        else:
            return default
        if obj is None:
            return default
    return obj


def parse_model_json(raw_completion_text: str) -> Dict[str, Any]:
    cleaned = strip_code_fence(raw_completion_text)
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.warning(f"Model returned invalid JSON: {e.msg} at line {e.lineno} column {e.colno}")
        raise InvalidModelJson(details=str(e))

    if not isinstance(parsed, dict):
        raise InvalidModelJson(details=f"Expected a JSON object, got {type(parsed).__name__}")
    return parsed


def reconcile(raw_completion_text: str, harvested: HarvestedUrls) -> Dict[str, Any]:
    """
    Build the structured resume record from a model completion.

    Fill-if-empty: a contact field is only set from harvested URLs when the
    model left it falsy. ``extractedUrls`` is always attached.
    """
    record = _fill_missing_keys(parse_model_json(raw_completion_text), RESUME_SCHEMA_SKELETON)

    contact = _safe_get(record, "personalInfo", "contact")
    if isinstance(contact, dict):
        for field in ENRICHED_CONTACT_FIELDS:
            candidates = harvested.by_category.get(field) or []
            if not contact.get(field) and candidates:
                contact[field] = candidates[0]

    record["extractedUrls"] = {category: list(urls) for category, urls in harvested.by_category.items()}
    return record
