"""
Regex-based URL harvesting from resume text.
Independent of the LLM; used to backfill contact links the model misses.
"""
import re
from typing import Dict, List

from pydantic import BaseModel, Field

URL_CATEGORIES = ["github", "linkedin", "portfolio", "social", "professional", "other"]

COMMON_TLDS = [
    "com", "org", "net", "edu", "gov", "mil", "int", "io", "co", "ai", "app", "dev",
    "me", "tech", "xyz", "info", "biz", "us", "uk", "ca", "au", "de", "fr", "in",
    "jp", "cn", "br", "ru", "it", "es", "nl", "se", "no", "dk", "fi", "ch", "at",
    "be", "pl", "pt", "ie", "nz", "za", "mx", "ar", "kr", "sg", "hk", "tw", "ly",
    "gl", "gd", "to", "tv", "cc", "fm", "sh", "site", "online", "store", "blog",
    "cloud", "design", "studio", "page", "codes", "software", "digital", "works",
    "link", "pro", "name", "club", "space", "website", "portfolio",
]

SHORTENER_DOMAINS = [
    "bit.ly", "tinyurl.com", "t.co", "goo.gl", "ow.ly", "is.gd", "buff.ly",
    "rebrand.ly", "cutt.ly", "lnkd.in",
]

# Not preceded by a scheme, path, dot, @ or word character
_STANDALONE = r"(?<![/\w.@-])"
_TLD_ALTERNATION = "|".join(sorted(COMMON_TLDS, key=len, reverse=True))
_PATH = r"(?:/[^\s<>\"'(){}\[\],;|]*)?"

HARVEST_PATTERNS = [
    # Full http(s) URLs
    re.compile(r"https?://[^\s<>\"'(){}\[\],;|]+", re.IGNORECASE),
    # Bare domains on a known TLD, optional www. and path
    re.compile(
        _STANDALONE
        + r"(?:www\.)?(?:[a-z0-9][a-z0-9-]*\.)*[a-z0-9][a-z0-9-]+\.(?:" + _TLD_ALTERNATION + r")(?![\w@-])"
        + _PATH,
        re.IGNORECASE,
    ),
    # Email addresses
    re.compile(r"[\w.+-]+@[\w-]+(?:\.[\w-]+)*\.[a-z]{2,}", re.IGNORECASE),
    # github.com/<user> shorthand
    re.compile(_STANDALONE + r"github\.com/[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?", re.IGNORECASE),
    # @handle mentions
    re.compile(r"(?<![\w.@/])@[A-Za-z0-9_]{2,30}(?![\w@])"),
    # URL shorteners
    re.compile(
        _STANDALONE + r"(?:" + "|".join(re.escape(d) for d in SHORTENER_DOMAINS) + r")/[A-Za-z0-9_-]+",
        re.IGNORECASE,
    ),
]

_TRAILING_PUNCTUATION = ".,:;!?'\""


class HarvestedUrls(BaseModel):
    all_urls: List[str] = Field(default_factory=list)
    by_category: Dict[str, List[str]] = Field(
        default_factory=lambda: {category: [] for category in URL_CATEGORIES}
    )


def categorize_url(url: str) -> str:
    """First matching rule wins."""
    lowered = url.lower()
    if "github.com" in lowered:
        return "github"
    if "linkedin.com" in lowered:
        return "linkedin"
    if "portfolio" in lowered or lowered.endswith(".dev") or lowered.endswith(".me"):
        return "portfolio"
    if any(domain in lowered for domain in ("twitter.com", "instagram.com", "facebook.com")):
        return "social"
    if any(domain in lowered for domain in ("stackoverflow.com", "medium.com", "dev.to")):
        return "professional"
    return "other"


def find_url_candidates(text: str) -> List[str]:
    """Every match of every pass, in pass order, deduplicated by exact string."""
    candidates = []
    for pattern in HARVEST_PATTERNS:
        for match in pattern.finditer(text):
            candidate = match.group(0).rstrip(_TRAILING_PUNCTUATION)
            if candidate:
                candidates.append(candidate)
    return list(dict.fromkeys(candidates))


def harvest_urls(text: str) -> HarvestedUrls:
    urls = find_url_candidates(text or "")
    by_category: Dict[str, List[str]] = {category: [] for category in URL_CATEGORIES}
    for url in urls:
        by_category[categorize_url(url)].append(url)
    return HarvestedUrls(all_urls=urls, by_category=by_category)
