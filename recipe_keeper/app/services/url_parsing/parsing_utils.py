"""General parsing utilities for recipe extraction."""

import logging
import re
from typing import Iterable, List, Optional
from urllib.parse import quote, urlparse

from recipe_keeper.app.core.config import get_settings
from recipe_keeper.app.services.url_parsing.constants import (
    HTML_ENTITIES,
    PLACEHOLDER_IMAGE_PATH,
)

logger = logging.getLogger(__name__)

_ENTITY_RE = re.compile(r"&(#[0-9]{1,8}|#[xX][0-9a-fA-F]{1,8}|[A-Za-z][A-Za-z0-9]*);")
_YIELD_LABEL_RE = re.compile(r"^(?:yield|serves|servings|makes|for)s?\b:?\s*", re.I)
_URL_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")
_ISO_DURATION_RE = re.compile(
    r"^P(?:(\d{1,9})D)?(?:T(?:(\d{1,9})H)?(?:(\d{1,9})M)?(?:(\d{1,9}(?:\.\d{1,9})?)S)?)?$", re.I
)


def _decode_entity(match: re.Match) -> str:
    token = match.group(1)
    if not token.startswith("#"):
        return HTML_ENTITIES.get(token, match.group(0))
    if token[1] in "xX":
        codepoint = int(token[2:], 16)
    else:
        codepoint = int(token[1:])
    # NUL, surrogates and values past the Unicode range stay literal.
    if codepoint == 0 or 0xD800 <= codepoint <= 0xDFFF or codepoint > 0x10FFFF:
        return match.group(0)
    return chr(codepoint)


def clean_text(text) -> str:
    """Decode HTML entities and normalize whitespace in text.

    Decoding repeats until the text stops changing, so double-escaped input
    such as ``&amp;lt;`` is fully decoded and a second call is a no-op.
    """
    if text is None:
        return ""
    if not isinstance(text, str):
        text = str(text)
    previous = None
    while previous != text:
        previous = text
        text = _ENTITY_RE.sub(_decode_entity, text)
    return re.sub(r"\s+", " ", text).strip()


def normalize_yield(raw) -> str:
    """Canonicalize free-form serving text, e.g. "Serves: 4" -> "4 servings"."""
    if raw is None or isinstance(raw, bool):
        return ""
    if isinstance(raw, float) and raw.is_integer():
        raw = int(raw)
    text = clean_text(str(raw))
    if not text:
        return ""
    text = _YIELD_LABEL_RE.sub("", text).strip()
    if text.lower() == "one" or text == "1":
        return "1 serving"
    if re.fullmatch(r"\d+", text) or re.fullmatch(r"\d+-\d+", text):
        return f"{text} servings"
    return text


def resolve_image_url(reference: Optional[str], page_url: str) -> str:
    """Turn a possibly relative image reference into an absolute URL."""
    if not reference:
        return ""
    reference = reference.strip()
    if _URL_SCHEME_RE.match(reference) or reference.startswith(PLACEHOLDER_IMAGE_PATH):
        return reference
    try:
        parsed = urlparse(page_url or "")
    except ValueError:
        logger.warning("Could not resolve image %s against malformed URL %s", reference, page_url)
        return reference
    if not parsed.scheme or not parsed.netloc:
        logger.warning("Could not resolve image %s against malformed URL %s", reference, page_url)
        return reference
    if reference.startswith("//"):
        return f"{parsed.scheme}:{reference}"
    origin = f"{parsed.scheme}://{parsed.netloc}"
    if reference.startswith("/"):
        return f"{origin}{reference}"
    directory = parsed.path.rsplit("/", 1)[0] if "/" in parsed.path else ""
    return f"{origin}{directory}/{reference}"


def placeholder_image_url(title: str) -> str:
    """Generated image reference the front end renders as a decorative placeholder."""
    settings = get_settings()
    query = quote(title or "", safe="!'()*")
    return (
        f"{PLACEHOLDER_IMAGE_PATH}?height={settings.placeholder_image_height}"
        f"&width={settings.placeholder_image_width}&query={query}"
    )


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'s' if count > 1 else ''}"


def format_duration(value: Optional[str]) -> str:
    """Render an ISO-8601 duration (PT1H30M) as "1 hr 30 mins".

    Text that is not an ISO duration is returned unchanged.
    """
    if not value:
        return ""
    text = value.strip()
    match = _ISO_DURATION_RE.match(text)
    if not match:
        return text
    days = int(match.group(1) or 0)
    hours = int(match.group(2) or 0)
    minutes = int(match.group(3) or 0)
    seconds = int(float(match.group(4) or 0))

    parts: List[str] = []
    if days > 0:
        parts.append(_plural(days, "day"))
    if hours > 0:
        parts.append(_plural(hours, "hr"))
    if minutes > 0:
        parts.append(_plural(minutes, "min"))
    if seconds > 0 and not parts:
        parts.append(_plural(seconds, "sec"))
    return " ".join(parts)


def _image_object_url(value: dict) -> str:
    for key in ("url", "@id"):
        candidate = value.get(key)
        if isinstance(candidate, str) and candidate.strip():
            return candidate.strip()
    return ""


def extract_image(value) -> str:
    """Extract image URL from the string, list or object forms schema.org allows."""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, list):
        for item in value:
            if isinstance(item, str) and item.strip():
                return item.strip()
            if isinstance(item, dict):
                found = _image_object_url(item)
                if found:
                    return found
        return ""
    if isinstance(value, dict):
        return _image_object_url(value)
    return ""


def extract_instruction_text(instructions) -> List[str]:
    """Extract step text from various instruction formats."""
    steps: List[str] = []
    if isinstance(instructions, str):
        cleaned = clean_text(instructions)
        if cleaned:
            steps.append(cleaned)
    elif isinstance(instructions, list):
        for entry in instructions:
            if isinstance(entry, str):
                cleaned = clean_text(entry)
            elif isinstance(entry, dict):
                text_val = entry.get("text") or entry.get("name")
                cleaned = clean_text(text_val) if isinstance(text_val, str) else ""
            else:
                continue
            if cleaned:
                steps.append(cleaned)
    return steps


def coerce_keywords(value) -> List[str]:
    """Split schema.org keywords (comma string or list) into cleaned tokens."""
    if isinstance(value, str):
        tokens = value.split(",")
    elif isinstance(value, list):
        tokens = [item for item in value if isinstance(item, str)]
    else:
        return []
    return [cleaned for cleaned in (clean_text(token) for token in tokens) if cleaned]


def dedupe_categories(values: Iterable[str]) -> List[str]:
    """Drop empty and repeated categories, comparing case-insensitively."""
    seen = set()
    unique: List[str] = []
    for value in values:
        cleaned = clean_text(value)
        key = cleaned.casefold()
        if not cleaned or key in seen:
            continue
        seen.add(key)
        unique.append(cleaned)
    return unique


def element_text(element) -> str:
    """Visible text of a BeautifulSoup element, cleaned."""
    if element is None:
        return ""
    return clean_text(element.get_text(" ", strip=True))
