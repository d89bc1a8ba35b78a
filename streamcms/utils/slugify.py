import re
from typing import Optional

from unidecode import unidecode

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(text: str, max_length: Optional[int] = None) -> str:
    """Turn a title or name into a lowercase, hyphen-separated URL slug."""
    text = unidecode(text or "").lower()
    slug = _NON_ALNUM.sub("-", text).strip("-")
    if max_length and len(slug) > max_length:
        slug = slug[:max_length].rstrip("-")
    return slug


def resolve_slug(explicit: Optional[str], source: str, max_length: int = 255) -> str:
    """Use the explicit slug when given, otherwise derive one from source.

    Raises ValueError when neither produces a usable slug (e.g. a title
    made only of punctuation).
    """
    slug = slugify(explicit, max_length) if explicit else slugify(source, max_length)
    if not slug:
        raise ValueError("Could not derive a slug")
    return slug
