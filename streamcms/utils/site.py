"""
Site naming helpers.

The public pages and poster filenames are keyed off the site's domain.
"""

import re
from typing import Optional

from streamcms.config import settings

DEFAULT_SITE_NAME = "Stream CMS"

_LOCAL_HOSTS = {"localhost", "127.0.0.1", "0.0.0.0"}


def clean_domain(domain: str) -> str:
    """Strip protocol, leading www. and port: 'https://www.x.com:8000' -> 'x.com'."""
    domain = re.sub(r"^(https?://)?(www\.)?", "", domain.strip().lower())
    return domain.split("/")[0].split(":")[0]


def format_domain_to_site_name(domain: str) -> str:
    """
    Format a domain name into a readable site name.

    Examples:
        example.com             -> "Example"
        my-streaming-site.com   -> "My Streaming Site"
        stream-cms.vercel.app   -> "Stream Cms"
    """
    domain = clean_domain(domain)
    if not domain or domain in _LOCAL_HOSTS:
        return DEFAULT_SITE_NAME

    # First label: the name before the TLD, or the project name on shared hosts
    label = domain.split(".")[0]

    words = re.split(r"[-_]+", label)
    return " ".join(word.capitalize() for word in words if word)


def get_site_name(domain: Optional[str] = None) -> str:
    if settings.site_name:
        return settings.site_name
    return format_domain_to_site_name(domain or settings.site_domain)
