from pathlib import Path

from fastapi.templating import Jinja2Templates

from streamcms.config import settings
from streamcms.utils.site import get_site_name

TEMPLATES_DIR = Path(__file__).parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def format_views(count: int) -> str:
    return f"{count or 0:,}"


templates.env.filters["thousands"] = format_views
templates.env.globals["site_name"] = get_site_name()
templates.env.globals["app_version"] = settings.app_version
