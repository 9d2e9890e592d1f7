from pathlib import Path

import markdown
import nh3
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from markupsafe import Markup

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def sanitize_html(html: str) -> str:
    """Allowlist-clean HTML; scripts, event handlers and javascript: URLs are dropped"""
    return nh3.clean(html or "")


def render_markdown(text: str) -> Markup:
    """Markdown to HTML; editor markup is kept only where the allowlist permits"""
    rendered = markdown.markdown(text or "", extensions=["extra", "sane_lists"])
    return Markup(sanitize_html(rendered))


templates.env.filters["markdown"] = render_markdown


def render_to_string(name: str, **context) -> str:
    return templates.get_template(name).render(**context)


def render_page(name: str, status_code: int = 200, **context) -> HTMLResponse:
    return HTMLResponse(render_to_string(name, **context), status_code=status_code)
