from pathlib import Path

from fastapi import Request
from fastapi.templating import Jinja2Templates

from store.memory import StorefrontState

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def render(
    request: Request,
    name: str,
    state: StorefrontState,
    status_code: int = 200,
    **context,
):
    """Render a page with the layout flags every template needs."""
    context.setdefault("validated", state.credentials.is_validated)
    return templates.TemplateResponse(
        request, name, context, status_code=status_code
    )
