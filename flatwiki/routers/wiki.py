import logging
from typing import Awaitable, Callable, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse, Response
from starlette.concurrency import run_in_threadpool
from jinja2 import TemplateError
from slowapi import Limiter
from slowapi.util import get_remote_address

from flatwiki.dependencies import Wiki, get_wiki
from flatwiki.models.page import Page, PageContext
from flatwiki.services.renderer import render_body
from flatwiki.services.routing import match_path
from flatwiki.services.store import PageNotFoundError

logger = logging.getLogger(__name__)

SAVE_RATE_LIMIT = "30/minute"
BODY_FIELD = "body"

limiter = Limiter(key_func=get_remote_address)
router = APIRouter()

Handler = Callable[[Request, Wiki, str], Awaitable[Response]]


@router.get("/", include_in_schema=False)
async def root(wiki: Wiki = Depends(get_wiki)) -> RedirectResponse:
    return _redirect(f"/view/{wiki.front_page}")


async def view_page(request: Request, wiki: Wiki, title: str) -> Response:
    """Show a rendered page, or send the reader to the editor if it does not exist yet."""
    try:
        page = await run_in_threadpool(wiki.store.load, title)
    except PageNotFoundError:
        return _redirect(f"/edit/{title}")
    return _render(wiki, "view", PageContext(title=page.title, body=render_body(page.body)))


async def edit_page(request: Request, wiki: Wiki, title: str) -> Response:
    """Show the edit form; a missing page is edited as an empty one."""
    try:
        page = await run_in_threadpool(wiki.store.load, title)
    except PageNotFoundError:
        page = Page(title=title)
    return _render(wiki, "edit", PageContext(title=page.title, body=page.text))


async def save_page(request: Request, wiki: Wiki, title: str) -> Response:
    """Persist the submitted body and redirect to the page view."""
    form = await request.form()
    body = form.get(BODY_FIELD)
    if not isinstance(body, str):
        body = request.query_params.get(BODY_FIELD, "")

    page = Page(title=title, body=body.encode("utf-8"))
    try:
        await run_in_threadpool(wiki.store.save, page)
    except OSError as exc:
        logger.error("Failed to save page %s: %s", title, exc)
        return _http_error(str(exc), 500)

    logger.info("Page saved", extra={"title": title, "size": len(page.body)})
    return _redirect(f"/view/{title}")


HANDLERS: Dict[str, Handler] = {
    "edit": edit_page,
    "save": save_page,
    "view": view_page,
}


@router.api_route("/{path:path}", methods=["GET", "POST"], include_in_schema=False)
@limiter.limit(SAVE_RATE_LIMIT, methods=["POST"])
async def dispatch(request: Request, wiki: Wiki = Depends(get_wiki)) -> Response:
    """Validate the request path and hand the title to the matching action handler."""
    route = match_path(request.url.path)
    if route is None:
        return _http_error("404 page not found", 404)
    return await HANDLERS[route.action](request, wiki, route.title)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=302)


def _http_error(message: str, status_code: int) -> PlainTextResponse:
    """Plain-text error response carrying *message* verbatim."""
    return PlainTextResponse(
        f"{message}\n",
        status_code=status_code,
        headers={"X-Content-Type-Options": "nosniff"},
    )


def _render(wiki: Wiki, name: str, page: PageContext) -> Response:
    try:
        html = wiki.templates.render(name, page)
    except TemplateError as exc:
        logger.error("Template %s failed for page %s: %s", name, page.title, exc)
        return _http_error(str(exc), 500)
    return HTMLResponse(html)
