from dataclasses import dataclass

from fastapi import Request

from flatwiki.services.store import PageStore
from flatwiki.services.templates import TemplateSet


@dataclass(frozen=True)
class Wiki:
    """Everything a request handler needs, built once per application."""

    store: PageStore
    templates: TemplateSet
    front_page: str


def get_wiki(request: Request) -> Wiki:
    return request.app.state.wiki
