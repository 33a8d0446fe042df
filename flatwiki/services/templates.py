"""Load-once set of compiled page templates."""

from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template, select_autoescape

from flatwiki.models.page import PageContext

TEMPLATE_NAMES = ("edit", "view")
TEMPLATE_SUFFIX = ".html"


@dataclass(frozen=True)
class TemplateSet:
    """Compiled ``edit`` and ``view`` templates, read-only after construction."""

    templates: Mapping[str, Template]

    def render(self, name: str, page: PageContext) -> str:
        """Render template *name* with *page*.

        Raises:
            KeyError: if *name* is not one of :data:`TEMPLATE_NAMES`.
            jinja2.TemplateError: if the template fails while rendering.
        """
        return self.templates[name].render(page=page)


def load_templates(directory: Path) -> TemplateSet:
    """Compile every template in :data:`TEMPLATE_NAMES` from *directory*.

    Missing or malformed templates raise immediately (``TemplateNotFound`` /
    ``TemplateSyntaxError``) so a broken install never starts serving.
    Undefined variables raise at render time instead of printing blanks.
    """
    env = Environment(
        loader=FileSystemLoader(str(directory)),
        autoescape=select_autoescape(["html"]),
        undefined=StrictUndefined,
    )
    compiled = {name: env.get_template(f"{name}{TEMPLATE_SUFFIX}") for name in TEMPLATE_NAMES}
    return TemplateSet(templates=MappingProxyType(compiled))
