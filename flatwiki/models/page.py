import re
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field

# Characters allowed in a page title; shared by routing, storage and link detection.
TITLE_PATTERN = "[a-zA-Z0-9]+"

_TITLE_RE = re.compile(TITLE_PATTERN)


def is_valid_title(title: str) -> bool:
    """Return True when *title* is a non-empty run of ASCII letters and digits."""
    return _TITLE_RE.fullmatch(title) is not None


class Page(BaseModel):
    """A named unit of wiki content, stored as raw bytes."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(pattern=f"^{TITLE_PATTERN}$")
    body: bytes = b""

    @property
    def text(self) -> str:
        """Body decoded for form re-entry; invalid UTF-8 is replaced, never raised."""
        return self.body.decode("utf-8", errors="replace")


class PageContext(NamedTuple):
    """Page-shaped value handed to the ``view`` and ``edit`` templates."""

    title: str
    body: str
