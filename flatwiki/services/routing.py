"""Request path validation for the wiki actions."""

import re
from typing import NamedTuple, Optional

from flatwiki.models.page import TITLE_PATTERN

ACTIONS = ("edit", "save", "view")

_VALID_PATH_RE = re.compile(rf"/({'|'.join(ACTIONS)})/({TITLE_PATTERN})")


class RouteMatch(NamedTuple):
    action: str
    title: str


def match_path(path: str) -> Optional[RouteMatch]:
    """Return the action and title encoded in *path*, or *None* if it is not a wiki route.

    The whole path must be ``/<action>/<title>``; no prefix, suffix or extra
    segment is tolerated.
    """
    match = _VALID_PATH_RE.fullmatch(path)
    if match is None:
        return None
    return RouteMatch(action=match.group(1), title=match.group(2))
