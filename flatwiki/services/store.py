"""Flat-file page storage: one ``{title}.txt`` file per page in a single directory."""

import logging
import os
from pathlib import Path

from flatwiki.models.page import Page, is_valid_title

logger = logging.getLogger(__name__)

DIR_MODE = 0o755
FILE_MODE = 0o600
FILE_SUFFIX = ".txt"


class PageNotFoundError(Exception):
    """Raised when a page cannot be read from the store."""

    def __init__(self, title: str) -> None:
        super().__init__(f"Page '{title}' not found.")
        self.title = title


class PageStore:
    """Maps page titles to files under *data_dir*.

    The directory is the single source of truth: nothing is cached and every
    :meth:`load` reads the file again.  Saves are not coordinated, so two
    concurrent saves of the same title race and the last writer wins.
    """

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = Path(data_dir)

    def path_for(self, title: str) -> Path:
        """Return the file backing *title*.

        Raises:
            ValueError: if *title* is not a valid page title.
        """
        if not is_valid_title(title):
            raise ValueError(f"Invalid page title: {title!r}")
        return self.data_dir / f"{title}{FILE_SUFFIX}"

    def load(self, title: str) -> Page:
        """Read the page stored under *title*.

        Any read failure is reported as :class:`PageNotFoundError`; a missing
        file and an unreadable one look the same to the caller.
        """
        path = self.path_for(title)
        try:
            body = path.read_bytes()
        except FileNotFoundError as exc:
            logger.debug("Page not found", extra={"title": title})
            raise PageNotFoundError(title) from exc
        except OSError as exc:
            logger.warning("Could not read page %s: %s", title, exc)
            raise PageNotFoundError(title) from exc
        return Page(title=title, body=body)

    def save(self, page: Page) -> None:
        """Write *page* to disk, replacing any previous content.

        The data directory is created on first use.

        Raises:
            OSError: if the directory cannot be created or the file written.
        """
        path = self.path_for(page.title)
        self.data_dir.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, FILE_MODE)
        with os.fdopen(fd, "wb") as fh:
            fh.write(page.body)
