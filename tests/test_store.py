"""Tests for flatwiki.services.store.PageStore."""

import stat

import pytest

from flatwiki.models.page import Page
from flatwiki.services.store import PageNotFoundError, PageStore


@pytest.fixture
def store(tmp_path):
    return PageStore(tmp_path / "data")


class TestSaveAndLoad:
    @pytest.mark.parametrize("title", ["FrontPage", "a", "123", "MixedCase42"])
    def test_round_trip(self, store, title):
        body = b"Some text\nwith [Links] & <markup>\x00\xff"
        store.save(Page(title=title, body=body))

        page = store.load(title)
        assert page.title == title
        assert page.body == body

    def test_creates_data_directory(self, store):
        assert not store.data_dir.exists()
        store.save(Page(title="Foo", body=b"x"))
        assert store.data_dir.is_dir()

    def test_file_layout(self, store):
        store.save(Page(title="Foo", body=b"hello"))
        assert (store.data_dir / "Foo.txt").read_bytes() == b"hello"

    def test_file_is_owner_only(self, store):
        store.save(Page(title="Foo", body=b"hello"))
        mode = stat.S_IMODE((store.data_dir / "Foo.txt").stat().st_mode)
        assert mode & 0o077 == 0

    def test_overwrite_replaces_content(self, store):
        store.save(Page(title="Foo", body=b"a much longer first version"))
        store.save(Page(title="Foo", body=b"short"))
        assert store.load("Foo").body == b"short"

    def test_empty_body(self, store):
        store.save(Page(title="Empty"))
        assert store.load("Empty").body == b""

    def test_load_reads_fresh_content(self, store):
        store.save(Page(title="Foo", body=b"one"))
        (store.data_dir / "Foo.txt").write_bytes(b"two")
        assert store.load("Foo").body == b"two"


class TestLoadErrors:
    def test_missing_page(self, store):
        with pytest.raises(PageNotFoundError) as exc_info:
            store.load("Missing")
        assert exc_info.value.title == "Missing"

    def test_missing_directory(self, tmp_path):
        store = PageStore(tmp_path / "nowhere")
        with pytest.raises(PageNotFoundError):
            store.load("Foo")

    def test_unreadable_entry_is_not_found(self, store):
        (store.data_dir / "Foo.txt").mkdir(parents=True)
        with pytest.raises(PageNotFoundError):
            store.load("Foo")


class TestSaveErrors:
    def test_data_dir_is_a_file(self, tmp_path):
        blocker = tmp_path / "data"
        blocker.write_text("not a directory")
        store = PageStore(blocker)
        with pytest.raises(OSError):
            store.save(Page(title="Foo", body=b"x"))

    def test_target_is_a_directory(self, store):
        (store.data_dir / "Foo.txt").mkdir(parents=True)
        with pytest.raises(OSError):
            store.save(Page(title="Foo", body=b"x"))


class TestTitleValidation:
    @pytest.mark.parametrize("title", ["", "../etc/passwd", "foo bar", "foo.txt", "Café"])
    def test_invalid_titles_rejected(self, store, title):
        with pytest.raises(ValueError):
            store.path_for(title)

    def test_load_invalid_title(self, store):
        with pytest.raises(ValueError):
            store.load("../secret")
