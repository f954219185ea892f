"""
Tests for app.utils.images.ImageStore.
"""
import io
import os

import pytest
from werkzeug.datastructures import FileStorage

from app.utils.images import ImageStore


@pytest.fixture
def store(tmp_path):
    return ImageStore(str(tmp_path / "images"), {"png", "jpg", "jpeg"})


def _file(name):
    return FileStorage(stream=io.BytesIO(b"data"), filename=name)


class TestIsAllowed:

    def test_allowed(self, store):
        assert store.is_allowed(_file("cat.PNG"))
        assert store.is_allowed(_file("cat.jpeg"))

    def test_rejected(self, store):
        assert not store.is_allowed(None)
        assert not store.is_allowed(_file(""))
        assert not store.is_allowed(_file("cat.gif"))
        assert not store.is_allowed(_file("noext"))


class TestSaveDelete:

    def test_save_and_delete(self, store):
        url = store.save(_file("my cat.png"))
        path = store.path_for(url)
        assert url.startswith("images/")
        assert url.endswith("my_cat.png")
        assert os.path.exists(path)

        assert store.delete(url) is True
        assert not os.path.exists(path)

    def test_two_uploads_with_same_name_do_not_collide(self, store):
        assert store.save(_file("a.png")) != store.save(_file("a.png"))

    def test_delete_missing_file_is_logged_not_raised(self, store, caplog):
        assert store.delete("images/does-not-exist.png") is False
        assert "Could not delete image" in caplog.text

    def test_path_outside_store_is_refused(self, store):
        assert store.path_for("../etc/passwd") is None
        assert store.path_for("") is None
        assert store.path_for("images/../../etc/passwd") == os.path.join(store.folder, "etc_passwd")
        assert store.delete("/etc/passwd") is False
