import pytest

from dump_factory import RecordingDestination, write_zip


@pytest.fixture
def destination():
    return RecordingDestination()


@pytest.fixture
def make_archive(tmp_path):
    """Return a function writing ``{"Posts.xml": [rows]}`` to a zip under tmp_path."""
    counter = {"n": 0}

    def _make(tables, name=None, prefix=""):
        counter["n"] += 1
        path = tmp_path / (name or f"dump{counter['n']}.zip")
        return write_zip(path, tables, prefix=prefix)

    return _make
