import pytest


@pytest.fixture
def write_rs(tmp_path):
    """Write a file under tmp_path, creating parent directories."""

    def _write(relative: str, text: str = "fn f() {}\n"):
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write
