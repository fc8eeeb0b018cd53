import pytest

from gemini_key import API_KEY_ENV


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    """Run from an empty directory with an empty home and no key set."""
    home = tmp_path / 'home'
    home.mkdir()
    work = tmp_path / 'work'
    work.mkdir()
    monkeypatch.setenv('HOME', str(home))
    # setenv first so a value later loaded from .env is removed on teardown
    for name in (API_KEY_ENV, 'GEMINI_MODEL'):
        monkeypatch.setenv(name, '')
        monkeypatch.delenv(name)
    monkeypatch.chdir(work)
    return work
