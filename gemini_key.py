"""Locate the Gemini API key: environment first, then Gemini CLI settings."""
import os
import json
from pathlib import Path
from typing import Optional

from dotenv import dotenv_values

API_KEY_ENV = 'GOOGLE_API_KEY'


class ApiKeyNotFound(RuntimeError):
    def __init__(self):
        super().__init__(
            f"{API_KEY_ENV} not found.\n"
            "Please set it in .env, or run 'gemini auth' using the official CLI."
        )


def settings_paths(home=None, include_env_file=False):
    settings_dir = Path(home or Path.home()) / '.gemini'
    paths = [settings_dir / 'settings.json']
    if include_env_file:
        paths.append(settings_dir / '.env')
    return paths


def _json_key(path: Path) -> Optional[str]:
    settings = json.loads(path.read_text(encoding='utf-8'))
    if not isinstance(settings, dict):
        return None
    value = settings.get('apiKey')
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _env_file_key(path: Path) -> Optional[str]:
    # dotenv_values returns {} for a missing file, so check first to keep
    # the error path uniform with the JSON reader
    if not path.is_file():
        raise FileNotFoundError(path)
    value = dotenv_values(path).get(API_KEY_ENV)
    if value and value.strip():
        return value.strip()
    return None


def read_settings_key(path) -> Optional[str]:
    """Return the key stored in one settings file, or None.

    Unsupported formats and unreadable or malformed files count as absent.
    """
    path = Path(path)
    if path.suffix == '.json':
        reader = _json_key
    elif path.name.endswith('.env'):
        reader = _env_file_key
    else:
        return None
    try:
        return reader(path)
    except (OSError, ValueError):
        return None


def resolve_api_key(paths, environ=None) -> str:
    environ = os.environ if environ is None else environ
    api_key = (environ.get(API_KEY_ENV) or '').strip()
    if api_key:
        return api_key
    for path in paths:
        api_key = read_settings_key(path)
        if api_key:
            return api_key
    raise ApiKeyNotFound()
