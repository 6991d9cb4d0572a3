import os
from pathlib import Path

PROJECT_ROOT_ENV_VAR = "PKGSOURCE_PROJECT_ROOT"
PREFERENCES_PATH_ENV_VAR = "PKGSOURCE_PREFERENCES_PATH"

_DEFAULT_PREFERENCES_PATH = Path("~/.config/pkgsource/preferences.json")


def get_project_root() -> Path:
    """
    Determine the project root the configuration directory is relative to.

    Priority:
    1. Environment variable PKGSOURCE_PROJECT_ROOT
    2. The current working directory
    """
    env_path = os.environ.get(PROJECT_ROOT_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser().resolve()
    return Path.cwd()


def get_preferences_path() -> Path:
    env_path = os.environ.get(PREFERENCES_PATH_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return _DEFAULT_PREFERENCES_PATH.expanduser()
