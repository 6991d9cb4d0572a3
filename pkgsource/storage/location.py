from pathlib import Path

from pkgsource.storage.preferences import PreferenceStore

FILE_NAME = "packages.config.json"
SIDECAR_SUFFIX = ".meta"

# Preference key remembering the chosen configuration directory across sessions.
DIRECTORY_PATH_KEY = "config_directory_path"


def sidecar_path(path: Path) -> Path:
    return path.with_name(path.name + SIDECAR_SUFFIX)


class ConfigLocation:
    """
    Where the configuration file lives: a directory relative to the project
    root plus the fixed file name.
    """

    def __init__(self, project_root: Path, directory_path: str = ""):
        self.project_root = Path(project_root)
        self.directory_path = ""
        self.file_path = Path(FILE_NAME)
        self.set_directory(directory_path)

    @classmethod
    def from_preferences(cls, project_root: Path, preferences: PreferenceStore) -> "ConfigLocation":
        return cls(project_root, preferences.get_string(DIRECTORY_PATH_KEY, ""))

    @property
    def full_path(self) -> Path:
        return self.project_root / self.file_path

    @property
    def full_directory_path(self) -> Path:
        return self.project_root / self.directory_path

    def set_directory(self, directory_path: str) -> None:
        self.directory_path = directory_path
        self.file_path = Path(directory_path) / FILE_NAME

    def __repr__(self) -> str:
        return f"ConfigLocation({str(self.full_path)!r})"
