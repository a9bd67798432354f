from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .types import DEFAULT_MAIN_BRANCH, DEFAULT_SOURCE_REMOTE, SyncParameters

logger = logging.getLogger(__name__)

# Supported config filenames (in order of preference)
GLOBAL_CONFIG_FILENAMES: List[str] = [".sync_repos.yml", ".sync_repos.yaml"]
DIRECTORY_CONFIG_FILENAMES: List[str] = [
    "sync_repos.yml",
    "sync_repos.yaml",
    ".sync_repos.yml",
    ".sync_repos.yaml",
]

SOURCE_DEFAULT = "default"
SOURCE_GLOBAL = "global config"
SOURCE_DIRECTORY = "directory config"
SOURCE_CLI = "CLI argument"

PARAMETERS = ("source_remote", "target_remote", "main_branch", "verbose")

TRUE_STRINGS = ("true", "yes", "on", "1")
FALSE_STRINGS = ("false", "no", "off", "0", "")


def _as_bool(value: Any) -> Optional[bool]:
    """YAML booleans as-is; common spellings for quoted strings; else None."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, int):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in TRUE_STRINGS:
            return True
        if text in FALSE_STRINGS:
            return False
    return None


@dataclass
class ConfigValue:
    """A resolved setting together with where it came from."""

    value: Any
    source: str = SOURCE_DEFAULT


class SyncConfig:
    """Resolves the run parameters from files and command-line overrides.

    Precedence, lowest to highest: built-in defaults, the global file in the
    home directory, the directory file in the working directory, CLI flags.
    Each parameter is resolved on its own, so a directory file that only sets
    ``verbose`` keeps a ``source-remote`` from the global file.
    """

    DEFAULTS: Dict[str, Any] = {
        "source_remote": DEFAULT_SOURCE_REMOTE,
        "target_remote": None,
        "main_branch": DEFAULT_MAIN_BRANCH,
        "verbose": False,
    }

    def __init__(
        self,
        home: Optional[Path] = None,
        cwd: Optional[Path] = None,
    ):
        self.home = home or Path.home()
        self.cwd = cwd or Path.cwd()
        self.values: Dict[str, ConfigValue] = {
            key: ConfigValue(default) for key, default in self.DEFAULTS.items()
        }
        self.global_path: Optional[Path] = None
        self.directory_path: Optional[Path] = None
        self.warnings: List[str] = []

    def load(self) -> "SyncConfig":
        """Read the global file, then the directory file on top of it."""
        self.global_path = self._load_first(
            [self.home / name for name in GLOBAL_CONFIG_FILENAMES],
            SOURCE_GLOBAL,
        )
        self.directory_path = self._load_first(
            [self.cwd / name for name in DIRECTORY_CONFIG_FILENAMES],
            SOURCE_DIRECTORY,
        )
        return self

    def _load_first(self, candidates: List[Path], source: str) -> Optional[Path]:
        for path in candidates:
            if not path.exists():
                continue
            data = self._read(path)
            if isinstance(data, dict):
                self._apply(data, source)
                return path
        return None

    def _read(self, path: Path) -> Any:
        try:
            with open(path, "r") as f:
                return yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            message = f"Failed to load {path}: {e}"
            logger.debug(message)
            self.warnings.append(message)
            return None

    @staticmethod
    def _lookup(data: Dict[str, Any], key: str) -> Any:
        """Accept both ``main_branch`` and ``main-branch`` spellings."""
        value = data.get(key)
        if value is None:
            value = data.get(key.replace("_", "-"))
        return value

    def _apply(self, data: Dict[str, Any], source: str) -> None:
        for key in ("source_remote", "target_remote", "main_branch"):
            value = self._lookup(data, key)
            if value:
                self.values[key] = ConfigValue(str(value), source)

        if "verbose" in data:
            verbose = _as_bool(data["verbose"])
            if verbose is None:
                self.warnings.append(
                    f"Ignoring verbose={data['verbose']!r} from {source}: "
                    "expected true or false"
                )
            else:
                self.values["verbose"] = ConfigValue(verbose, source)

    def override(self, **cli_values: Any) -> "SyncConfig":
        """Apply command-line values. ``None`` (or False for verbose) is no-op."""
        for key, value in cli_values.items():
            if key not in PARAMETERS:
                raise KeyError(f"Unknown parameter: {key}")
            if value is None or (key == "verbose" and not value):
                continue
            self.values[key] = ConfigValue(value, SOURCE_CLI)
        return self

    def get(self, key: str) -> Any:
        return self.values[key].value

    def source_of(self, key: str) -> str:
        return self.values[key].source

    @property
    def loaded_any(self) -> bool:
        return bool(self.global_path or self.directory_path)

    def parameters(self) -> SyncParameters:
        return SyncParameters(
            source_remote=self.get("source_remote"),
            target_remote=self.get("target_remote") or None,
            main_branch=self.get("main_branch"),
            verbose=bool(self.get("verbose")),
        )
