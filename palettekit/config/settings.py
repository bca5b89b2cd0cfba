"""User settings persisted as YAML."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from palettekit.runtime_paths import app_data_dir
from palettekit.themes.constants import DEFAULT_PRESET_ID, MAX_INHERITANCE_DEPTH

logger = logging.getLogger("palettekit.config")

_DIRECTORY_POLICIES = {"fail", "skip"}
_CONTRAST_LEVELS = {"aa-normal", "aa-large", "aaa-normal", "aaa-large"}
_MAX_DEPTH_LIMIT = 64


class PaletteSettings:
    """Wraps config.yaml for persistent palettekit configuration."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = Path(path) if path is not None else app_data_dir() / "config.yaml"
        self._data: dict[str, Any] = {}
        self.load()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> None:
        self._data = {}
        if not self._path.exists():
            return
        try:
            data = yaml.safe_load(self._path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError, UnicodeDecodeError) as exc:
            logger.error("Corrupt config file %s: %s; using defaults", self._path, exc)
            return
        if isinstance(data, dict):
            self._data = data
        elif data is not None:
            logger.error("Config file %s is not a mapping; using defaults", self._path)

    def save(self) -> Path:
        """Write config.yaml and return its path."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(
            yaml.safe_dump(self.as_dict(), default_flow_style=False, sort_keys=True),
            encoding="utf-8",
        )
        return self._path

    def as_dict(self) -> dict[str, Any]:
        return {
            "user_themes_dir": str(self.user_themes_dir),
            "max_inheritance_depth": self.max_inheritance_depth,
            "directory_policy": self.directory_policy,
            "contrast_level": self.contrast_level,
            "default_preset": self.default_preset,
        }

    # -- directories --

    @property
    def user_themes_dir(self) -> Path:
        raw = self._data.get("user_themes_dir")
        if isinstance(raw, str) and raw.strip():
            return Path(raw.strip()).expanduser()
        return self._path.parent / "themes"

    @user_themes_dir.setter
    def user_themes_dir(self, value: Path | str) -> None:
        self._data["user_themes_dir"] = str(value)

    # -- resolution --

    @property
    def max_inheritance_depth(self) -> int:
        raw = self._data.get("max_inheritance_depth", MAX_INHERITANCE_DEPTH)
        if isinstance(raw, bool) or not isinstance(raw, int):
            return MAX_INHERITANCE_DEPTH
        if not 1 <= raw <= _MAX_DEPTH_LIMIT:
            return MAX_INHERITANCE_DEPTH
        return raw

    @max_inheritance_depth.setter
    def max_inheritance_depth(self, value: int) -> None:
        self._data["max_inheritance_depth"] = int(value)

    @property
    def directory_policy(self) -> str:
        raw = self._data.get("directory_policy", "fail")
        policy = (raw if isinstance(raw, str) else "").strip().lower()
        return policy if policy in _DIRECTORY_POLICIES else "fail"

    @directory_policy.setter
    def directory_policy(self, value: str) -> None:
        policy = (value or "").strip().lower()
        if policy not in _DIRECTORY_POLICIES:
            policy = "fail"
        self._data["directory_policy"] = policy

    # -- validation --

    @property
    def contrast_level(self) -> str:
        raw = self._data.get("contrast_level", "aa-normal")
        level = (raw if isinstance(raw, str) else "").strip().lower()
        return level if level in _CONTRAST_LEVELS else "aa-normal"

    @contrast_level.setter
    def contrast_level(self, value: str) -> None:
        level = (value or "").strip().lower()
        if level not in _CONTRAST_LEVELS:
            level = "aa-normal"
        self._data["contrast_level"] = level

    # -- presets --

    @property
    def default_preset(self) -> str:
        raw = self._data.get("default_preset", DEFAULT_PRESET_ID)
        value = (raw if isinstance(raw, str) else "").strip()
        return value or DEFAULT_PRESET_ID

    @default_preset.setter
    def default_preset(self, value: str) -> None:
        cleaned = (value or "").strip() or DEFAULT_PRESET_ID
        self._data["default_preset"] = cleaned

    @property
    def log_dir(self) -> Path:
        return self._path.parent / "logs"
