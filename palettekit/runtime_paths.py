"""Runtime path helpers for source and frozen executable modes."""

from __future__ import annotations

import os
from pathlib import Path
import sys


def is_frozen() -> bool:
    """Return True when running from a PyInstaller bundle."""
    return bool(getattr(sys, "frozen", False))


def bundle_root() -> Path:
    """Return the runtime extraction root for frozen mode, else package parent."""
    if is_frozen():
        meipass = getattr(sys, "_MEIPASS", None)
        if meipass:
            return Path(meipass)
    return Path(__file__).resolve().parent.parent


def package_root() -> Path:
    """Return the root path that contains the `palettekit` package resources."""
    if is_frozen():
        root = bundle_root()
        candidate = root / "palettekit"
        if candidate.exists():
            return candidate
        return root
    return Path(__file__).resolve().parent


def builtin_presets_root() -> Path:
    """Resolve the bundled preset directory across source/frozen layouts."""
    return package_root() / "themes" / "builtin"


def app_data_dir() -> Path:
    """Per-user directory for settings, logs and user themes."""
    override = os.environ.get("PALETTEKIT_CONFIG_DIR")
    if override:
        return Path(override)
    base = Path(os.environ.get("APPDATA", Path.home() / ".config"))
    return base / "palettekit"
