"""Preset discovery, override-by-id storage and on-demand resolution."""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from palettekit.runtime_paths import builtin_presets_root
from palettekit.themes.constants import MAX_INHERITANCE_DEPTH, THEME_FILE_EXTENSION
from palettekit.themes.loader import load_manifest_file, parse_manifest
from palettekit.themes.models import (
    Manifest,
    ManifestParseError,
    ManifestSource,
    Palette,
    PresetSummary,
    RegistryEntry,
    UnknownPreset,
)
from palettekit.themes.resolver import resolve

logger = logging.getLogger("palettekit.registry")

DIRECTORY_POLICIES: tuple[str, ...] = ("fail", "skip")

_MAX_DIRECTORY_CANDIDATES = 512


class PresetRegistry:
    """Identifier-keyed store of theme manifests.

    Built-in presets are registered at construction. Later ``add_*`` calls
    replace any entry with the same ``preset_id`` regardless of where either
    came from, which is how user themes shadow built-ins. Only manifests are
    stored; every :meth:`load` resolves the ancestor chain afresh so edits to
    a parent are always visible to its variants.
    """

    def __init__(
        self,
        builtin_root: Path | None = None,
        *,
        include_builtins: bool = True,
        max_depth: int = MAX_INHERITANCE_DEPTH,
        directory_policy: str = "fail",
    ) -> None:
        if directory_policy not in DIRECTORY_POLICIES:
            raise ValueError(f"directory_policy must be one of {DIRECTORY_POLICIES}")
        self._builtin_root = builtin_root if builtin_root is not None else builtin_presets_root()
        self._max_depth = max_depth
        self._directory_policy = directory_policy
        self._entries: dict[str, RegistryEntry] = {}
        self._load_errors: list[str] = []
        self._lock = threading.RLock()
        if include_builtins:
            self._load_builtins()

    @property
    def builtin_root(self) -> Path:
        return self._builtin_root

    @property
    def max_depth(self) -> int:
        return self._max_depth

    def add_manifest(
        self,
        manifest: Manifest,
        *,
        source: ManifestSource = ManifestSource.RUNTIME,
    ) -> None:
        preset_id = manifest.preset_id
        with self._lock:
            existing = self._entries.get(preset_id)
            if existing is not None:
                logger.info(
                    "%s preset %r overrides %s preset",
                    source.value,
                    preset_id,
                    existing.source.value,
                )
            self._entries[preset_id] = RegistryEntry(
                preset_id=preset_id,
                manifest=manifest,
                source=source,
            )

    def add_source(self, text: str, *, source: ManifestSource = ManifestSource.RUNTIME) -> Manifest:
        manifest = parse_manifest(text)
        self.add_manifest(manifest, source=source)
        return manifest

    def add_file(self, path: Path) -> Manifest:
        manifest = load_manifest_file(Path(path))
        self.add_manifest(manifest, source=ManifestSource.FILE)
        return manifest

    def add_directory(self, path: Path, *, on_error: str | None = None) -> list[str]:
        """Register every theme file directly inside ``path``.

        With ``on_error="fail"`` the first invalid file raises and files
        already registered stay registered. With ``"skip"`` the failure is
        recorded in :meth:`load_errors` and scanning continues.
        """
        policy = on_error or self._directory_policy
        if policy not in DIRECTORY_POLICIES:
            raise ValueError(f"on_error must be one of {DIRECTORY_POLICIES}")
        root = Path(path)
        added: list[str] = []
        for candidate in self._directory_candidates(root, source=ManifestSource.FILE):
            try:
                manifest = load_manifest_file(candidate)
            except ManifestParseError as exc:
                if policy == "fail":
                    raise
                logger.warning("skipping invalid theme file: %s", exc)
                self._record_error(str(exc))
                continue
            self.add_manifest(manifest, source=ManifestSource.FILE)
            added.append(manifest.preset_id)
        return added

    def get_manifest(self, preset_id: str) -> Manifest | None:
        with self._lock:
            entry = self._entries.get(preset_id)
        return entry.manifest if entry is not None else None

    def get_entry(self, preset_id: str) -> RegistryEntry | None:
        with self._lock:
            return self._entries.get(preset_id)

    def list(self) -> list[PresetSummary]:
        with self._lock:
            entries = list(self._entries.values())
        return [
            PresetSummary(
                preset_id=entry.preset_id,
                name=entry.manifest.meta.name,
                style=entry.manifest.meta.style,
                source=entry.source,
            )
            for entry in entries
        ]

    def by_style(self, style: str) -> list[PresetSummary]:
        return [row for row in self.list() if row.style == style]

    def preset_ids(self) -> list[str]:
        with self._lock:
            return list(self._entries)

    def load(self, preset_id: str) -> Palette:
        with self._lock:
            entry = self._entries.get(preset_id)
            if entry is None:
                raise UnknownPreset(preset_id)
            return resolve(entry.manifest, self.get_manifest, max_depth=self._max_depth)

    def load_errors(self) -> list[str]:
        with self._lock:
            return list(self._load_errors)

    def __contains__(self, preset_id: object) -> bool:
        with self._lock:
            return preset_id in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _load_builtins(self) -> None:
        if not self._builtin_root.exists():
            logger.warning("builtin preset root missing at %s", self._builtin_root)
            return
        for candidate in self._directory_candidates(self._builtin_root, source=ManifestSource.BUILTIN):
            try:
                manifest = load_manifest_file(candidate)
            except ManifestParseError as exc:
                logger.error("invalid builtin preset: %s", exc)
                self._record_error(str(exc))
                continue
            self.add_manifest(manifest, source=ManifestSource.BUILTIN)

    def _directory_candidates(self, root: Path, *, source: ManifestSource) -> list[Path]:
        try:
            all_files = sorted(
                path
                for path in root.iterdir()
                if path.suffix.lower() == THEME_FILE_EXTENSION
            )
        except OSError as exc:
            raise ManifestParseError(f"failed to list theme directory: {exc}", origin=root) from exc

        candidates: list[Path] = []
        for path in all_files:
            if path.is_symlink():
                self._record_error(f"Skipping symlink theme file: {path}")
                continue
            if not path.is_file():
                continue
            candidates.append(path)
        if len(candidates) > _MAX_DIRECTORY_CANDIDATES:
            self._record_error(
                f"Theme file limit exceeded in {root}; "
                f"only first {_MAX_DIRECTORY_CANDIDATES} files were scanned."
            )
            candidates = candidates[:_MAX_DIRECTORY_CANDIDATES]
        logger.debug("found %d %s theme files in %s", len(candidates), source.value, root)
        return candidates

    def _record_error(self, message: str) -> None:
        with self._lock:
            self._load_errors.append(message)
