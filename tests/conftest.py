"""Shared pytest fixtures for palettekit tests."""

from __future__ import annotations

import logging
from typing import Callable, Mapping

import pytest

from palettekit.themes.constants import SECTION_SCHEMA
from palettekit.themes.models import Manifest

ManifestTextFactory = Callable[..., str]


def full_sections(color: str = "#112233") -> dict[str, dict[str, str]]:
    """Every slot of every section set to ``color``."""
    return {name: {slot: color for slot in slots} for name, slots in SECTION_SCHEMA.items()}


def build_manifest_text(
    preset_id: str,
    *,
    kind: str = "preset-base",
    inherits: str | None = None,
    sections: Mapping[str, Mapping[str, str]] | None = None,
    name: str | None = None,
    style: str = "dark",
    extra_meta: Mapping[str, str] | None = None,
) -> str:
    lines = [
        "[meta]",
        f'name = "{name or preset_id}"',
        f'preset_id = "{preset_id}"',
        'schema_version = "1"',
        f'style = "{style}"',
        f'kind = "{kind}"',
    ]
    if inherits is not None:
        lines.append(f'inherits = "{inherits}"')
    for key, value in (extra_meta or {}).items():
        lines.append(f'{key} = "{value}"')
    for section, slots in (sections or {}).items():
        lines.append("")
        lines.append(f"[{section}]")
        for slot, value in slots.items():
            lines.append(f'{slot} = "{value}"')
    return "\n".join(lines) + "\n"


@pytest.fixture
def manifest_text() -> ManifestTextFactory:
    return build_manifest_text


@pytest.fixture
def base_manifest() -> Manifest:
    """A complete preset-base manifest with every slot set to #112233."""
    return Manifest.from_source(build_manifest_text("test_base", sections=full_sections()))


@pytest.fixture
def compliant_sections() -> dict[str, dict[str, str]]:
    """White foregrounds on black backgrounds for every checked contrast pair."""
    sections = full_sections("#ffffff")
    for slot in ("background", "background_dark", "background_highlight"):
        sections["base"][slot] = "#000000"
    for slot in ("selection_bg", "inlay_hint_bg", "search_bg", "cursor"):
        sections["editor"][slot] = "#000000"
    for slot in ("added_bg", "modified_bg", "removed_bg"):
        sections["diff"][slot] = "#000000"
    return sections


@pytest.fixture(autouse=True)
def reset_palettekit_logger():
    """Undo handler setup done by CLI invocations so caplog keeps working."""
    yield
    logger = logging.getLogger("palettekit")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
