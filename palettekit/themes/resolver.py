"""Inheritance resolution: flatten a manifest's ancestor chain into a palette."""

from __future__ import annotations

import logging
from typing import Callable

from palettekit.themes.constants import MAX_INHERITANCE_DEPTH, SECTION_NAMES
from palettekit.themes.models import (
    InheritanceCycle,
    Manifest,
    NoRoot,
    Palette,
    PaletteMeta,
    Section,
    UnknownParent,
)

logger = logging.getLogger("palettekit.resolver")

AncestorLookup = Callable[[str], "Manifest | None"]


def ancestor_chain(
    manifest: Manifest,
    ancestor_lookup: AncestorLookup,
    *,
    max_depth: int = MAX_INHERITANCE_DEPTH,
) -> list[Manifest]:
    """Return ``[root, ..., manifest]`` after checking the chain is well formed."""
    chain = [manifest]
    seen = {manifest.preset_id}
    current = manifest

    while not current.is_base:
        parent_id = current.inherits
        if parent_id is None:
            raise NoRoot(
                manifest.preset_id,
                f"variant {current.preset_id!r} does not declare inherits",
            )
        if parent_id in seen:
            walked = tuple(item.preset_id for item in chain)
            raise InheritanceCycle(walked + (parent_id,))
        if len(chain) >= max_depth:
            raise NoRoot(manifest.preset_id, f"chain exceeds {max_depth} manifests")
        parent = ancestor_lookup(parent_id)
        if parent is None:
            raise UnknownParent(parent_id, current.preset_id)
        seen.add(parent_id)
        chain.append(parent)
        current = parent

    if current.inherits is not None:
        if current.inherits in seen:
            walked = tuple(item.preset_id for item in chain)
            raise InheritanceCycle(walked + (current.inherits,))
        raise NoRoot(
            manifest.preset_id,
            f"preset-base {current.preset_id!r} must not declare inherits",
        )
    chain.reverse()
    return chain


def resolve(
    manifest: Manifest,
    ancestor_lookup: AncestorLookup,
    *,
    max_depth: int = MAX_INHERITANCE_DEPTH,
) -> Palette:
    """Overlay ``manifest`` on its ancestors, most specific slot winning."""
    chain = ancestor_chain(manifest, ancestor_lookup, max_depth=max_depth)

    sections = {name: Section(name) for name in SECTION_NAMES}
    platform: dict[str, Section] = {}
    for layer in chain:
        for name, section in layer.sections.items():
            sections[name] = sections[name].overlay(section)
        for target, section in layer.platform.items():
            inherited = platform.get(target)
            platform[target] = inherited.overlay(section) if inherited is not None else section

    palette = Palette(
        meta=PaletteMeta(
            name=manifest.meta.name,
            preset_id=manifest.preset_id,
            style=manifest.meta.style,
        ),
        sections=sections,
        platform=platform,
    )
    if not palette.is_complete:
        missing = palette.missing_slots()
        logger.warning(
            "preset %r resolved with %d absent slots (root %r): %s",
            manifest.preset_id,
            len(missing),
            chain[0].preset_id,
            ", ".join(missing[:8]),
        )
    logger.debug(
        "resolved %r through %s", manifest.preset_id, " <- ".join(m.preset_id for m in chain)
    )
    return palette
