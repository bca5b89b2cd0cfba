"""Tests for theme manifest parsing and validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from conftest import build_manifest_text, full_sections
from palettekit.themes.color import parse_hex
from palettekit.themes.loader import load_manifest_file, parse_manifest
from palettekit.themes.models import (
    InvalidHex,
    Manifest,
    ManifestParseError,
    Palette,
    PaletteMeta,
    Section,
)


def _replace_line(text: str, old: str, new: str) -> str:
    assert old in text
    return text.replace(old, new)


def test_parse_manifest_valid() -> None:
    manifest = parse_manifest(build_manifest_text("test_theme", sections=full_sections("#22aa66")))

    assert manifest.preset_id == "test_theme"
    assert manifest.is_base
    assert manifest.inherits is None
    assert manifest.section("base")["background"] == parse_hex("#22AA66")
    assert set(manifest.sections) == set(full_sections())


def test_from_source_delegates_to_loader() -> None:
    text = build_manifest_text("delegated", sections={"base": {"background": "#000000"}})
    assert Manifest.from_source(text) == parse_manifest(text)


def test_variant_keeps_only_its_slots() -> None:
    manifest = parse_manifest(
        build_manifest_text(
            "child",
            kind="preset-variant",
            inherits="parent",
            sections={"base": {"background": "#101010"}},
        )
    )

    assert manifest.is_variant
    assert manifest.inherits == "parent"
    base = manifest.section("base")
    assert base.get("background") == parse_hex("#101010")
    assert base.get("foreground") is None
    assert "foreground" not in base
    assert manifest.section("syntax") is None


def test_variant_without_inherits_parses() -> None:
    manifest = parse_manifest(build_manifest_text("orphan", kind="preset-variant"))
    assert manifest.inherits is None


def test_optional_upstream_repo() -> None:
    manifest = parse_manifest(
        build_manifest_text("with_repo", extra_meta={"upstream_repo": "https://example.com/x"})
    )
    assert manifest.meta.upstream_repo == "https://example.com/x"


@pytest.mark.parametrize("field", ["name", "preset_id", "schema_version", "style", "kind"])
def test_missing_meta_field_rejected(field: str) -> None:
    text = build_manifest_text("missing")
    lines = [line for line in text.splitlines() if not line.startswith(f"{field} =")]

    with pytest.raises(ManifestParseError, match=field):
        parse_manifest("\n".join(lines))


def test_missing_meta_table_rejected() -> None:
    with pytest.raises(ManifestParseError, match=r"\[meta\]"):
        parse_manifest('[base]\nbackground = "#000000"\n')


def test_unknown_kind_rejected() -> None:
    with pytest.raises(ManifestParseError, match="kind"):
        parse_manifest(build_manifest_text("bad_kind", kind="preset-remix"))


def test_unsupported_schema_version_rejected() -> None:
    text = _replace_line(build_manifest_text("v2"), 'schema_version = "1"', 'schema_version = "2"')
    with pytest.raises(ManifestParseError, match="schema_version"):
        parse_manifest(text)


def test_invalid_preset_id_rejected() -> None:
    with pytest.raises(ManifestParseError, match="preset_id must match"):
        parse_manifest(build_manifest_text("Bad Theme"))


def test_unknown_slot_rejected() -> None:
    text = build_manifest_text("typo", sections={"base": {"backgorund": "#000000"}})
    with pytest.raises(ManifestParseError, match="backgorund"):
        parse_manifest(text)


def test_unknown_section_rejected() -> None:
    text = build_manifest_text("extra") + '\n[widgets]\nbutton = "#000000"\n'
    with pytest.raises(ManifestParseError, match="widgets"):
        parse_manifest(text)


def test_unknown_meta_key_rejected() -> None:
    with pytest.raises(ManifestParseError, match="sql"):
        parse_manifest(build_manifest_text("meta_extra", extra_meta={"sql": "DROP TABLE themes"}))


@pytest.mark.parametrize("value", ["#12345", "#gg0000", "#café00", "red"])
def test_invalid_hex_rejected_with_location(value: str) -> None:
    text = build_manifest_text("bad_hex", sections={"syntax": {"keywords": value}})

    with pytest.raises(ManifestParseError, match=r"\[syntax\]\.keywords") as excinfo:
        parse_manifest(text)
    assert isinstance(excinfo.value.__cause__, InvalidHex)


def test_non_string_slot_rejected() -> None:
    text = build_manifest_text("numeric") + "\n[base]\nbackground = 112233\n"
    with pytest.raises(ManifestParseError, match="background"):
        parse_manifest(text)


def test_section_must_be_table() -> None:
    text = 'base = "#000000"\n' + build_manifest_text("flat")
    with pytest.raises(ManifestParseError, match="must be a table"):
        parse_manifest(text)


def test_invalid_toml_rejected() -> None:
    with pytest.raises(ManifestParseError, match="invalid TOML"):
        parse_manifest("[meta\nname = ")


def test_meta_field_length_and_newlines_rejected() -> None:
    with pytest.raises(ManifestParseError):
        parse_manifest(build_manifest_text("long_name", name="A" * 200))

    with pytest.raises(ManifestParseError, match="single line"):
        parse_manifest(build_manifest_text("newline_name", name="bad\\nname"))


def test_empty_meta_value_rejected() -> None:
    with pytest.raises(ManifestParseError, match="style"):
        parse_manifest(build_manifest_text("blank_style", style="   "))


def test_load_manifest_file_records_origin(tmp_path: Path) -> None:
    path = tmp_path / "from_disk.toml"
    path.write_text(build_manifest_text("from_disk"), encoding="utf-8")

    manifest = load_manifest_file(path)
    assert manifest.origin == path


def test_load_manifest_file_error_names_file(tmp_path: Path) -> None:
    path = tmp_path / "broken.toml"
    path.write_text(build_manifest_text("broken", kind="nope"), encoding="utf-8")

    with pytest.raises(ManifestParseError) as excinfo:
        load_manifest_file(path)
    assert excinfo.value.origin == path
    assert "broken.toml" in str(excinfo.value)


def test_load_manifest_file_missing(tmp_path: Path) -> None:
    with pytest.raises(ManifestParseError, match="unable to stat"):
        load_manifest_file(tmp_path / "absent.toml")


def test_oversized_source_rejected() -> None:
    text = build_manifest_text("huge") + "#" * (300 * 1024)
    with pytest.raises(ManifestParseError, match="max size"):
        parse_manifest(text)


def test_section_overlay_prefers_other() -> None:
    ours = Section("base", {"background": parse_hex("#000000"), "border": parse_hex("#111111")})
    theirs = Section("base", {"background": parse_hex("#FFFFFF")})

    merged = ours.overlay(theirs)
    assert merged["background"] == parse_hex("#FFFFFF")
    assert merged["border"] == parse_hex("#111111")
    assert ours["background"] == parse_hex("#000000")


def test_section_rejects_unknown_slot() -> None:
    with pytest.raises(ManifestParseError):
        Section("base", {"glow": parse_hex("#000000")})


def test_palette_from_hex_fills_every_section() -> None:
    palette = Palette.from_hex(
        PaletteMeta(name="Tiny", preset_id="tiny", style="dark"),
        {"base": {"background": "#000000"}},
    )

    assert palette.base["background"] == parse_hex("#000000")
    assert len(palette.terminal) == 0
    assert palette.to_hex()["base"] == {"background": "#000000"}
    assert "terminal.black" in palette.missing_slots()
    assert not palette.is_complete


def test_platform_tables_parsed() -> None:
    manifest = parse_manifest(
        build_manifest_text(
            "with_platform",
            sections={
                "base": {"background": "#112233"},
                "platform.terminal": {"background": "#000000", "foreground": "#FFFFFF"},
                "platform.web": {"background": "#101010"},
            },
        )
    )

    assert list(manifest.platform) == ["terminal", "web"]
    terminal = manifest.platform["terminal"]
    assert terminal.name == "platform.terminal"
    assert terminal["foreground"] == parse_hex("#FFFFFF")
    assert manifest.platform["web"].get("foreground") is None
    assert "platform" not in manifest.sections


def test_manifest_without_platform_has_none() -> None:
    manifest = parse_manifest(build_manifest_text("plain", sections=full_sections()))
    assert dict(manifest.platform) == {}


def test_unknown_platform_slot_rejected() -> None:
    text = build_manifest_text("bad_platform", sections={"platform.terminal": {"accent": "#000000"}})
    with pytest.raises(ManifestParseError, match=r"\[platform\.terminal\].*accent"):
        parse_manifest(text)


def test_platform_name_must_be_identifier() -> None:
    text = build_manifest_text("bad_target", sections={'platform."Web OS"': {"background": "#000000"}})
    with pytest.raises(ManifestParseError, match="platform name"):
        parse_manifest(text)


def test_platform_invalid_hex_names_location() -> None:
    text = build_manifest_text("bad_platform_hex", sections={"platform.web": {"foreground": "#12"}})
    with pytest.raises(ManifestParseError, match=r"\[platform\.web\]\.foreground"):
        parse_manifest(text)


@pytest.mark.parametrize("value", [" #112233 ", "#112233 ", "\t#112233"])
def test_padded_hex_rejected(value: str) -> None:
    text = build_manifest_text("padded", sections={"base": {"background": value}})
    with pytest.raises(ManifestParseError, match=r"\[base\]\.background"):
        parse_manifest(text)


def test_palette_rejects_unknown_section() -> None:
    with pytest.raises(ManifestParseError, match="widgets"):
        Palette(
            meta=PaletteMeta(name="Odd", preset_id="odd", style="dark"),
            sections={"widgets": Section("base")},
        )


def test_palette_from_hex_platform() -> None:
    palette = Palette.from_hex(
        PaletteMeta(name="Tiny", preset_id="tiny", style="dark"),
        {"base": {"background": "#000000"}},
        platform={"terminal": {"background": "#0A0A0A"}},
    )

    assert palette.platform["terminal"]["background"] == parse_hex("#0A0A0A")
    assert "platform.terminal.background" not in palette.missing_slots()
