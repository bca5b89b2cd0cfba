"""Theme framework constants."""

from __future__ import annotations

DEFAULT_PRESET_ID = "tokyonight"
THEME_SCHEMA_VERSION = "1"
THEME_FILE_EXTENSION = ".toml"

KIND_BASE = "preset-base"
KIND_VARIANT = "preset-variant"
MANIFEST_KINDS: tuple[str, ...] = (KIND_BASE, KIND_VARIANT)

# Number of manifests allowed in one chain, the requested manifest included.
MAX_INHERITANCE_DEPTH = 16

REQUIRED_META_KEYS: tuple[str, ...] = (
    "name",
    "preset_id",
    "schema_version",
    "style",
    "kind",
)

OPTIONAL_META_KEYS: tuple[str, ...] = (
    "inherits",
    "upstream_repo",
)

BASE_SLOTS: tuple[str, ...] = (
    "background",
    "background_dark",
    "background_highlight",
    "foreground",
    "foreground_dark",
    "border",
    "border_highlight",
)

SEMANTIC_SLOTS: tuple[str, ...] = (
    "success",
    "warning",
    "error",
    "info",
    "hint",
)

DIFF_SLOTS: tuple[str, ...] = (
    "added",
    "added_bg",
    "added_fg",
    "modified",
    "modified_bg",
    "modified_fg",
    "removed",
    "removed_bg",
    "removed_fg",
    "text_bg",
    "ignored",
)

SURFACE_SLOTS: tuple[str, ...] = (
    "menu",
    "sidebar",
    "statusline",
    "float",
    "popup",
    "overlay",
    "highlight",
    "selection",
    "focus",
    "search",
)

TYPOGRAPHY_SLOTS: tuple[str, ...] = (
    "comment",
    "gutter",
    "line_number",
    "selection_text",
    "link",
    "title",
)

SYNTAX_SLOTS: tuple[str, ...] = (
    "keywords",
    "keywords_fn",
    "functions",
    "variables",
    "variables_builtin",
    "parameters",
    "properties",
    "types",
    "types_builtin",
    "constants",
    "numbers",
    "booleans",
    "strings",
    "strings_doc",
    "strings_escape",
    "strings_regex",
    "operators",
    "punctuation",
    "punctuation_bracket",
    "annotations",
    "attributes",
    "constructor",
    "tag",
    "tag_delimiter",
    "tag_attribute",
    "comments",
)

EDITOR_SLOTS: tuple[str, ...] = (
    "cursor",
    "cursor_text",
    "match_paren",
    "selection_bg",
    "selection_fg",
    "inlay_hint_bg",
    "inlay_hint_fg",
    "search_bg",
    "search_fg",
    "diagnostic_error",
    "diagnostic_warn",
    "diagnostic_info",
    "diagnostic_hint",
    "diagnostic_underline_error",
    "diagnostic_underline_warn",
    "diagnostic_underline_info",
    "diagnostic_underline_hint",
)

TERMINAL_SLOTS: tuple[str, ...] = (
    "black",
    "red",
    "green",
    "yellow",
    "blue",
    "magenta",
    "cyan",
    "white",
    "bright_black",
    "bright_red",
    "bright_green",
    "bright_yellow",
    "bright_blue",
    "bright_magenta",
    "bright_cyan",
    "bright_white",
)

# Section order is the order palettes are listed and rendered in.
SECTION_SCHEMA: dict[str, tuple[str, ...]] = {
    "base": BASE_SLOTS,
    "semantic": SEMANTIC_SLOTS,
    "diff": DIFF_SLOTS,
    "surface": SURFACE_SLOTS,
    "typography": TYPOGRAPHY_SLOTS,
    "syntax": SYNTAX_SLOTS,
    "editor": EDITOR_SLOTS,
    "terminal": TERMINAL_SLOTS,
}

SECTION_NAMES: tuple[str, ...] = tuple(SECTION_SCHEMA)

# Optional `[platform.<name>]` tables carry per-target overrides.
PLATFORM_TABLE = "platform"
PLATFORM_SLOTS: tuple[str, ...] = ("background", "foreground")
