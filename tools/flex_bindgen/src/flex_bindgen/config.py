from __future__ import annotations

from dataclasses import dataclass, field

TOOL_PATH = "tools/flex_bindgen/flex_bindgen.py"

# Accessor members whose integer values are an enum not named after the member.
FORCE_ENUM_PROPERTIES = {
    "justify_content": "Align",
    "align_content": "Align",
    "align_items": "Align",
    "align_self": "Align",
}


@dataclass(frozen=True)
class GeneratorConfig:
    dll_name: str = "flex"
    output_file: str = "base.cs"
    native_root: str = "../.."
    header: str = "flex.h"
    introspection_tool: str = "/usr/bin/gen_bridge_metadata"
    enum_prefix: str = "FLEX"
    accessor_prefix: str = "flex_item_"
    item_handle: str = "item"
    namespace: str = "Xamarin.Flex"
    tool_path: str = TOOL_PATH
    enum_overrides: dict[str, str] = field(default_factory=lambda: dict(FORCE_ENUM_PROPERTIES))


DEFAULT_CONFIG = GeneratorConfig()
