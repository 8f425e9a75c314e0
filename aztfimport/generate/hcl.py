"""Rendering of Terraform state values as HCL."""
import json
from typing import Any, Dict, List

# Attributes that are computed by the provider and rejected in configuration
OMITTED_ATTRIBUTES = {"id", "timeouts"}

INDENT = "  "


def is_empty(value: Any) -> bool:
    return value is None or value == "" or value == [] or value == {}


def render_string(value: str) -> str:
    """Quote a string, escaping HCL template sequences."""
    return json.dumps(value).replace("${", "$${").replace("%{", "%%{")


def render_value(value: Any, depth: int = 0) -> str:
    """Render a scalar, list or map as an HCL expression."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, str):
        return render_string(value)
    if isinstance(value, list):
        return "[" + ", ".join(render_value(v, depth) for v in value) + "]"
    if isinstance(value, dict):
        if not value:
            return "{}"
        pad = INDENT * (depth + 1)
        lines = ["{"]
        for key, item in value.items():
            lines.append(f"{pad}{render_string(key)} = {render_value(item, depth + 1)}")
        lines.append(INDENT * depth + "}")
        return "\n".join(lines)
    if value is None:
        return "null"
    raise TypeError(f"cannot render value of type {type(value).__name__}")


def is_block_list(value: Any) -> bool:
    return isinstance(value, list) and bool(value) and all(isinstance(v, dict) for v in value)


def render_body(attributes: Dict[str, Any], depth: int = 1) -> List[str]:
    """Render resource attributes as HCL body lines.

    Lists of objects become repeated nested blocks; everything else
    becomes an ``name = value`` argument.
    """
    pad = INDENT * depth
    lines = []
    for key in sorted(attributes):
        value = attributes[key]
        if key in OMITTED_ATTRIBUTES or is_empty(value):
            continue
        if is_block_list(value):
            for block in value:
                lines.append(f"{pad}{key} {{")
                lines.extend(render_body(block, depth + 1))
                lines.append(f"{pad}}}")
        else:
            lines.append(f"{pad}{key} = {render_value(value, depth)}")
    return lines
