"""
schema_debug.py
Debug dump utilities for loaded schemas.
"""
import sys
from typing import List

from schema_model import Function, PointerType, Schema


def _describe_type(type_ref, pointer: PointerType, optional: bool = False) -> str:
    text = type_ref.token
    if pointer != PointerType.NONE:
        text += f" ({pointer.value} pointer)"
    if optional:
        text += " optional"
    return text


def _function_lines(function: Function, indent_level: int) -> List[str]:
    ind = '  ' * indent_level
    args = ", ".join(f"{a.name}: {_describe_type(a.type_ref, a.pointer, a.optional)}" for a in function.args)
    ret = _describe_type(function.returns.type_ref, function.returns.pointer)
    marker = " [synthetic]" if function.synthetic else ""
    return [f"{ind}{function.name}({args}) -> {ret}{marker}"]


def format_schema(schema: Schema) -> str:
    lines = [f"Schema: {schema.source_file or '<text>'}"]
    if schema.basetypes:
        lines.append(f"  Basetypes: {', '.join(schema.basetypes)}")
    for constant in schema.constants:
        lines.append(f"  Constant: {constant.name} = {constant.value}")
    for enum in schema.enums:
        kind = "bitmask" if enum.bitmask else "enum"
        lines.append(f"  Enum: {enum.name} ({kind}, {len(enum.entries)} entries)")
        for entry in enum.entries:
            value = f" = {entry.value}" if entry.value is not None else ""
            lines.append(f"    Entry: {entry.name}{value}")
    for cb in schema.callbacks:
        lines.append("  Callback:")
        lines.extend(_function_lines(cb, 2))
    for s in schema.structs:
        lines.append(f"  Struct: {s.name} ({s.struct_type.value})")
        for m in s.members:
            lines.append(f"    Member: {m.name}: {_describe_type(m.type_ref, m.pointer, m.optional)}")
    for obj in schema.objects:
        lines.append(f"  Object: {obj.name}")
        for method in obj.methods:
            lines.extend(_function_lines(method, 2))
    return "\n".join(lines)


def debug_print_schema(schema: Schema) -> None:
    for line in format_schema(schema).splitlines():
        print(f"[DEBUG] {line}", file=sys.stderr)
