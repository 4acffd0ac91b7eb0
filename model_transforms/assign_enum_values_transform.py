"""
Model Transform: AssignEnumValuesTransform
Assigns the encoded value of every enum entry so generators do not need to handle value assignment logic.
Plain enums count up from 0 in authored order; bitmask enums use 2^(index-1), leaving the
leading 'none'/'undefined' entry at 0. An explicit value always wins.
"""
import re
from typing import List

from schema_errors import MalformedLiteralError, SchemaError, SchemaErrors
from schema_model import EnumDef, Schema

MAX_UINT64 = 2 ** 64 - 1
_DECIMAL_RE = re.compile(r'^[0-9]+$')


def parse_enum_literal(text: str, entity: str) -> int:
    """Parse an explicit entry value: a base-10 unsigned integer that fits in 64 bits."""
    if not _DECIMAL_RE.match(text):
        raise MalformedLiteralError(entity, f"explicit value '{text}' is not a base-10 unsigned integer")
    value = int(text)
    if value > MAX_UINT64:
        raise MalformedLiteralError(entity, f"explicit value '{text}' does not fit in 64 bits")
    return value


class AssignEnumValuesTransform:
    def transform(self, schema: Schema) -> Schema:
        errors: List[SchemaError] = []
        for enum in schema.enums:
            errors.extend(self._assign_enum_values(enum))
        if errors:
            raise SchemaErrors(errors)
        return schema

    def _assign_enum_values(self, enum: EnumDef) -> List[SchemaError]:
        errors = []
        for index, entry in enumerate(enum.entries):
            if entry.value is not None and entry.value != '':
                try:
                    entry.encoded_value = parse_enum_literal(entry.value, f"enum.{enum.name}.entry.{entry.name}")
                except MalformedLiteralError as e:
                    errors.append(e)
            elif enum.bitmask:
                entry.encoded_value = 0 if index == 0 else 1 << (index - 1)
            else:
                entry.encoded_value = index
        return errors
