"""
schema_errors.py
Structured errors raised while loading a schema or generating a header from it.
Each error carries the dotted identity of the entity it was found on
(e.g. 'struct.texture_descriptor.member.format').
"""
from typing import List


class SchemaError(Exception):
    def __init__(self, entity: str, message: str):
        super().__init__(f"{entity}: {message}")
        self.entity = entity
        self.message = message


class UnmappedTypeError(SchemaError):
    """A type token that is neither a known primitive nor an enum/struct/callback/object reference."""


class UnhandledKindError(SchemaError):
    """A struct kind, pointer qualifier or return kind the header rules do not cover."""


class MalformedLiteralError(SchemaError):
    """An explicit enum value that is not a base-10 unsigned integer."""


class StructDependencyCycleError(SchemaError):
    """Structs that embed each other by value, directly or through a chain."""


class SchemaErrors(Exception):
    """
    Raised once per stage with every defect that stage found, so a caller can
    report all of them instead of stopping at the first.
    """
    def __init__(self, errors: List[SchemaError]):
        self.errors = list(errors)
        lines = [str(e) for e in self.errors]
        super().__init__(f"{len(lines)} schema error(s):\n" + "\n".join(lines))
