"""
Maps schema type references and literal values to their C spellings.
"""
from typing import Union

from generators.generator_utils import pascal_case
from schema_errors import UnmappedTypeError
from schema_model import PointerType, TypeKind, TypeRef
from type_ref_parser import parse_type_ref

PRODUCT_PREFIX = 'WGPU'

C_PRIMITIVE_TYPES = {
    'bool': 'WGPUBool',
    'string': 'char',
    'uint16': 'uint16_t',
    'uint32': 'uint32_t',
    'uint64': 'uint64_t',
    'usize': 'size_t',
    'int16': 'int16_t',
    'int32': 'int32_t',
    'float32': 'float',
    'float64': 'double',
    'c_void': 'void',
}

C_SYMBOLIC_VALUES = {
    'usize_max': 'SIZE_MAX',
    'uint32_max': '0xffffffffUL',
    'uint64_max': '0xffffffffffffffffULL',
}


def _append_pointer(c_name: str, pointer: PointerType) -> str:
    if pointer == PointerType.IMMUTABLE:
        return c_name + ' const *'
    if pointer == PointerType.MUTABLE:
        return c_name + ' *'
    return c_name


def c_type(type_ref: Union[TypeRef, str], pointer: PointerType = PointerType.NONE, entity: str = "<type>") -> str:
    """
    Map a type reference plus pointer qualifier to a C type expression.
    Raw string tokens are parsed first; unknown tokens raise UnmappedTypeError.
    """
    if isinstance(type_ref, str):
        type_ref = parse_type_ref(type_ref, entity)
    if type_ref.kind == TypeKind.PRIMITIVE:
        c_name = C_PRIMITIVE_TYPES.get(type_ref.name)
        if c_name is None:
            raise UnmappedTypeError(entity, f"no C mapping for primitive '{type_ref.name}'")
        if type_ref.name == 'string':
            # strings are always immutable C strings
            return _append_pointer(c_name, PointerType.IMMUTABLE)
        return _append_pointer(c_name, pointer)
    return _append_pointer(PRODUCT_PREFIX + pascal_case(type_ref.name), pointer)


def c_value(value: str) -> str:
    """Substitute symbolic constant values; any other literal passes through unchanged."""
    return C_SYMBOLIC_VALUES.get(value, value)
