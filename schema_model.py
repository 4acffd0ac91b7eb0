"""
schema_model.py
In-memory representation of an API schema: constants, enums, callbacks, structs and
objects. Type references are already parsed into TypeRef values, so generators never
inspect raw type strings.
"""
from enum import Enum
from typing import List, Optional


class TypeKind(Enum):
    PRIMITIVE = "primitive"
    ENUM = "enum"
    STRUCT = "struct"
    CALLBACK = "callback"
    OBJECT = "object"


class PointerType(Enum):
    NONE = ""
    MUTABLE = "mutable"
    IMMUTABLE = "immutable"


class StructType(Enum):
    STANDALONE = "standalone"
    BASE_IN = "base_in"
    EXTENSION_IN = "extension_in"
    BASE_OUT = "base_out"
    EXTENSION_OUT = "extension_out"


class TypeRef:
    """
    A parsed type token. Primitives keep their schema spelling as name
    (e.g. 'uint32'); references keep the referenced entity name (e.g. 'texture_format').
    """
    def __init__(self, kind: TypeKind, name: str):
        self.kind = kind
        self.name = name

    @property
    def token(self) -> str:
        if self.kind == TypeKind.PRIMITIVE:
            return self.name
        return f"{self.kind.value}.{self.name}"

    def __eq__(self, other):
        return isinstance(other, TypeRef) and self.kind == other.kind and self.name == other.name

    def __hash__(self):
        return hash((self.kind, self.name))

    def __repr__(self):
        return f"TypeRef(kind={self.kind.name}, name={self.name!r})"


VOID = TypeRef(TypeKind.PRIMITIVE, "c_void")


class Constant:
    def __init__(self, name: str, value: str, doc: str = ""):
        self.name = name
        self.value = value
        self.doc = doc


class EnumEntry:
    def __init__(self, name: str, value: Optional[str] = None, doc: str = ""):
        self.name = name
        self.value = value  # explicit literal as authored, or None
        self.doc = doc
        self.encoded_value: Optional[int] = None  # set by AssignEnumValuesTransform


class EnumDef:
    def __init__(self, name: str, entries: List[EnumEntry], bitmask: bool = False, doc: str = ""):
        self.name = name
        self.entries = entries
        self.bitmask = bitmask
        self.doc = doc


class StructMember:
    def __init__(self, name: str, type_ref: TypeRef, pointer: PointerType = PointerType.NONE,
                 optional: bool = False, doc: str = ""):
        self.name = name
        self.type_ref = type_ref
        self.pointer = pointer
        self.optional = optional
        self.doc = doc

    @property
    def embeds_struct(self) -> bool:
        """True when the member holds another struct by value (not through a pointer)."""
        return self.type_ref.kind == TypeKind.STRUCT and self.pointer == PointerType.NONE


class FunctionArg:
    def __init__(self, name: str, type_ref: TypeRef, pointer: PointerType = PointerType.NONE,
                 optional: bool = False, doc: str = ""):
        self.name = name
        self.type_ref = type_ref
        self.pointer = pointer
        self.optional = optional
        self.doc = doc


class FunctionReturns:
    def __init__(self, type_ref: TypeRef = VOID, pointer: PointerType = PointerType.NONE, doc: str = ""):
        self.type_ref = type_ref
        self.pointer = pointer
        self.doc = doc


class Function:
    """A free callback or an object method."""
    def __init__(self, name: str, args: Optional[List[FunctionArg]] = None,
                 returns: Optional[FunctionReturns] = None, doc: str = "", synthetic: bool = False):
        self.name = name
        self.args = args or []
        self.returns = returns or FunctionReturns()
        self.doc = doc
        self.synthetic = synthetic


class Struct:
    def __init__(self, name: str, members: List[StructMember],
                 struct_type: StructType = StructType.STANDALONE, doc: str = ""):
        self.name = name
        self.members = members
        self.struct_type = struct_type
        self.doc = doc

    def embedded_struct_names(self) -> List[str]:
        return [m.type_ref.name for m in self.members if m.embeds_struct]


class Object:
    def __init__(self, name: str, methods: List[Function], doc: str = ""):
        self.name = name
        self.methods = methods
        self.doc = doc


class Schema:
    def __init__(
        self,
        copyright: str = "",
        basetypes: Optional[List[str]] = None,
        constants: Optional[List[Constant]] = None,
        enums: Optional[List[EnumDef]] = None,
        callbacks: Optional[List[Function]] = None,
        structs: Optional[List[Struct]] = None,
        objects: Optional[List[Object]] = None,
        source_file: Optional[str] = None,
    ):
        self.copyright = copyright
        self.basetypes = basetypes or []
        self.constants = constants or []
        self.enums = enums or []
        self.callbacks = callbacks or []
        self.structs = structs or []
        self.objects = objects or []
        self.source_file = source_file
