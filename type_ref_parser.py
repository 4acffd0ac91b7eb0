from lark import Lark, Transformer, v_args
from lark.exceptions import UnexpectedInput

from schema_errors import UnmappedTypeError
from schema_model import TypeKind, TypeRef


# Type tokens as written in the schema: a primitive name, or '<kind>.<name>'
grammar = r"""
    start: primitive | reference

    primitive: PRIMITIVE
    reference: REF_KIND "." NAME

    PRIMITIVE: "bool" | "string"
             | "uint16" | "uint32" | "uint64" | "usize"
             | "int16" | "int32"
             | "float32" | "float64"
             | "c_void"
    REF_KIND: "enum" | "struct" | "callback" | "object"
    NAME: /[a-zA-Z_][a-zA-Z0-9_]*/
"""

parser = Lark(
    grammar,
    start='start',
    parser='lalr'
)


@v_args(inline=True)
class TypeRefBuilder(Transformer):
    def start(self, ref):
        return ref

    def primitive(self, token):
        return TypeRef(TypeKind.PRIMITIVE, str(token))

    def reference(self, kind, name):
        return TypeRef(TypeKind(str(kind)), str(name))


def parse_type_ref(token, entity: str = "<type>") -> TypeRef:
    """
    Parse a schema type token ('uint32', 'enum.texture_format', ...) into a TypeRef.
    Raises UnmappedTypeError naming `entity` when the token is not recognized.
    """
    if not isinstance(token, str) or not token:
        raise UnmappedTypeError(entity, f"missing or non-string type {token!r}")
    try:
        tree = parser.parse(token)
    except UnexpectedInput as e:
        raise UnmappedTypeError(entity, f"unrecognized type '{token}'") from e
    return TypeRefBuilder().transform(tree)
