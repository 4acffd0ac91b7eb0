"""
C header generator for API schemas.
Emits one self-contained, ABI-stable C header (webgpu.h style) from a Schema.
"""
import copy
import sys
from io import StringIO
from typing import List, Optional, TextIO

from generators.c_type_mapper import c_type, c_value
from generators.generator_utils import camel_case, constant_case, multiline_comment, pascal_case, sorted_by_name
from model_transforms.model_transform_pipeline import default_header_transforms, run_model_transform_pipeline
from model_transforms.struct_dependency_sort import order_structs_for_emission
from schema_errors import SchemaError, SchemaErrors, UnhandledKindError
from schema_model import Function, PointerType, Schema, Struct, StructType, TypeKind

PREAMBLE = """
#ifndef WEBGPU_H_
#define WEBGPU_H_

#if defined(WGPU_SHARED_LIBRARY)
#    if defined(_WIN32)
#        if defined(WGPU_IMPLEMENTATION)
#            define WGPU_EXPORT __declspec(dllexport)
#        else
#            define WGPU_EXPORT __declspec(dllimport)
#        endif
#    else  // defined(_WIN32)
#        if defined(WGPU_IMPLEMENTATION)
#            define WGPU_EXPORT __attribute__((visibility("default")))
#        else
#            define WGPU_EXPORT
#        endif
#    endif  // defined(_WIN32)
#else       // defined(WGPU_SHARED_LIBRARY)
#    define WGPU_EXPORT
#endif  // defined(WGPU_SHARED_LIBRARY)

#if !defined(WGPU_OBJECT_ATTRIBUTE)
#define WGPU_OBJECT_ATTRIBUTE
#endif
#if !defined(WGPU_ENUM_ATTRIBUTE)
#define WGPU_ENUM_ATTRIBUTE
#endif
#if !defined(WGPU_STRUCTURE_ATTRIBUTE)
#define WGPU_STRUCTURE_ATTRIBUTE
#endif
#if !defined(WGPU_FUNCTION_ATTRIBUTE)
#define WGPU_FUNCTION_ATTRIBUTE
#endif
#if !defined(WGPU_NULLABLE)
#define WGPU_NULLABLE
#endif

#include <stdint.h>
#include <stddef.h>

"""

TYPE_ALIASES = """
typedef uint32_t WGPUFlags;
typedef uint32_t WGPUBool;

"""

CHAINED_STRUCTS = """
typedef struct WGPUChainedStruct {
    struct WGPUChainedStruct const * next;
    WGPUSType sType;
} WGPUChainedStruct WGPU_STRUCTURE_ATTRIBUTE;

typedef struct WGPUChainedStructOut {
    struct WGPUChainedStructOut * next;
    WGPUSType sType;
} WGPUChainedStructOut WGPU_STRUCTURE_ATTRIBUTE;

"""

PROCS_START = """
#ifdef __cplusplus
extern "C" {
#endif

#if !defined(WGPU_SKIP_PROCS)
"""

DECLARATIONS_START = """
#endif  // !defined(WGPU_SKIP_PROCS)

#if !defined(WGPU_SKIP_DECLARATIONS)

"""

DECLARATIONS_END = """
#endif  // !defined(WGPU_SKIP_DECLARATIONS)

#ifdef __cplusplus
} // extern "C"
#endif

"""

FOOTER = "#endif // WEBGPU_H_\n"

# Leading member implied by each struct kind
CHAIN_MEMBERS = {
    StructType.STANDALONE: None,
    StructType.BASE_IN: "WGPUChainedStruct const * nextInChain;",
    StructType.EXTENSION_IN: "WGPUChainedStruct chain;",
    StructType.BASE_OUT: "WGPUChainedStructOut * nextInChain;",
    StructType.EXTENSION_OUT: "WGPUChainedStructOut chain;",
}


class HeaderOptions:
    def __init__(self, docs_enabled: bool = True, verbose: bool = False):
        self.docs_enabled = docs_enabled
        self.verbose = verbose


class CHeaderGenerator:
    """
    Writes the header sections in a fixed order: preamble, constants, type aliases,
    forward declarations, enums, callbacks, structs, procs and declarations, footer.
    Enums, callbacks, structs and objects are emitted sorted by capitalized name, so the
    output does not depend on schema authoring order.
    """

    def __init__(self, schema: Schema, options: Optional[HeaderOptions] = None):
        self.schema = schema
        self.options = options or HeaderOptions()
        self.errors: List[SchemaError] = []

    def debug_print(self, message: str) -> None:
        if self.options.verbose:
            print(f"[DEBUG] {message}", file=sys.stderr)

    def log_error(self, error: SchemaError) -> None:
        self.errors.append(error)
        if self.options.verbose:
            print(f"[ERROR] {error}", file=sys.stderr)

    def generate_header(self) -> str:
        """
        Generate the full header text.
        The caller's schema is left untouched; transforms run on a private copy.
        Raises SchemaErrors with every defect found; no partial header is returned.
        """
        schema = run_model_transform_pipeline(copy.deepcopy(self.schema), default_header_transforms())
        self.errors = []
        f = StringIO()
        self._write_preamble(f, schema)
        self._write_constants(f, schema)
        self._write_type_aliases(f)
        self._write_forward_declarations(f, schema)
        self._write_enums(f, schema)
        self._write_callbacks(f, schema)
        self._write_structs(f, schema)
        self._write_procs(f, schema)
        self._write_footer(f)
        if self.errors:
            raise SchemaErrors(self.errors)
        self.debug_print(f"Generated header: {len(f.getvalue().splitlines())} lines")
        return f.getvalue()

    def _write_doc(self, f: TextIO, doc: str, indent: int = 0) -> None:
        if self.options.docs_enabled:
            f.write(multiline_comment(doc, indent) + "\n")

    def _write_preamble(self, f: TextIO, schema: Schema) -> None:
        f.write(multiline_comment(schema.copyright, 0) + "\n")
        f.write(PREAMBLE)

    def _write_constants(self, f: TextIO, schema: Schema) -> None:
        for constant in schema.constants:
            self._write_doc(f, constant.doc)
            f.write(f"#define WGPU_{constant_case(constant.name)} ({c_value(constant.value)})\n")

    def _write_type_aliases(self, f: TextIO) -> None:
        f.write(TYPE_ALIASES)

    def _write_forward_declarations(self, f: TextIO, schema: Schema) -> None:
        for obj in sorted_by_name(schema.objects):
            name = pascal_case(obj.name)
            f.write(f"typedef struct WGPU{name}Impl* WGPU{name} WGPU_OBJECT_ATTRIBUTE;\n")
        f.write("\n")
        for s in sorted_by_name(schema.structs):
            f.write(f"struct WGPU{pascal_case(s.name)};\n")
        f.write("\n")

    def _write_enums(self, f: TextIO, schema: Schema) -> None:
        for enum in sorted_by_name(schema.enums):
            enum_name = pascal_case(enum.name)
            self._write_doc(f, enum.doc)
            f.write(f"typedef enum WGPU{enum_name} {{\n")
            for entry in enum.entries:
                self._write_doc(f, entry.doc, 4)
                f.write(f"    WGPU{enum_name}_{pascal_case(entry.name)} = 0x{entry.encoded_value:08X},\n")
            f.write(f"    WGPU{enum_name}_Force32 = 0x7FFFFFFF\n")
            f.write(f"}} WGPU{enum_name} WGPU_ENUM_ATTRIBUTE;\n")
            if enum.bitmask:
                f.write(f"typedef WGPUFlags WGPU{enum_name}Flags WGPU_ENUM_ATTRIBUTE;\n")
            f.write("\n")

    def _format_args(self, function: Function, entity: str) -> List[str]:
        args = []
        for arg in function.args:
            nullable = "WGPU_NULLABLE " if arg.optional else ""
            arg_type = c_type(arg.type_ref, arg.pointer, f"{entity}.arg.{arg.name}")
            args.append(f"{nullable}{arg_type} {camel_case(arg.name)}")
        return args

    def _write_callbacks(self, f: TextIO, schema: Schema) -> None:
        for cb in sorted_by_name(schema.callbacks):
            entity = f"callback.{cb.name}"
            returns = cb.returns
            if returns.type_ref.kind != TypeKind.PRIMITIVE or returns.type_ref.name != 'c_void' \
                    or returns.pointer != PointerType.NONE:
                self.log_error(UnhandledKindError(
                    entity, f"callbacks must return c_void, got '{returns.type_ref.token}'"))
                continue
            try:
                args = self._format_args(cb, entity)
            except SchemaError as e:
                self.log_error(e)
                continue
            self._write_doc(f, cb.doc)
            params = ", ".join(args) if args else "void"
            f.write(f"typedef void (*WGPU{pascal_case(cb.name)})({params}) WGPU_FUNCTION_ATTRIBUTE;\n")

    def _write_struct(self, f: TextIO, s: Struct) -> None:
        struct_name = pascal_case(s.name)
        self._write_doc(f, s.doc)
        f.write(f"typedef struct WGPU{struct_name} {{\n")
        chain_member = CHAIN_MEMBERS.get(s.struct_type)
        if chain_member:
            f.write(f"    {chain_member}\n")
        for member in s.members:
            try:
                member_type = c_type(member.type_ref, member.pointer, f"struct.{s.name}.member.{member.name}")
            except SchemaError as e:
                self.log_error(e)
                continue
            self._write_doc(f, member.doc, 4)
            nullable = "WGPU_NULLABLE " if member.optional else ""
            f.write(f"    {nullable}{member_type} {camel_case(member.name)};\n")
        f.write(f"}} WGPU{struct_name} WGPU_STRUCTURE_ATTRIBUTE;\n\n")

    def _write_structs(self, f: TextIO, schema: Schema) -> None:
        f.write(CHAINED_STRUCTS)
        try:
            ordered = order_structs_for_emission(schema.structs)
        except SchemaError as e:
            self.log_error(e)
            return
        for s in ordered:
            self._write_struct(f, s)

    def _object_methods(self, obj) -> List[Function]:
        declared = sorted_by_name(m for m in obj.methods if not m.synthetic)
        return declared + [m for m in obj.methods if m.synthetic]

    def _method_signature(self, obj, method: Function):
        object_name = pascal_case(obj.name)
        entity = f"object.{obj.name}.method.{method.name}"
        return_type = c_type(method.returns.type_ref, method.returns.pointer, entity + ".returns")
        args = [f"WGPU{object_name} {camel_case(obj.name)}"] + self._format_args(method, entity)
        return return_type, object_name + pascal_case(method.name), ", ".join(args)

    def _write_procs(self, f: TextIO, schema: Schema) -> None:
        signatures = []
        for obj in sorted_by_name(schema.objects):
            object_signatures = []
            for method in self._object_methods(obj):
                try:
                    object_signatures.append(self._method_signature(obj, method))
                except SchemaError as e:
                    self.log_error(e)
            signatures.append((pascal_case(obj.name), object_signatures))

        f.write(PROCS_START)
        for object_name, object_signatures in signatures:
            f.write("\n")
            f.write(f"// Procs of {object_name}\n")
            for return_type, name, params in object_signatures:
                f.write(f"typedef {return_type} (*WGPUProc{name})({params}) WGPU_FUNCTION_ATTRIBUTE;\n")

        f.write(DECLARATIONS_START)
        for object_name, object_signatures in signatures:
            f.write("\n")
            f.write(f"// Methods of {object_name}\n")
            for return_type, name, params in object_signatures:
                f.write(f"WGPU_EXPORT {return_type} wgpu{name}({params}) WGPU_FUNCTION_ATTRIBUTE;\n")
        f.write(DECLARATIONS_END)

    def _write_footer(self, f: TextIO) -> None:
        f.write(FOOTER)


def generate_header(schema: Schema, options: Optional[HeaderOptions] = None) -> str:
    return CHeaderGenerator(schema, options).generate_header()
