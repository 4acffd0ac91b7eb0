import copy
import pytest
from generators.c_header_generator import CHeaderGenerator, HeaderOptions, generate_header
from schema_errors import (
    MalformedLiteralError,
    SchemaErrors,
    StructDependencyCycleError,
    UnhandledKindError,
    UnmappedTypeError,
)
from schema_model import (
    Function,
    FunctionArg,
    FunctionReturns,
    Object,
    PointerType,
    Schema,
    Struct,
    StructMember,
    TypeKind,
    TypeRef,
)
from test_utils import declared_names, schema_from_yaml


@pytest.fixture
def header(sample_schema):
    return generate_header(sample_schema)


def test_section_order(header):
    markers = [
        "/**\n * Copyright 2024 The Example Authors",
        "#ifndef WEBGPU_H_",
        "#define WGPU_ARRAY_LAYER_COUNT_UNDEFINED",
        "typedef uint32_t WGPUFlags;",
        "typedef struct WGPUBufferImpl* WGPUBuffer WGPU_OBJECT_ATTRIBUTE;",
        "struct WGPUAdapterProperties;",
        "typedef enum WGPUBufferUsage {",
        "typedef void (*WGPUDeviceLostCallback)(void) WGPU_FUNCTION_ATTRIBUTE;",
        "typedef struct WGPUChainedStruct {",
        "typedef struct WGPUChainedStructOut {",
        "typedef struct WGPUAdapterProperties {",
        "#if !defined(WGPU_SKIP_PROCS)",
        "// Procs of Buffer",
        "#if !defined(WGPU_SKIP_DECLARATIONS)",
        "// Methods of Buffer",
        '} // extern "C"',
    ]
    positions = [header.index(m) for m in markers]
    assert positions == sorted(positions)
    assert header.startswith("/**\n")
    assert header.endswith("#endif // WEBGPU_H_\n")


def test_constants(header):
    assert "#define WGPU_ARRAY_LAYER_COUNT_UNDEFINED (0xffffffffUL)\n" in header
    assert "#define WGPU_WHOLE_SIZE (0xffffffffffffffffULL)\n" in header
    assert "/**\n * Indicates a size extending to the end of the buffer.\n */\n#define WGPU_WHOLE_SIZE" in header
    assert "#define WGPU_MAX_ANISOTROPY (16)\n" in header


def test_forward_declarations(header):
    assert (
        "typedef struct WGPUBufferImpl* WGPUBuffer WGPU_OBJECT_ATTRIBUTE;\n"
        "typedef struct WGPUDeviceImpl* WGPUDevice WGPU_OBJECT_ATTRIBUTE;\n"
        "typedef struct WGPUQuerySetImpl* WGPUQuerySet WGPU_OBJECT_ATTRIBUTE;\n"
        "typedef struct WGPUTextureImpl* WGPUTexture WGPU_OBJECT_ATTRIBUTE;\n"
        "\n"
        "struct WGPUAdapterProperties;\n"
        "struct WGPUBufferDescriptor;\n"
        "struct WGPUExtent3d;\n"
        "struct WGPURenderPassTimestampWrites;\n"
        "struct WGPUSurfaceDescriptorFromMetalLayer;\n"
        "struct WGPUTextureDescriptor;\n"
        "\n"
    ) in header


def test_plain_enum_encoding(header):
    assert (
        "/**\n * Formats a texture can be created with.\n */\n"
        "typedef enum WGPUTextureFormat {\n"
        "    /**\n     * Not a valid format.\n     */\n"
        "    WGPUTextureFormat_Undefined = 0x00000000,\n"
        "    /**\n     */\n"
        "    WGPUTextureFormat_R8Unorm = 0x00000001,\n"
        "    /**\n     */\n"
        "    WGPUTextureFormat_Rgba8UnormSrgb = 0x00000002,\n"
        "    WGPUTextureFormat_Force32 = 0x7FFFFFFF\n"
        "} WGPUTextureFormat WGPU_ENUM_ATTRIBUTE;\n"
        "\n"
    ) in header


def test_explicit_enum_value(header):
    assert "    WGPUErrorType_Validation = 0x00000001,\n" in header
    assert "    WGPUErrorType_Unknown = 0x00000005,\n" in header


def test_bitmask_enum_encoding(header):
    assert "    WGPUBufferUsage_None = 0x00000000,\n" in header
    assert "    WGPUBufferUsage_MapRead = 0x00000001,\n" in header
    assert "    WGPUBufferUsage_MapWrite = 0x00000002,\n" in header
    assert "    WGPUBufferUsage_CopySrc = 0x00000004,\n" in header
    assert (
        "    WGPUBufferUsage_Force32 = 0x7FFFFFFF\n"
        "} WGPUBufferUsage WGPU_ENUM_ATTRIBUTE;\n"
        "typedef WGPUFlags WGPUBufferUsageFlags WGPU_ENUM_ATTRIBUTE;\n"
    ) in header
    assert "WGPUTextureFormatFlags" not in header


def test_callbacks(header):
    assert (
        "/**\n * Reports an uncaptured device error.\n */\n"
        "typedef void (*WGPUErrorCallback)(WGPUErrorType type, char const * message, void * userdata) "
        "WGPU_FUNCTION_ATTRIBUTE;\n"
    ) in header
    assert declared_names(header, r"^typedef void \(\*WGPU(?!Proc)(\w+)\)") == ["DeviceLostCallback", "ErrorCallback"]


def test_chained_struct_leading_members(header):
    assert "typedef struct WGPUBufferDescriptor {\n    WGPUChainedStruct const * nextInChain;\n" in header
    assert "typedef struct WGPUSurfaceDescriptorFromMetalLayer {\n    WGPUChainedStruct chain;\n" in header
    assert "typedef struct WGPUAdapterProperties {\n    WGPUChainedStructOut * nextInChain;\n" in header
    assert "typedef struct WGPURenderPassTimestampWrites {\n    WGPUChainedStructOut chain;\n" in header
    assert "/**\n * A three dimensional size.\n */\ntypedef struct WGPUExtent3d {\n    /**\n     */\n    uint32_t width;\n" in header


def test_member_rendering(header):
    assert "    WGPU_NULLABLE char const * label;\n" in header
    assert "    WGPUExtent3d size;\n" in header
    assert "    WGPUTextureFormat const * viewFormats;\n" in header
    assert "    void * layer;\n" in header
    assert "    WGPUBool mappedAtCreation;\n" in header
    assert "    WGPUQuerySet querySet;\n" in header
    assert "} WGPUTextureDescriptor WGPU_STRUCTURE_ATTRIBUTE;\n\n" in header


def test_nullable_arguments(header):
    assert (
        "typedef void (*WGPUProcDeviceSetUncapturedErrorCallback)"
        "(WGPUDevice device, WGPUErrorCallback callback, WGPU_NULLABLE void * userdata) WGPU_FUNCTION_ATTRIBUTE;\n"
    ) in header


def test_embedded_struct_defined_before_user(header):
    assert header.index("typedef struct WGPUExtent3d {") < header.index("typedef struct WGPUTextureDescriptor {")
    struct_defs = declared_names(header, r"^typedef struct WGPU(\w+) \{")
    assert struct_defs == [
        "ChainedStruct", "ChainedStructOut",
        "AdapterProperties", "BufferDescriptor", "Extent3d",
        "RenderPassTimestampWrites", "SurfaceDescriptorFromMetalLayer",
        "TextureDescriptor",
    ]


def test_object_procs_and_declarations(header):
    procs = declared_names(header, r"^typedef \S+(?: \*| const \*)? \(\*WGPUProc(\w+)\)")
    assert procs == [
        "BufferGetMappedRange", "BufferGetSize", "BufferUnmap", "BufferReference", "BufferRelease",
        "DeviceCreateBuffer", "DeviceCreateTexture", "DeviceSetUncapturedErrorCallback",
        "DeviceReference", "DeviceRelease",
        "QuerySetReference", "QuerySetRelease",
        "TextureDestroy", "TextureReference", "TextureRelease",
    ]
    exports = declared_names(header, r"^WGPU_EXPORT .*? wgpu(\w+)\(")
    assert exports == procs
    assert "typedef void * (*WGPUProcBufferGetMappedRange)(WGPUBuffer buffer, size_t offset, size_t size) WGPU_FUNCTION_ATTRIBUTE;\n" in header
    assert "typedef WGPUBuffer (*WGPUProcDeviceCreateBuffer)(WGPUDevice device, WGPUBufferDescriptor const * descriptor) WGPU_FUNCTION_ATTRIBUTE;\n" in header
    assert "WGPU_EXPORT uint64_t wgpuBufferGetSize(WGPUBuffer buffer) WGPU_FUNCTION_ATTRIBUTE;\n" in header
    assert "WGPU_EXPORT void wgpuQuerySetReference(WGPUQuerySet querySet) WGPU_FUNCTION_ATTRIBUTE;\n" in header
    assert "WGPU_EXPORT void wgpuQuerySetRelease(WGPUQuerySet querySet) WGPU_FUNCTION_ATTRIBUTE;\n" in header


def test_names_are_sorted_in_emission_order(header):
    for pattern in (
        r"^typedef enum WGPU(\w+) \{",
        r"^typedef struct WGPU\w+Impl\* WGPU(\w+) ",
        r"^struct WGPU(\w+);",
        r"^// Procs of (\w+)",
        r"^// Methods of (\w+)",
    ):
        found = declared_names(header, pattern)
        assert found, pattern
        assert found == sorted(found), pattern


def test_output_is_independent_of_authoring_order(sample_schema):
    shuffled = copy.deepcopy(sample_schema)
    for key in ("enums", "callbacks", "structs", "objects"):
        getattr(shuffled, key).reverse()
    for obj in shuffled.objects:
        obj.methods.reverse()
    assert generate_header(shuffled) == generate_header(sample_schema)


def test_generation_is_repeatable_and_leaves_schema_untouched(sample_schema):
    generator = CHeaderGenerator(sample_schema)
    first = generator.generate_header()
    assert generator.generate_header() == first
    assert all(len(o.methods) == len({m.name for m in o.methods}) for o in sample_schema.objects)
    assert not any(m.synthetic for o in sample_schema.objects for m in o.methods)
    assert sample_schema.enums[0].entries[0].encoded_value is None


def test_docs_disabled_keeps_only_copyright(sample_schema):
    header = generate_header(sample_schema, HeaderOptions(docs_enabled=False))
    assert header.count("/**") == 1
    assert header.startswith("/**\n * Copyright 2024 The Example Authors\n * SPDX-License-Identifier: BSD-3-Clause\n */\n")
    assert "typedef enum WGPUTextureFormat {\n    WGPUTextureFormat_Undefined = 0x00000000,\n" in header


def test_minimal_schema():
    header = generate_header(schema_from_yaml("copyright: ''"))
    assert header.startswith("/**\n */\n\n#ifndef WEBGPU_H_\n")
    assert "typedef struct WGPUChainedStruct {" in header
    assert "// Procs of" not in header


def test_deep_struct_chain_is_emitted_dependency_first():
    header = generate_header(schema_from_yaml("""
        structs:
          - name: aaa_top
            members:
              - name: middle
                type: struct.middle
          - name: middle
            members:
              - name: leaf
                type: struct.leaf
          - name: leaf
            members:
              - name: value
                type: uint32
    """))
    assert declared_names(header, r"^typedef struct WGPU(\w+) \{")[2:] == ["Leaf", "Middle", "AaaTop"]


def test_struct_cycle_aborts_generation():
    schema = schema_from_yaml("""
        structs:
          - name: a
            members:
              - name: b
                type: struct.b
          - name: b
            members:
              - name: a
                type: struct.a
    """)
    with pytest.raises(SchemaErrors) as excinfo:
        generate_header(schema)
    assert isinstance(excinfo.value.errors[0], StructDependencyCycleError)


def test_callback_with_return_value_is_rejected():
    schema = schema_from_yaml("""
        callbacks:
          - name: compute
            returns:
              type: uint32
          - name: other
            returns:
              type: c_void
              pointer: mutable
    """)
    with pytest.raises(SchemaErrors) as excinfo:
        generate_header(schema)
    errors = excinfo.value.errors
    assert [e.entity for e in errors] == ["callback.compute", "callback.other"]
    assert all(isinstance(e, UnhandledKindError) for e in errors)


@pytest.mark.parametrize("literal", ['"0x10"', "0x10", "-1", "1.5"])
def test_malformed_enum_value_aborts_generation(literal):
    schema = schema_from_yaml(f"""
        enums:
          - name: mode
            entries:
              - name: a
                value: {literal}
    """)
    with pytest.raises(SchemaErrors) as excinfo:
        generate_header(schema)
    assert isinstance(excinfo.value.errors[0], MalformedLiteralError)
    assert excinfo.value.errors[0].entity == "enum.mode.entry.a"


def test_verbose_generation_logs_to_stderr(sample_schema, capsys):
    generate_header(sample_schema, HeaderOptions(verbose=True))
    captured = capsys.readouterr()
    assert "[DEBUG] Generated header:" in captured.err
    assert captured.out == ""


def test_unquoted_hex_constant_passes_through():
    header = generate_header(schema_from_yaml("""
        global:
          constants:
            - name: mask
              value: 0x7FFFFFFF
    """))
    assert "#define WGPU_MASK (0x7FFFFFFF)\n" in header


def test_nullable_pointer_to_const_struct():
    header = generate_header(schema_from_yaml("""
        structs:
          - name: x
            members:
              - name: value
                type: uint32
          - name: holder
            members:
              - name: target
                type: struct.x
                pointer: immutable
                optional: true
        objects:
          - name: device
            methods:
              - name: use
                args:
                  - name: target
                    type: struct.x
                    pointer: immutable
                    optional: true
    """))
    assert "    WGPU_NULLABLE WGPUX const * target;\n" in header
    assert "WGPU_EXPORT void wgpuDeviceUse(WGPUDevice device, WGPU_NULLABLE WGPUX const * target) WGPU_FUNCTION_ATTRIBUTE;\n" in header
    # pointer members do not force an embedding order
    assert declared_names(header, r"^typedef struct WGPU(\w+) \{")[2:] == ["Holder", "X"]


def test_unmapped_types_in_a_built_schema_are_collected():
    int128 = TypeRef(TypeKind.PRIMITIVE, "int128")
    schema = Schema(
        callbacks=[Function("notify", args=[FunctionArg("code", int128)])],
        structs=[Struct("s", [StructMember("x", int128), StructMember("y", TypeRef(TypeKind.PRIMITIVE, "uint32"))])],
        objects=[Object("thing", [
            Function("get", returns=FunctionReturns(int128, PointerType.MUTABLE)),
            Function("put", args=[FunctionArg("value", int128)]),
        ])],
    )
    with pytest.raises(SchemaErrors) as excinfo:
        generate_header(schema)
    errors = excinfo.value.errors
    assert [e.entity for e in errors] == [
        "callback.notify.arg.code",
        "struct.s.member.x",
        "object.thing.method.get.returns",
        "object.thing.method.put.arg.value",
    ]
    assert all(isinstance(e, UnmappedTypeError) for e in errors)
