# schema_loader.py
# Reads a YAML API schema and builds the in-memory Schema.
# Every shape defect found is collected; the loader raises once with all of them.
import os
import sys
from typing import Any, List, Optional

import yaml

from schema_errors import SchemaError, SchemaErrors, UnhandledKindError
from schema_model import (
    VOID,
    Constant,
    EnumDef,
    EnumEntry,
    Function,
    FunctionArg,
    FunctionReturns,
    Object,
    PointerType,
    Schema,
    Struct,
    StructMember,
    StructType,
    TypeRef,
)
from type_ref_parser import parse_type_ref

BOOLEAN_VALUES = {'true': True, 'false': False}


def load_schema_file(schema_file_path: str, verbose: bool = False) -> Schema:
    with open(schema_file_path, 'r', encoding='utf-8') as f:
        text = f.read()
    return SchemaLoader(verbose).load_text(text, source_file=schema_file_path)


def load_schema_text(text: str, source_file: Optional[str] = None, verbose: bool = False) -> Schema:
    return SchemaLoader(verbose).load_text(text, source_file=source_file)


class SchemaLoader:
    """
    Builds a Schema from a parsed YAML document.
    Type tokens are parsed here, so an unknown type is reported at load time.
    """

    def __init__(self, verbose: bool = False):
        self.verbose = verbose
        self.errors: List[SchemaError] = []

    def debug_print(self, message: str) -> None:
        if self.verbose:
            print(f"[DEBUG] {message}", file=sys.stderr)

    def log_error(self, error: SchemaError) -> None:
        self.errors.append(error)
        if self.verbose:
            print(f"[ERROR] {error}", file=sys.stderr)

    def load_text(self, text: str, source_file: Optional[str] = None) -> Schema:
        self.errors = []
        try:
            # BaseLoader keeps every scalar as text; flags and literals are interpreted below
            data = yaml.load(text, Loader=yaml.BaseLoader)
        except yaml.YAMLError as e:
            raise SchemaErrors([SchemaError("<document>", f"invalid YAML: {e}")]) from e
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise SchemaErrors([SchemaError("<document>", "top level must be a mapping")])

        schema = self.build_schema(data, source_file)
        if self.errors:
            raise SchemaErrors(self.errors)
        self.debug_print(
            f"Loaded schema {os.path.basename(source_file) if source_file else '<text>'}: "
            f"{len(schema.constants)} constants, {len(schema.enums)} enums, "
            f"{len(schema.callbacks)} callbacks, {len(schema.structs)} structs, "
            f"{len(schema.objects)} objects"
        )
        return schema

    def build_schema(self, data: dict, source_file: Optional[str] = None) -> Schema:
        global_section = data.get('global') or {}
        if not isinstance(global_section, dict):
            self.log_error(SchemaError("global", "must be a mapping"))
            global_section = {}

        constants = [self._build_constant(c) for c in self._list(global_section, 'constants', 'global.constants')]
        enums = [self._build_enum(e) for e in self._list(data, 'enums', 'enums')]
        callbacks = [self._build_function(cb, 'callback') for cb in self._list(data, 'callbacks', 'callbacks')]
        structs = [self._build_struct(s) for s in self._list(data, 'structs', 'structs')]
        objects = [self._build_object(o) for o in self._list(data, 'objects', 'objects')]

        return Schema(
            copyright=self._text(data.get('copyright')),
            basetypes=[str(b) for b in self._list(data, 'basetypes', 'basetypes')],
            constants=[c for c in constants if c is not None],
            enums=[e for e in enums if e is not None],
            callbacks=[cb for cb in callbacks if cb is not None],
            structs=[s for s in structs if s is not None],
            objects=[o for o in objects if o is not None],
            source_file=source_file,
        )

    # --- shape helpers ---

    def _list(self, data: dict, key: str, entity: str) -> list:
        value = data.get(key)
        if value is None or value == '':
            return []
        if not isinstance(value, list):
            self.log_error(SchemaError(entity, "must be a list"))
            return []
        return value

    @staticmethod
    def _text(value: Any) -> str:
        return '' if value is None else str(value)

    def _name(self, item: Any, entity: str) -> Optional[str]:
        if not isinstance(item, dict):
            self.log_error(SchemaError(entity, "must be a mapping"))
            return None
        name = item.get('name')
        if not isinstance(name, str) or not name:
            self.log_error(SchemaError(entity, "missing name"))
            return None
        return name

    def _flag(self, item: dict, key: str, entity: str) -> bool:
        value = item.get(key, '')
        if value == '':
            return False
        if isinstance(value, str) and value.lower() in BOOLEAN_VALUES:
            return BOOLEAN_VALUES[value.lower()]
        self.log_error(SchemaError(entity, f"'{key}' must be true or false, got {value!r}"))
        return False

    def _literal(self, value: Any, entity: str) -> Optional[str]:
        if value is None or value == '':
            return None
        if not isinstance(value, str):
            self.log_error(SchemaError(entity, f"unsupported literal {value!r}"))
            return None
        return value

    def _pointer(self, item: dict, entity: str) -> PointerType:
        raw = item.get('pointer') or ''
        try:
            return PointerType(raw)
        except ValueError:
            self.log_error(UnhandledKindError(entity, f"unknown pointer qualifier '{raw}'"))
            return PointerType.NONE

    def _type_ref(self, item: dict, entity: str) -> TypeRef:
        try:
            return parse_type_ref(item.get('type'), entity)
        except SchemaError as e:
            self.log_error(e)
            return VOID

    # --- entity builders ---

    def _build_constant(self, item: Any) -> Optional[Constant]:
        name = self._name(item, "constant")
        if name is None:
            return None
        entity = f"constant.{name}"
        value = self._literal(item.get('value'), entity)
        if value is None:
            self.log_error(SchemaError(entity, "missing value"))
            return None
        return Constant(name, value, self._text(item.get('doc')))

    def _build_enum(self, item: Any) -> Optional[EnumDef]:
        name = self._name(item, "enum")
        if name is None:
            return None
        entity = f"enum.{name}"
        entries = []
        for raw_entry in self._list(item, 'entries', entity + ".entries"):
            entry_name = self._name(raw_entry, entity + ".entry")
            if entry_name is None:
                continue
            entry_entity = f"{entity}.entry.{entry_name}"
            entries.append(EnumEntry(
                name=entry_name,
                value=self._literal(raw_entry.get('value'), entry_entity),
                doc=self._text(raw_entry.get('doc')),
            ))
        return EnumDef(
            name=name,
            entries=entries,
            bitmask=self._flag(item, 'bitmask', entity),
            doc=self._text(item.get('doc')),
        )

    def _build_function(self, item: Any, kind: str) -> Optional[Function]:
        name = self._name(item, kind)
        if name is None:
            return None
        entity = f"{kind}.{name}"
        args = []
        for raw_arg in self._list(item, 'args', entity + ".args"):
            arg_name = self._name(raw_arg, entity + ".arg")
            if arg_name is None:
                continue
            arg_entity = f"{entity}.arg.{arg_name}"
            args.append(FunctionArg(
                name=arg_name,
                type_ref=self._type_ref(raw_arg, arg_entity),
                pointer=self._pointer(raw_arg, arg_entity),
                optional=self._flag(raw_arg, 'optional', arg_entity),
                doc=self._text(raw_arg.get('doc')),
            ))
        returns = FunctionReturns()
        raw_returns = item.get('returns')
        if raw_returns is not None and raw_returns != '':
            if isinstance(raw_returns, dict):
                returns = FunctionReturns(
                    type_ref=self._type_ref(raw_returns, entity + ".returns"),
                    pointer=self._pointer(raw_returns, entity + ".returns"),
                    doc=self._text(raw_returns.get('doc')),
                )
            else:
                self.log_error(SchemaError(entity + ".returns", "must be a mapping"))
        return Function(name=name, args=args, returns=returns, doc=self._text(item.get('doc')))

    def _build_struct(self, item: Any) -> Optional[Struct]:
        name = self._name(item, "struct")
        if name is None:
            return None
        entity = f"struct.{name}"
        raw_kind = item.get('type') or StructType.STANDALONE.value
        try:
            struct_type = StructType(raw_kind)
        except ValueError:
            self.log_error(UnhandledKindError(entity, f"unknown struct type '{raw_kind}'"))
            struct_type = StructType.STANDALONE
        members = []
        for raw_member in self._list(item, 'members', entity + ".members"):
            member_name = self._name(raw_member, entity + ".member")
            if member_name is None:
                continue
            member_entity = f"{entity}.member.{member_name}"
            members.append(StructMember(
                name=member_name,
                type_ref=self._type_ref(raw_member, member_entity),
                pointer=self._pointer(raw_member, member_entity),
                optional=self._flag(raw_member, 'optional', member_entity),
                doc=self._text(raw_member.get('doc')),
            ))
        return Struct(name=name, members=members, struct_type=struct_type, doc=self._text(item.get('doc')))

    def _build_object(self, item: Any) -> Optional[Object]:
        name = self._name(item, "object")
        if name is None:
            return None
        methods = [self._build_function(m, f"object.{name}.method") for m in self._list(item, 'methods', f"object.{name}.methods")]
        return Object(name=name, methods=[m for m in methods if m is not None], doc=self._text(item.get('doc')))
