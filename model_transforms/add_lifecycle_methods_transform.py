"""
Model Transform: AddLifecycleMethodsTransform
Gives every object the reference-counting methods 'reference' and 'release'.
Both take only the object handle and return nothing. They are marked synthetic so
generators can emit them after the declared methods, and so running the transform
twice does not add them again.
"""
from typing import List

from schema_errors import SchemaError, SchemaErrors
from schema_model import Function, Object, Schema

LIFECYCLE_METHOD_NAMES = ("reference", "release")


class AddLifecycleMethodsTransform:
    def transform(self, schema: Schema) -> Schema:
        errors: List[SchemaError] = []
        for obj in schema.objects:
            errors.extend(self._add_lifecycle_methods(obj))
        if errors:
            raise SchemaErrors(errors)
        return schema

    def _add_lifecycle_methods(self, obj: Object) -> List[SchemaError]:
        if any(m.synthetic for m in obj.methods):
            return []
        errors = []
        for method in obj.methods:
            if method.name in LIFECYCLE_METHOD_NAMES:
                errors.append(SchemaError(
                    f"object.{obj.name}.method.{method.name}",
                    f"'{method.name}' is reserved for the generated lifecycle method",
                ))
        if errors:
            return errors
        obj.methods = obj.methods + [Function(name, synthetic=True) for name in LIFECYCLE_METHOD_NAMES]
        return []
