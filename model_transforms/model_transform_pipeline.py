"""
model_transform_pipeline.py
Defines a pipeline for transforming Schema objects using a sequence of SchemaTransform objects.
"""
from typing import List, Protocol
from schema_model import Schema

class SchemaTransform(Protocol):
    def transform(self, schema: Schema) -> Schema:
        ...

def default_header_transforms() -> List[SchemaTransform]:
    """The transforms every schema goes through before header emission."""
    from model_transforms.assign_enum_values_transform import AssignEnumValuesTransform
    from model_transforms.add_lifecycle_methods_transform import AddLifecycleMethodsTransform
    return [AssignEnumValuesTransform(), AddLifecycleMethodsTransform()]

def run_model_transform_pipeline(
    schema: Schema,
    transforms: List[SchemaTransform]
) -> Schema:
    """
    Applies a sequence of SchemaTransform objects to a Schema.
    Each transform takes a Schema and returns a new Schema.
    """
    for transform in transforms:
        schema = transform.transform(schema)
    return schema
