from .models import (
    ATTRIBUTE_PROPERTIES,
    CLASS_PROPERTIES,
    AttributeSchema,
    ClassSchema,
    SchemaRecord,
    parse_schema_record,
)
from .runtime_cache import SchemaRuntimeCache
from .store import SchemaStore

__all__ = [
    "ATTRIBUTE_PROPERTIES",
    "CLASS_PROPERTIES",
    "AttributeSchema",
    "ClassSchema",
    "SchemaRecord",
    "SchemaRuntimeCache",
    "SchemaStore",
    "parse_schema_record",
]
