"""Schema cache and attribute container for directory-service clients."""

from .core.attribute import Attribute
from .core.config import SchemaConfig, load_schema_config
from .core.errors import (
    AdxError,
    ConfigurationError,
    ConstraintViolationError,
    InvalidOperationError,
    ReferralLimitExceededError,
    SchemaBuildError,
    SchemaRecordError,
)
from .core.schema import AttributeSchema, ClassSchema, SchemaRuntimeCache, SchemaStore

__version__ = "0.1.0"

__all__ = [
    "AdxError",
    "Attribute",
    "AttributeSchema",
    "ClassSchema",
    "ConfigurationError",
    "ConstraintViolationError",
    "InvalidOperationError",
    "ReferralLimitExceededError",
    "SchemaBuildError",
    "SchemaConfig",
    "SchemaRecordError",
    "SchemaRuntimeCache",
    "SchemaStore",
    "load_schema_config",
]
