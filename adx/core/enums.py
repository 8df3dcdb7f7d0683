from __future__ import annotations

from enum import Enum, IntFlag


class Syntax(str, Enum):
    """attributeSyntax OIDs the core cares about."""

    DN_STRING = "2.5.5.1"
    OBJECT_ID = "2.5.5.2"
    CASE_EXACT_STRING = "2.5.5.3"
    CASE_IGNORE_STRING = "2.5.5.4"
    PRINTABLE_STRING = "2.5.5.5"
    NUMERIC_STRING = "2.5.5.6"
    DN_BINARY = "2.5.5.7"
    BOOLEAN = "2.5.5.8"
    INTEGER = "2.5.5.9"
    OCTET_STRING = "2.5.5.10"
    GENERALIZED_TIME = "2.5.5.11"
    UNICODE_STRING = "2.5.5.12"
    PRESENTATION_ADDRESS = "2.5.5.13"
    DN_STRING_WITH_DATA = "2.5.5.14"
    NT_SECURITY_DESCRIPTOR = "2.5.5.15"
    LARGE_INTEGER = "2.5.5.16"
    SID = "2.5.5.17"


class SystemFlags(IntFlag):
    ATTR_NOT_REPLICATED = 0x1
    ATTR_REQ_PARTIAL_SET_MEMBER = 0x2
    ATTR_IS_CONSTRUCTED = 0x4
    ATTR_IS_OPERATIONAL = 0x8
    SCHEMA_BASE_OBJECT = 0x10
    ATTR_IS_RDN = 0x20


class Operation(str, Enum):
    READ = "read"
    LIST = "list"
    SEARCH = "search"


class SchemaKind(str, Enum):
    ATTRIBUTE = "attribute"
    CLASS = "class"
