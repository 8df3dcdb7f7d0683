"""Schema records for attribute and class definitions.

Records are parsed from the documents persisted by ``SchemaStore.build``: a
mapping of lower-cased directory attribute name to a list of values, exactly
as the directory returned them.
"""

from __future__ import annotations

from typing import Any, Dict, FrozenSet, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from ..enums import SchemaKind, Syntax, SystemFlags
from ..errors import SchemaRecordError

# Projections requested from the directory for each definition type
ATTRIBUTE_PROPERTIES: List[str] = [
    "ldapdisplayname",
    "attributesyntax",
    "omsyntax",
    "issinglevalued",
    "rangelower",
    "rangeupper",
    "systemflags",
]

CLASS_PROPERTIES: List[str] = [
    "ldapdisplayname",
    "rdnattid",
    "subclassof",
    "allowedattributes",
    "systemonly",
]


class AttributeSchema(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal[SchemaKind.ATTRIBUTE] = SchemaKind.ATTRIBUTE
    name: str
    syntax: Optional[str] = None
    om_syntax: Optional[str] = None
    single_valued: bool = False
    system_flags: int = 0
    range_lower: Optional[int] = None
    range_upper: Optional[int] = None

    @field_validator("name")
    @classmethod
    def _canonical_name(cls, v: str) -> str:
        return v.strip().lower()

    @property
    def constructed(self) -> bool:
        return bool(self.system_flags & SystemFlags.ATTR_IS_CONSTRUCTED)

    @property
    def resolvable(self) -> bool:
        return self.syntax == Syntax.DN_STRING.value


class ClassSchema(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal[SchemaKind.CLASS] = SchemaKind.CLASS
    name: str
    rdn_attribute: Optional[str] = None
    superclass: Optional[str] = None
    allowed_attributes: FrozenSet[str] = frozenset()
    system_only: bool = False

    @field_validator("name")
    @classmethod
    def _canonical_name(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("allowed_attributes")
    @classmethod
    def _canonical_members(cls, v: FrozenSet[str]) -> FrozenSet[str]:
        return frozenset(a.strip().lower() for a in v)

    def allows(self, attribute: str) -> bool:
        return (attribute or "").strip().lower() in self.allowed_attributes


SchemaRecord = Union[AttributeSchema, ClassSchema]

_CLASS_MARKERS = ("subclassof", "rdnattid", "systemonly", "allowedattributes")


def _values(doc: Mapping[str, Any], key: str) -> List[Any]:
    v = doc.get(key)
    if v is None:
        return []
    if isinstance(v, (list, tuple)):
        return list(v)
    return [v]


def _first(doc: Mapping[str, Any], key: str) -> Any:
    vals = _values(doc, key)
    return vals[0] if vals else None


def _as_bool(raw: Any) -> bool:
    # The directory reports booleans as "TRUE" / "FALSE"
    if isinstance(raw, bool):
        return raw
    if raw is None:
        return False
    return str(raw).strip().upper() == "TRUE"


def _as_int(raw: Any, key: str) -> Optional[int]:
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise SchemaRecordError(f"invalid integer for {key}: {raw!r}") from exc


def _as_str(raw: Any) -> Optional[str]:
    return None if raw is None else str(raw)


def parse_schema_record(data: Mapping[str, Any]) -> SchemaRecord:
    """Build a typed record from a persisted directory-object document."""
    if not isinstance(data, Mapping):
        raise SchemaRecordError(f"schema document must be a mapping, got {type(data).__name__}")

    doc: Dict[str, Any] = {str(k).lower(): v for k, v in data.items()}

    name = _first(doc, "ldapdisplayname")
    if not name:
        raise SchemaRecordError("schema document has no ldapdisplayname")

    try:
        if "attributesyntax" in doc:
            return AttributeSchema(
                name=str(name),
                syntax=_as_str(_first(doc, "attributesyntax")),
                om_syntax=_as_str(_first(doc, "omsyntax")),
                single_valued=_as_bool(_first(doc, "issinglevalued")),
                system_flags=_as_int(_first(doc, "systemflags"), "systemflags") or 0,
                range_lower=_as_int(_first(doc, "rangelower"), "rangelower"),
                range_upper=_as_int(_first(doc, "rangeupper"), "rangeupper"),
            )

        if any(k in doc for k in _CLASS_MARKERS):
            return ClassSchema(
                name=str(name),
                rdn_attribute=_as_str(_first(doc, "rdnattid")),
                superclass=_as_str(_first(doc, "subclassof")),
                allowed_attributes=frozenset(str(a) for a in _values(doc, "allowedattributes")),
                system_only=_as_bool(_first(doc, "systemonly")),
            )
    except ValidationError as exc:
        raise SchemaRecordError(f"invalid schema document for {name!r}: {exc}") from exc

    raise SchemaRecordError(f"cannot tell attribute from class definition for {name!r}")
