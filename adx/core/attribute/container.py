"""Container for the value(s) of one directory attribute.

An Attribute knows its schema (single-valued, constructed, resolvable) and
refuses mutations the schema does not allow. Every visible mutation is
reported to the owning directory object so it can be written back later;
bulk loads use the silent path and are not reported.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterator, List, Optional

from ..contracts import AttributeOwner, ValueConverter
from ..errors import ConfigurationError, ConstraintViolationError, InvalidOperationError
from ..schema.models import AttributeSchema
from ..schema.store import SchemaStore

_log = logging.getLogger("adx.attribute")


def _as_list(values: Any) -> List[Any]:
    if values is None:
        return []
    if isinstance(values, (list, tuple)):
        return list(values)
    return [values]


class Attribute:
    """
    Ordered, schema-aware value holder for a single directory attribute.

    Values live in integer-keyed slots. Removing a value leaves a gap until
    the next call to value(), which renumbers the slots to 0..count-1.
    Without a schema record the attribute is multi-valued, mutable and not
    resolvable.
    """

    def __init__(
        self,
        name: str,
        values: Any = None,
        owner: Optional[AttributeOwner] = None,
        convert: bool = False,
        *,
        store: Optional[SchemaStore] = None,
        converter: Optional[ValueConverter] = None,
    ):
        self._name = (name or "").strip().lower()
        self._values: Dict[int, Any] = {}
        self._next_index = 0
        self._needs_reindex = False
        self._owner: Optional[AttributeOwner] = None
        self._position = 0
        self._converter = converter
        self._schema: Optional[AttributeSchema] = None

        if store is not None:
            record = store.get(self._name)
            if isinstance(record, AttributeSchema):
                self._schema = record
            else:
                _log.debug("No attribute schema for %r, treating it as unconstrained", self._name)

        initial = _as_list(values)
        if convert:
            if converter is None:
                raise ConfigurationError(f"convert=True requires a value converter ({self._name})")
            initial = list(converter.from_ldap(self, initial))

        self.add(initial, silent=True)

        if owner is not None:
            self.belongs_to(owner)

    # Schema-derived flags

    @property
    def schema(self) -> Optional[AttributeSchema]:
        return self._schema

    @property
    def is_resolvable(self) -> bool:
        """True when the values are distinguished names of other objects."""
        return self._schema is not None and self._schema.resolvable

    def _single_valued(self) -> bool:
        return self._schema is not None and self._schema.single_valued

    def _constructed(self) -> bool:
        return self._schema is not None and self._schema.constructed

    def _ensure_mutable(self, operation: str) -> None:
        if self._constructed():
            raise InvalidOperationError(self._name, operation)

    def _register_change(self) -> None:
        if self._owner is not None:
            self._owner.register_change(self)

    def _reindex(self) -> None:
        if not self._needs_reindex:
            return
        self._values = dict(enumerate(self._values.values()))
        self._next_index = len(self._values)
        self._needs_reindex = False

    def _store_at(self, index: int, value: Any) -> None:
        if index not in self._values and index != self._next_index:
            self._needs_reindex = True
        self._values[index] = value
        self._next_index = max(self._next_index, index + 1)

    # Identity

    def attribute(self) -> str:
        return self._name

    def __str__(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return f"Attribute({self._name!r}, {self.value()!r})"

    # Values

    def value(self, index: Optional[int] = None) -> Any:
        """
        All values when index is None, otherwise the value at index or None.

        A negative index resolves to count() - index, which is past the end
        for any non-empty attribute.
        """
        self._reindex()

        if index is None:
            return list(self._values.values())
        if index < 0 and self.count() != 0:
            return self.value(self.count() - index)
        return self._values.get(index)

    def count(self) -> int:
        return len(self._values)

    def __len__(self) -> int:
        return self.count()

    def add(self, values: Any, silent: bool = False) -> "Attribute":
        """
        Append one or more values.

        silent=True is for bulk loads: the constructed check is skipped and
        the owner is not notified. The single-valued check always applies.
        """
        new_values = _as_list(values)

        if not silent:
            self._ensure_mutable("add")
        if self._single_valued() and self.count() + len(new_values) > 1:
            raise ConstraintViolationError(self._name)

        for v in new_values:
            self._store_at(self._next_index, v)

        if new_values and not silent:
            self._register_change()
        return self

    def remove(self, value_or_index: Any) -> "Attribute":
        """
        Remove the value at an integer index, or a value matched by
        case-insensitive string comparison.

        Matching by value only ever looks at the first value.
        """
        self._ensure_mutable("remove")

        index: Optional[int] = None
        if isinstance(value_or_index, int) and not isinstance(value_or_index, bool):
            index = value_or_index
        else:
            target = str(value_or_index).lower()
            for i, item in self._values.items():
                if str(item).lower() == target:
                    index = i
                break

        if index is not None and index in self._values:
            del self._values[index]
            self._needs_reindex = True
            self._register_change()
        return self

    def set(self, value: Any) -> "Attribute":
        """Replace all values with value (one or many)."""
        return self.clear().add(value)

    def clear(self) -> "Attribute":
        self._ensure_mutable("clear")

        self._values = {}
        self._next_index = 0
        self._needs_reindex = False
        self._register_change()
        return self

    # Indexed access

    def get_at(self, index: int) -> Any:
        return self._values.get(index)

    def set_at(self, index: int, value: Any) -> None:
        """Write value into slot index, replacing what is there."""
        self._ensure_mutable("set")
        if self._single_valued() and index not in self._values and self.count() >= 1:
            raise ConstraintViolationError(self._name)

        self._store_at(index, value)
        self._register_change()

    def unset_at(self, index: int) -> None:
        self.remove(index)

    def exists_at(self, index: int) -> bool:
        return index in self._values

    # Cursor over the raw slots; a gap left by remove() ends the walk

    def rewind(self) -> None:
        self._position = 0

    def valid(self) -> bool:
        return self._position in self._values

    def current(self) -> Any:
        return self._values.get(self._position)

    def key(self) -> int:
        return self._position

    def next(self) -> None:
        self._position += 1

    def __iter__(self) -> Iterator[Any]:
        self.rewind()
        while self.valid():
            yield self.current()
            self.next()

    # Serialization

    def json_data(self) -> List[Any]:
        return self.value()

    def to_json(self) -> str:
        return json.dumps(self.json_data(), default=str)

    def ldap_data(self) -> List[Any]:
        """Values in directory wire representation."""
        if self._converter is None:
            return self.value()
        return list(self._converter.to_ldap(self, self.value()))

    # Ownership

    def belongs_to(self, owner: Optional[AttributeOwner] = None) -> Any:
        """Return the owner when called without arguments, otherwise bind to owner."""
        if owner is None:
            return self._owner
        self._owner = owner
        return self

    def clone(self) -> "Attribute":
        """Copy with contiguous slots and no owner."""
        self._reindex()

        twin = object.__new__(type(self))
        twin.__dict__.update(self.__dict__)
        twin._values = dict(self._values)
        twin._owner = None
        twin._position = 0
        return twin

    def __copy__(self) -> "Attribute":
        return self.clone()
