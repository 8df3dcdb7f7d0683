"""
Collaborator contracts consumed by the schema cache and the attribute container.

Connections, paging, referral chasing, value conversion and object write-back
live outside this package; these protocols are the only surface it relies on.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional, Protocol, Sequence

from .enums import Operation

if TYPE_CHECKING:
    from .attribute.container import Attribute


class DirectoryObject(Protocol):
    """A schema object returned by a paged retrieval."""

    def display_name(self) -> str:
        ...

    def to_dict(self) -> Dict[str, Any]:
        ...


class PagedTask(Protocol):
    """
    Paged retrieval against one base/filter.

    run() returns the next page, or a falsy result when referral resolution
    is exhausted before the task completed.
    """

    complete: bool

    def run(self) -> Optional[Sequence[DirectoryObject]]:
        ...


class SchemaSource(Protocol):
    def schema_naming_context(self) -> str:
        ...

    def paged_task(
        self,
        *,
        operation: Operation,
        base: str,
        filter: str,
        attributes: Sequence[str],
        page_size: int,
    ) -> PagedTask:
        ...


class AttributeOwner(Protocol):
    def register_change(self, attribute: "Attribute") -> None:
        ...


class ValueConverter(Protocol):
    def from_ldap(self, attribute: "Attribute", values: List[Any]) -> List[Any]:
        ...

    def to_ldap(self, attribute: "Attribute", values: List[Any]) -> List[Any]:
        ...
