"""
Static table configuration: columns, filters and sort direction.

A table usage is described once by a list of :class:`Column` and a list
of :class:`FilterDefinition`.  Both are immutable and are shared between
the list endpoints (which run the engine) and the CSV export.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Sequence

Record = Mapping[str, Any]
Renderer = Callable[[Any, Record], str]

# Select value meaning "no filter on this field".
ALL = '__all__'


class SortDirection(str, enum.Enum):
    ASC = 'asc'
    DESC = 'desc'

    @property
    def opposite(self) -> 'SortDirection':
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


class FilterKind(str, enum.Enum):
    """How a filter compares its selected value against a record.

    ``SCALAR`` compares the field value itself.  ``LIST`` is used for
    fields holding line items (e.g. the medicines issued during a visit)
    and matches when any sub-record's ``name`` equals the selection.
    """
    SCALAR = 'scalar'
    LIST = 'list'


@dataclass(frozen=True)
class Column:
    field: str
    label: str
    sortable: bool = False
    render: Optional[Renderer] = None

    def display(self, record: Record) -> str:
        value = record.get(self.field)
        if self.render is not None:
            return self.render(value, record)
        return '' if value is None else str(value)

    def as_dict(self) -> dict:
        return {'key': self.field, 'header': self.label, 'sortable': self.sortable}


@dataclass(frozen=True)
class FilterOption:
    value: str
    label: str


@dataclass(frozen=True)
class FilterDefinition:
    field: str
    label: str
    options: Sequence[FilterOption] = field(default_factory=tuple)
    kind: FilterKind = FilterKind.SCALAR
    # Sub-record key compared by LIST filters.
    item_key: str = 'name'

    def as_dict(self) -> dict:
        return {
            'key': self.field,
            'label': self.label,
            'kind': self.kind.value,
            'options': [{'value': o.value, 'label': o.label} for o in self.options],
        }


def options_from_values(values, labels: Optional[Mapping[str, str]] = None) -> tuple[FilterOption, ...]:
    """Build sorted, de-duplicated options from raw values, skipping blanks."""
    labels = labels or {}
    seen: dict[str, FilterOption] = {}
    for v in values:
        if v is None or str(v).strip() == '':
            continue
        key = str(v)
        if key not in seen:
            seen[key] = FilterOption(value=key, label=labels.get(key, key))
    return tuple(sorted(seen.values(), key=lambda o: o.label.casefold()))


def is_sortable(columns: Sequence[Column], key: Optional[str]) -> bool:
    if not key:
        return False
    return any(c.field == key and c.sortable for c in columns)
