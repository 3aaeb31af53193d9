"""
Search, filter, sort and paginate an in-memory record collection.

The stages are plain functions applied in a fixed order::

    search -> column filters -> sort -> paginate

:func:`build_page` runs all four for the list endpoints and
:func:`filtered_records` stops before pagination for exports.  Nothing
here raises on odd view state: unknown sort keys are ignored, pages past
the end are empty and missing values simply do not match.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional, Sequence

from .definitions import Column, FilterDefinition, FilterKind, Record, SortDirection, is_sortable
from .state import SortSpec, ViewState


@dataclass(frozen=True)
class TableCounts:
    filtered_total: int
    start_index: int
    end_index: int
    total_pages: int


@dataclass(frozen=True)
class TablePage:
    records: list
    counts: TableCounts
    total: int
    state: ViewState

    def pagination(self) -> dict:
        return {
            'total': self.total,
            'filteredTotal': self.counts.filtered_total,
            'page': self.state.current_page,
            'pageSize': self.state.items_per_page,
            'totalPages': self.counts.total_pages,
            'startIndex': self.counts.start_index,
            'endIndex': self.counts.end_index,
        }


def _fold(value: Any) -> str:
    return as_text(value).strip().casefold()


def as_text(value: Any) -> str:
    """String form used for searching and comparing."""
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return format(value, 'f')
    return str(value)


def _is_list(value: Any) -> bool:
    return isinstance(value, (list, tuple))


# ---------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------
def _value_contains(value: Any, needle: str) -> bool:
    if value is None:
        return False
    if _is_list(value):
        for sub in value:
            if isinstance(sub, Mapping):
                if any(_value_contains(v, needle) for v in sub.values()):
                    return True
            elif _value_contains(sub, needle):
                return True
        return False
    return needle in as_text(value).casefold()


def search(records: Iterable[Record], text: str) -> list:
    # whitespace is part of the needle
    needle = (text or '').casefold()
    if not needle:
        return list(records)
    return [r for r in records if any(_value_contains(v, needle) for v in r.values())]


# ---------------------------------------------------------------------
# Column filters
# ---------------------------------------------------------------------
def _match_scalar(value: Any, selected: str) -> bool:
    if value is None or _is_list(value):
        return False
    return _fold(value) == selected


def _match_list(value: Any, selected: str, item_key: str) -> bool:
    if not _is_list(value):
        return False
    for sub in value:
        if isinstance(sub, Mapping) and sub.get(item_key) is not None and _fold(sub.get(item_key)) == selected:
            return True
    return False


def apply_filters(records: Iterable[Record], active: Mapping[str, str],
                  filters: Sequence[FilterDefinition] = ()) -> list:
    """Keep records matching every active filter (AND)."""
    result = list(records)
    by_field = {f.field: f for f in filters}
    for field_name, selected in active.items():
        definition = by_field.get(field_name)
        wanted = _fold(selected)
        if definition is not None and definition.kind is FilterKind.LIST:
            item_key = definition.item_key
            result = [r for r in result if _match_list(r.get(field_name), wanted, item_key)]
        else:
            result = [r for r in result if _match_scalar(r.get(field_name), wanted)]
    return result


# ---------------------------------------------------------------------
# Sort
# ---------------------------------------------------------------------
def sort_records(records: Sequence[Record], sort: Optional[SortSpec],
                 columns: Sequence[Column]) -> list:
    """Stable sort on one sortable column; ``None`` values go last."""
    if sort is None or not is_sortable(columns, sort.key):
        return list(records)
    key = sort.key
    present = [r for r in records if r.get(key) is not None]
    missing = [r for r in records if r.get(key) is None]
    reverse = sort.direction is SortDirection.DESC
    try:
        ordered = sorted(present, key=lambda r: r.get(key), reverse=reverse)
    except TypeError:
        # Mixed types in one column: fall back to their string form.
        ordered = sorted(present, key=lambda r: as_text(r.get(key)), reverse=reverse)
    return ordered + missing


# ---------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------
def total_pages(count: int, items_per_page: int) -> int:
    if items_per_page < 1:
        return 0
    return math.ceil(count / items_per_page)


def paginate(records: Sequence[Record], current_page: int, items_per_page: int) -> tuple[list, TableCounts]:
    count = len(records)
    start = (current_page - 1) * items_per_page
    window = list(records[start:start + items_per_page])
    if window:
        start_index, end_index = start + 1, start + len(window)
    else:
        start_index = end_index = 0
    return window, TableCounts(
        filtered_total=count,
        start_index=start_index,
        end_index=end_index,
        total_pages=total_pages(count, items_per_page),
    )


# ---------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------
def filtered_records(records: Iterable[Record], columns: Sequence[Column],
                     filters: Sequence[FilterDefinition], state: ViewState) -> list:
    """Search, filter and sort without paginating."""
    rows = search(records, state.search_text)
    rows = apply_filters(rows, state.active_filters, filters)
    return sort_records(rows, state.sort, columns)


def build_page(records: Sequence[Record], columns: Sequence[Column],
               filters: Sequence[FilterDefinition], state: ViewState) -> TablePage:
    records = list(records)
    rows = filtered_records(records, columns, filters, state)
    window, counts = paginate(rows, state.current_page, state.items_per_page)
    return TablePage(records=window, counts=counts, total=len(records), state=state)
