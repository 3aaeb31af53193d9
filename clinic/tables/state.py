"""
Caller-owned view state for a table.

``ViewState`` is a frozen snapshot of the current search text, active
filters, sort selection and page.  User actions are modelled as methods
returning a new snapshot; the engine itself never mutates it.

Any change to the search text, a filter or the sort key brings the view
back to page 1 so a stale page number is never applied to a newly
filtered collection.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping, Optional, Sequence

from .definitions import ALL, Column, SortDirection, is_sortable

DEFAULT_PAGE_SIZE = 10
PAGE_SIZE_CHOICES = (5, 10, 25, 50, 100)


@dataclass(frozen=True)
class SortSpec:
    key: str
    direction: SortDirection = SortDirection.ASC


def _clean_filters(filters: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    cleaned = {}
    for k, v in (filters or {}).items():
        if v is None:
            continue
        v = str(v)
        if v.strip() == '' or v == ALL:
            continue
        cleaned[k] = v
    return MappingProxyType(cleaned)


@dataclass(frozen=True)
class ViewState:
    search_text: str = ''
    active_filters: Mapping[str, str] = field(default_factory=dict)
    sort: Optional[SortSpec] = None
    current_page: int = 1
    items_per_page: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        object.__setattr__(self, 'search_text', self.search_text or '')
        object.__setattr__(self, 'active_filters', _clean_filters(self.active_filters))
        try:
            page = int(self.current_page)
        except (TypeError, ValueError):
            page = 1
        object.__setattr__(self, 'current_page', max(page, 1))
        try:
            size = int(self.items_per_page)
        except (TypeError, ValueError):
            size = DEFAULT_PAGE_SIZE
        object.__setattr__(self, 'items_per_page', size if size >= 1 else DEFAULT_PAGE_SIZE)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ViewState):
            return NotImplemented
        return (
            self.search_text == other.search_text
            and dict(self.active_filters) == dict(other.active_filters)
            and self.sort == other.sort
            and self.current_page == other.current_page
            and self.items_per_page == other.items_per_page
        )

    def __hash__(self) -> int:
        return hash((
            self.search_text,
            tuple(sorted(self.active_filters.items())),
            self.sort,
            self.current_page,
            self.items_per_page,
        ))

    # ------------------------------------------------------------------
    # Search / filters / sort: each resets to the first page
    # ------------------------------------------------------------------
    def with_search(self, text: str) -> 'ViewState':
        return replace(self, search_text=text or '', current_page=1)

    def with_filter(self, field_name: str, value: Optional[str]) -> 'ViewState':
        """Select ``value`` for ``field_name``; ``ALL`` or blank clears it."""
        filters = dict(self.active_filters)
        if value is None or value == ALL or str(value).strip() == '':
            filters.pop(field_name, None)
        else:
            filters[field_name] = str(value)
        return replace(self, active_filters=filters, current_page=1)

    def toggle_sort(self, key: str, columns: Sequence[Column]) -> 'ViewState':
        """Header click: asc on a new key, flip direction on the same key.

        Keys that are not sortable columns leave the state unchanged.
        """
        if not is_sortable(columns, key):
            return self
        if self.sort is not None and self.sort.key == key:
            spec = SortSpec(key, self.sort.direction.opposite)
        else:
            spec = SortSpec(key, SortDirection.ASC)
        return replace(self, sort=spec, current_page=1)

    def clear(self) -> 'ViewState':
        """Drop search, filters and sort; keep the page size."""
        return ViewState(items_per_page=self.items_per_page)

    # ------------------------------------------------------------------
    # Paging
    # ------------------------------------------------------------------
    def with_page_size(self, size: int) -> 'ViewState':
        # The current page is kept; an out-of-range page renders empty.
        return replace(self, items_per_page=size)

    def go_to_page(self, page: int) -> 'ViewState':
        return replace(self, current_page=page)

    def first_page(self) -> 'ViewState':
        return self if self.current_page == 1 else replace(self, current_page=1)

    def previous_page(self) -> 'ViewState':
        if self.current_page <= 1:
            return self
        return replace(self, current_page=self.current_page - 1)

    def next_page(self, total_pages: int) -> 'ViewState':
        if self.current_page >= total_pages:
            return self
        return replace(self, current_page=self.current_page + 1)

    def last_page(self, total_pages: int) -> 'ViewState':
        target = max(total_pages, 1)
        if self.current_page == target:
            return self
        return replace(self, current_page=target)
