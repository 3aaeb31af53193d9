"""
Tabular view engine used by every record list in the API.

See :mod:`clinic.tables.engine` for the search/filter/sort/paginate
pipeline and :mod:`clinic.tables.state` for the view state transitions.
"""
from .definitions import ALL, Column, FilterDefinition, FilterKind, FilterOption, SortDirection, options_from_values
from .engine import TableCounts, TablePage, apply_filters, build_page, filtered_records, paginate, search, sort_records
from .state import DEFAULT_PAGE_SIZE, SortSpec, ViewState

__all__ = [
    'ALL',
    'Column',
    'FilterDefinition',
    'FilterKind',
    'FilterOption',
    'SortDirection',
    'options_from_values',
    'TableCounts',
    'TablePage',
    'apply_filters',
    'build_page',
    'filtered_records',
    'paginate',
    'search',
    'sort_records',
    'DEFAULT_PAGE_SIZE',
    'SortSpec',
    'ViewState',
]
