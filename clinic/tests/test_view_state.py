from dataclasses import FrozenInstanceError

import pytest

from clinic.tables import ALL, Column, SortDirection, SortSpec, ViewState
from clinic.tables.state import DEFAULT_PAGE_SIZE

COLUMNS = [
    Column('name', 'Name', sortable=True),
    Column('date', 'Date', sortable=True),
    Column('notes', 'Notes'),
]


def test_defaults():
    state = ViewState()
    assert state.search_text == ''
    assert dict(state.active_filters) == {}
    assert state.sort is None
    assert state.current_page == 1
    assert state.items_per_page == DEFAULT_PAGE_SIZE == 10


@pytest.mark.parametrize('page, expected', [(0, 1), (-3, 1), ('x', 1), (4, 4)])
def test_page_is_sanitized(page, expected):
    assert ViewState(current_page=page).current_page == expected


@pytest.mark.parametrize('size, expected', [(0, 10), (-1, 10), (None, 10), (25, 25)])
def test_page_size_is_sanitized(size, expected):
    assert ViewState(items_per_page=size).items_per_page == expected


def test_toggle_sort_alternates_direction():
    state = ViewState()
    state = state.toggle_sort('name', COLUMNS)
    assert state.sort == SortSpec('name', SortDirection.ASC)
    state = state.toggle_sort('name', COLUMNS)
    assert state.sort == SortSpec('name', SortDirection.DESC)
    state = state.toggle_sort('name', COLUMNS)
    assert state.sort == SortSpec('name', SortDirection.ASC)


def test_toggle_new_key_starts_ascending():
    state = ViewState().toggle_sort('name', COLUMNS).toggle_sort('name', COLUMNS)
    state = state.toggle_sort('date', COLUMNS)
    assert state.sort == SortSpec('date', SortDirection.ASC)


def test_toggle_unsortable_key_leaves_state_alone():
    state = ViewState(current_page=3)
    assert state.toggle_sort('notes', COLUMNS) is state
    assert state.toggle_sort('missing', COLUMNS) is state


@pytest.mark.parametrize('change', [
    lambda s: s.with_search('abc'),
    lambda s: s.with_filter('name', 'Ana'),
    lambda s: s.with_filter('name', ALL),
    lambda s: s.toggle_sort('date', COLUMNS),
])
def test_search_filter_and_sort_changes_reset_page(change):
    state = ViewState(current_page=4)
    assert change(state).current_page == 1


def test_page_size_change_keeps_page():
    state = ViewState(current_page=3, items_per_page=10).with_page_size(50)
    assert state.current_page == 3
    assert state.items_per_page == 50


def test_with_filter_all_or_blank_clears():
    state = ViewState().with_filter('client', 'Acme')
    assert dict(state.active_filters) == {'client': 'Acme'}
    assert dict(state.with_filter('client', ALL).active_filters) == {}
    assert dict(state.with_filter('client', '  ').active_filters) == {}


def test_clear_keeps_page_size_only():
    state = ViewState(search_text='x', active_filters={'a': 'b'}, sort=SortSpec('name'),
                      current_page=5, items_per_page=25)
    assert state.clear() == ViewState(items_per_page=25)


def test_navigation_is_noop_at_boundaries():
    first = ViewState()
    assert first.first_page() is first
    assert first.previous_page() is first
    last = ViewState(current_page=3)
    assert last.next_page(3) is last
    assert last.last_page(3) is last


def test_navigation_moves():
    state = ViewState()
    state = state.next_page(3)
    assert state.current_page == 2
    state = state.last_page(3)
    assert state.current_page == 3
    state = state.previous_page()
    assert state.current_page == 2
    assert state.first_page().current_page == 1


def test_state_is_immutable_and_hashable():
    state = ViewState(active_filters={'a': 'b'})
    with pytest.raises(FrozenInstanceError):
        state.current_page = 2
    with pytest.raises(TypeError):
        state.active_filters['c'] = 'd'
    assert hash(state) == hash(ViewState(active_filters={'a': 'b'}))
