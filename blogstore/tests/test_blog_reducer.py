"""Tests for the blog collection transitions: pure functions, no store."""

from datetime import datetime, timezone

from blogstore.models.blog import BlogPage, BlogPost, CollectionState
from blogstore.models.common import RequestStatus
from blogstore.store.base import Action
from blogstore.store.blog import (
    blog_reducer,
    clear_current,
    clear_error,
    create_fulfilled,
    delete_fulfilled,
    list_fulfilled,
    pending,
    rejected,
    update_fulfilled,
)

WHEN = datetime(2026, 3, 1, tzinfo=timezone.utc)


def _post(post_id: str, title: str = "A title") -> BlogPost:
    return BlogPost(
        id=post_id,
        title=title,
        content="Some content here",
        author_id="author-1",
        created_at=WHEN,
        updated_at=WHEN,
    )


def _loaded_state() -> CollectionState:
    return CollectionState(
        items=[_post("a"), _post("b"), _post("c")],
        total_count=23,
        page=2,
    )


def test_initial_state_is_empty():
    state = CollectionState()
    assert state.items == []
    assert state.current is None
    assert state.total_count == 0
    assert state.page == 1
    assert state.status is RequestStatus.IDLE
    assert state.error_message is None


def test_pending_sets_loading_and_clears_error():
    state = CollectionState(status=RequestStatus.ERROR, error_message="boom")
    new = pending(state)
    assert new.status is RequestStatus.LOADING
    assert new.loading
    assert new.error_message is None


def test_rejected_keeps_data_fields():
    before = _loaded_state().model_copy(update={"current": _post("b")})
    after = rejected(pending(before), "network down")

    assert after.status is RequestStatus.ERROR
    assert after.error_message == "network down"
    assert after.items == before.items
    assert after.total_count == before.total_count
    assert after.page == before.page
    assert after.current == before.current


def test_list_fulfilled_replaces_window():
    page = BlogPage(items=[_post("x")], total_count=11, page=2)
    new = list_fulfilled(pending(_loaded_state()), page)
    assert [p.id for p in new.items] == ["x"]
    assert new.total_count == 11
    assert new.page == 2
    assert new.status is RequestStatus.IDLE


def test_create_prepends_without_touching_total():
    new = create_fulfilled(_loaded_state(), _post("new"))
    assert [p.id for p in new.items] == ["new", "a", "b", "c"]
    assert new.total_count == 23


def test_update_replaces_in_place_and_sets_current():
    edited = _post("b", title="Edited title")
    new = update_fulfilled(_loaded_state(), edited)
    assert [p.id for p in new.items] == ["a", "b", "c"]
    assert new.items[1].title == "Edited title"
    assert new.current == edited


def test_update_of_post_not_on_page_only_sets_current():
    edited = _post("zzz")
    new = update_fulfilled(_loaded_state(), edited)
    assert [p.id for p in new.items] == ["a", "b", "c"]
    assert new.current == edited


def test_delete_filters_without_touching_total():
    new = delete_fulfilled(_loaded_state(), "b")
    assert [p.id for p in new.items] == ["a", "c"]
    assert new.total_count == 23


def test_clear_error_keeps_data():
    state = rejected(_loaded_state(), "boom")
    new = clear_error(state)
    assert new.error_message is None
    assert new.status is RequestStatus.IDLE
    assert new.items == state.items


def test_clear_error_does_not_end_a_pending_request():
    new = clear_error(pending(_loaded_state()))
    assert new.status is RequestStatus.LOADING


def test_clear_current():
    state = _loaded_state().model_copy(update={"current": _post("a")})
    assert clear_current(state).current is None


def test_reducer_routes_actions():
    state = _loaded_state()
    state = blog_reducer(state, Action("blog/delete_blog/pending"))
    assert state.loading
    state = blog_reducer(state, Action("blog/delete_blog/fulfilled", payload="a"))
    assert [p.id for p in state.items] == ["b", "c"]
    state = blog_reducer(state, Action("blog/fetch_blog/rejected", error="gone"))
    assert state.error_message == "gone"
    state = blog_reducer(state, Action("blog/clear_error"))
    assert state.error_message is None


def test_reducer_ignores_unknown_actions():
    state = _loaded_state()
    assert blog_reducer(state, Action("auth/login/pending")) is state
    assert blog_reducer(state, Action("blog/unknown/fulfilled")) is state
    assert blog_reducer(state, Action("blog/clear_everything")) is state


def test_transitions_do_not_mutate_input():
    state = _loaded_state()
    snapshot = state.model_copy(deep=True)
    create_fulfilled(state, _post("new"))
    delete_fulfilled(state, "a")
    update_fulfilled(state, _post("b", title="Other"))
    assert state == snapshot
