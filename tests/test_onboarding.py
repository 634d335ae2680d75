"""
Tests for the onboarding checklist.

The completed flag is written exactly once: automatically when budget, meal
and ingredient steps are all done, or when the user skips.
"""

import pytest

from app.exceptions import StoreUnavailableError, WriteFailedError
from services.onboarding_tracker import OnboardingTracker
from test_fixtures import user_path

pytestmark = pytest.mark.anyio


class CountingStore:
    """Wraps a store and counts set() calls"""

    def __init__(self, inner):
        self.inner = inner
        self.writes = []

    def subscribe(self, path, on_next, on_error=None):
        return self.inner.subscribe(path, on_next, on_error)

    async def set(self, doc_path, data, merge=True):
        self.writes.append((doc_path, data, merge))
        await self.inner.set(doc_path, data, merge=merge)


async def test_completed_unknown_until_first_snapshot(store):
    tracker = OnboardingTracker(store)
    assert tracker.completed is None
    assert tracker.show_overlay is False


async def test_new_user_sees_overlay_with_steps(store, user_id):
    tracker = OnboardingTracker(store).open(user_id)
    assert tracker.completed is False
    assert tracker.show_overlay is True

    steps = tracker.steps(True, False, False)
    assert [(s.key, s.done, s.href) for s in steps] == [
        ("budget", True, "/budget"),
        ("meal", False, "/meals"),
        ("ingredient", False, "/ingredients"),
    ]
    assert steps[0].label == "Set your monthly budget"


async def test_auto_complete_writes_exactly_once(store, user_id):
    counting = CountingStore(store)
    tracker = OnboardingTracker(counting).open(user_id)

    assert await tracker.evaluate(True, True, False) is False
    assert await tracker.evaluate(True, True, True) is True
    assert await tracker.evaluate(True, True, True) is False
    assert await tracker.evaluate(True, True, True) is False

    assert counting.writes == [(user_path(user_id, "preferences", "onboarding"), {"completed": True}, True)]
    assert tracker.completed is True
    assert tracker.show_overlay is False


async def test_already_completed_never_writes(store, user_id):
    await store.set(user_path(user_id, "preferences", "onboarding"), {"completed": True})
    counting = CountingStore(store)
    tracker = OnboardingTracker(counting).open(user_id)
    assert tracker.completed is True
    assert await tracker.evaluate(True, True, True) is False
    assert counting.writes == []


async def test_skip_hides_overlay(store, user_id):
    tracker = OnboardingTracker(store).open(user_id)
    assert await tracker.skip() is True
    assert tracker.skipped is True
    assert tracker.show_overlay is False
    doc = await store.get(user_path(user_id, "preferences", "onboarding"))
    assert doc.data == {"completed": True}


async def test_failed_skip_keeps_overlay(store, user_id):
    path = user_path(user_id, "preferences", "onboarding")
    tracker = OnboardingTracker(store).open(user_id)
    store.fail_writes(path, WriteFailedError("nope", path=path))
    assert await tracker.skip() is False
    assert tracker.skipped is False
    assert tracker.show_overlay is True
    assert tracker.saving is False


async def test_listener_error_reads_as_not_completed(store, user_id):
    await store.set(user_path(user_id, "preferences", "onboarding"), {"completed": True})
    tracker = OnboardingTracker(store).open(user_id)
    store.emit_error(user_path(user_id, "preferences", "onboarding"), StoreUnavailableError("offline"))
    assert tracker.completed is False
    assert tracker.show_overlay is True
