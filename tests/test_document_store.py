"""
Tests for the in-memory document store: path rules, snapshot delivery,
server timestamps, merge semantics and failure injection.
"""

from datetime import datetime

import pytest

from adapters.document_store import (
    SERVER_TIMESTAMP,
    DocumentSnapshot,
    InMemoryDocumentStore,
    is_document_path,
    join_path,
    parent_path,
)
from app.exceptions import NotFoundError, PermissionDeniedError, WriteFailedError


def test_path_helpers():
    assert is_document_path("users/u1/budget/current") is True
    assert is_document_path("users/u1/meals") is False
    assert parent_path("users/u1/meals/abc") == "users/u1/meals"
    assert join_path("users", "u1", "/meals/") == "users/u1/meals"
    with pytest.raises(ValueError):
        is_document_path("///")


@pytest.mark.anyio
async def test_subscribe_delivers_initial_and_every_change(store):
    received = []
    unsubscribe = store.subscribe("users/u1/meals", received.append)
    assert received == [[]]

    doc_id = await store.add("users/u1/meals", {"name": "Pasta", "createdAt": SERVER_TIMESTAMP})
    assert len(received) == 2
    [snap] = received[-1]
    assert snap.id == doc_id
    assert isinstance(snap.data["createdAt"], datetime)

    await store.delete(f"users/u1/meals/{doc_id}")
    assert received[-1] == []

    unsubscribe()
    await store.add("users/u1/meals", {"name": "Soup"})
    assert len(received) == 3


@pytest.mark.anyio
async def test_document_listener_and_merge(store):
    received = []
    store.subscribe("users/u1/budget/current", received.append)
    assert received == [DocumentSnapshot(id="current", data=None)]

    await store.set("users/u1/budget/current", {"monthlyLimit": 100, "note": "x"})
    await store.set("users/u1/budget/current", {"monthlyLimit": 150})
    assert received[-1].data == {"monthlyLimit": 150, "note": "x"}

    await store.set("users/u1/budget/current", {"monthlyLimit": 90}, merge=False)
    assert received[-1].data == {"monthlyLimit": 90}


@pytest.mark.anyio
async def test_snapshots_are_copies(store):
    await store.set("users/u1/budget/current", {"monthlyLimit": 100})
    snap = await store.get("users/u1/budget/current")
    snap.data["monthlyLimit"] = 0
    assert (await store.get("users/u1/budget/current")).data["monthlyLimit"] == 100


@pytest.mark.anyio
async def test_users_are_isolated(store):
    await store.add("users/u1/meals", {"name": "Pasta"})
    assert await store.get("users/u2/meals") == []


@pytest.mark.anyio
async def test_delete_missing_and_bad_paths(store):
    with pytest.raises(NotFoundError):
        await store.delete("users/u1/meals/nope")
    with pytest.raises(ValueError):
        await store.add("users/u1/budget/current", {})
    with pytest.raises(ValueError):
        await store.set("users/u1/meals", {})


@pytest.mark.anyio
async def test_failure_injection(store):
    errors = []
    store.fail_reads("users/u1/meals", PermissionDeniedError("denied", path="users/u1/meals"))
    store.subscribe("users/u1/meals", lambda snaps: None, errors.append)
    assert isinstance(errors[0], PermissionDeniedError)

    store.fail_writes("users/u1/meals", WriteFailedError("boom"))
    with pytest.raises(WriteFailedError):
        await store.add("users/u1/meals", {"name": "Pasta"})

    store.clear_failures()
    await store.add("users/u1/meals", {"name": "Pasta"})
    assert len(await store.get("users/u1/meals")) == 1


def test_listener_exceptions_do_not_break_delivery():
    store = InMemoryDocumentStore()

    def broken(_):
        raise RuntimeError("listener bug")

    store.subscribe("users/u1/meals", broken)
    assert store.listener_count("users/u1/meals") == 1
