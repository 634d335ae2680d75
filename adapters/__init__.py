"""
Adapters package - External collaborators.
Document store backends, client-side preferences and authentication.
"""

from adapters.document_store import DocumentStore, InMemoryDocumentStore
from adapters.preference_store import (
    PreferenceStore,
    InMemoryPreferenceStore,
    JsonFilePreferenceStore,
)
from adapters.auth_provider import AuthProvider

__all__ = [
    "DocumentStore",
    "InMemoryDocumentStore",
    "PreferenceStore",
    "InMemoryPreferenceStore",
    "JsonFilePreferenceStore",
    "AuthProvider",
]
