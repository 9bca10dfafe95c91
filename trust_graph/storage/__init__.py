"""
trust_graph.storage: Credential-store collaborators.

Modules:
    base        CredentialRecord and the CredentialStore protocol.
    memory      InMemoryCredentialStore (tests, pre-loaded collections).
    json_store  JsonFileCredentialStore (credential export files).

The engine only ever reads through list_all_credentials(); nothing here writes.
"""

from trust_graph.storage.base import CredentialRecord, CredentialStore
from trust_graph.storage.json_store import JsonFileCredentialStore
from trust_graph.storage.memory import InMemoryCredentialStore

__all__ = [
    "CredentialRecord",
    "CredentialStore",
    "InMemoryCredentialStore",
    "JsonFileCredentialStore",
]
