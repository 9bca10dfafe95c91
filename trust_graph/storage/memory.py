"""
trust_graph/storage/memory.py: In-memory credential store.

Used by tests and by callers that already hold the credential collection.
"""

from typing import Iterable

from trust_graph.storage.base import CredentialRecord


class InMemoryCredentialStore:
    """Credential store over a fixed list of records."""

    def __init__(self, records: Iterable[CredentialRecord] = ()):
        self._records: list[CredentialRecord] = list(records)

    def add(self, record: CredentialRecord) -> None:
        self._records.append(record)

    def list_all_credentials(self) -> list[CredentialRecord]:
        # Hand out a copy so a build never observes later add() calls.
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)
