"""
trust_graph/storage/json_store.py: Credential store backed by a JSON file.

Accepts either a top-level array of credential objects or an object with a
'credentials' array (the shape of a credential sync payload). Each object may
use the cached or the sync field names; see CredentialRecord.from_dict().

The file is read in full on every call, matching the engine's batch
recomputation model.
"""

import json
import logging
import os

from trust_graph.exceptions import CredentialStoreError, MalformedCredentialError
from trust_graph.storage.base import CredentialRecord

logger = logging.getLogger(__name__)


class JsonFileCredentialStore:
    """
    Read-only credential store over a JSON file on disk.

    Args:
        path: Path to the JSON file.
    """

    def __init__(self, path: str | os.PathLike):
        self.path = os.fspath(path)

    def list_all_credentials(self) -> list[CredentialRecord]:
        """
        Load and convert every credential in the file.

        Entries that are not JSON objects are skipped with a warning; field
        level validation is left to the graph builder.

        Raises:
            CredentialStoreError: if the file is missing, unreadable, not valid
                                  JSON, or does not contain a credential array.
        """
        try:
            with open(self.path, encoding="utf-8") as fh:
                payload = json.load(fh)
        except (OSError, json.JSONDecodeError) as exc:
            raise CredentialStoreError(
                f"cannot read credentials from {self.path}: {exc}"
            ) from exc

        if isinstance(payload, dict):
            payload = payload.get("credentials")
        if not isinstance(payload, list):
            raise CredentialStoreError(
                f"{self.path} does not contain a credential array"
            )

        records: list[CredentialRecord] = []
        for index, entry in enumerate(payload):
            try:
                records.append(CredentialRecord.from_dict(entry))
            except MalformedCredentialError as exc:
                logger.warning("Skipping entry %d in %s: %s", index, self.path, exc)

        logger.debug("Loaded %d credential records from %s.", len(records), self.path)
        return records
