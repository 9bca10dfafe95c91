"""
trust_graph/storage/base.py: Credential-store contract consumed by the builder.

The store is the only blocking boundary of the engine. A store hands back the
whole credential collection in one call; the builder never filters, pages or
writes through it.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Protocol, runtime_checkable

from trust_graph.exceptions import MalformedCredentialError


@dataclass(frozen=True)
class CredentialRecord:
    """
    One raw credential as held by the credential store.

    Fields:
        credential_id: Stable credential id (SAID), used for edge traceability.
        schema_id:     Schema / kind identifier.
        issuer_id:     Issuer identifier. May be empty if only the attribute
                       block names it.
        subject_id:    Subject identifier. Same fallback as issuer_id.
        attributes:    Free-form attribute block (role, displayName, dt, ...).
        issued_at:     Issuance time if the store tracks it outside the
                       attribute block (datetime or ISO 8601 string).
    """

    credential_id: str
    schema_id: str
    issuer_id: str
    subject_id: str
    attributes: Mapping[str, Any] = field(default_factory=dict)
    issued_at: datetime | str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "CredentialRecord":
        """
        Build a record from either stored-credential JSON shape.

        Cached shape:  {id, issuerAID, subjectAID, schemaID, data}
        Sync shape:    {said, issuer, recipient, schema, data}

        Missing fields become empty strings; validating them is the decoder's
        job. Only a non-object input is rejected here.

        Raises:
            MalformedCredentialError: if data is not a mapping.
        """
        if not isinstance(data, Mapping):
            raise MalformedCredentialError("", f"record is a {type(data).__name__}, not an object")

        attributes = _first(data, "data", "attributes", "a")
        return cls(
            credential_id=str(_first(data, "id", "said", "d") or ""),
            schema_id=str(_first(data, "schemaID", "schema", "s") or ""),
            issuer_id=str(_first(data, "issuerAID", "issuer", "i") or ""),
            subject_id=str(_first(data, "subjectAID", "recipient", "subject") or ""),
            attributes=attributes if attributes is not None else {},
            issued_at=_first(data, "issuedAt", "issuanceDate"),
        )


def _first(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = data.get(key)
        if value is not None and value != "":
            return value
    return None


@runtime_checkable
class CredentialStore(Protocol):
    """Anything that can list the full credential collection."""

    def list_all_credentials(self) -> Iterable[CredentialRecord]:
        """
        Return every stored credential. One pass per build.

        Raises:
            CredentialStoreError: if the underlying storage cannot be read.
        """
        ...
