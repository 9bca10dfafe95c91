"""
trust_graph/graph/credentials.py: Schema-aware credential decoding.

Credential payloads are heterogeneous: every schema carries a different
attribute block. Rather than probing fields ad hoc inside the builder, each
record is decoded once into a typed variant:

    schema id ──► EdgeType ──► variant class
    membership schema       MembershipCredential  (community, status, permissions)
    steward / role schema   StewardCredential     (permissions)
    invitation schema       InvitationCredential  (message)
    self-claim schema       SelfClaimCredential
    anything else           OtherCredential       (original schema id kept)

_VARIANTS maps every EdgeType member to exactly one class, so adding an edge
type without a decoder fails the registry test rather than silently falling
through.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, ClassVar

from trust_graph.exceptions import MalformedCredentialError
from trust_graph.graph.model import EdgeType
from trust_graph.storage.base import CredentialRecord

logger = logging.getLogger(__name__)


# Known schema identifiers plus plain kind names accepted from hand-written
# exports. Lookup is exact first, then case-insensitive.
SCHEMA_EDGE_TYPES: dict[str, EdgeType] = {
    "EMatouMembershipSchemaV1": EdgeType.MEMBERSHIP,
    "EOperationsStewardSchemaV1": EdgeType.STEWARD,
    "EInvitationSchemaV1": EdgeType.INVITATION,
    "ESelfClaimSchemaV1": EdgeType.SELF_CLAIM,
    "membership": EdgeType.MEMBERSHIP,
    "steward": EdgeType.STEWARD,
    "role": EdgeType.STEWARD,
    "invitation": EdgeType.INVITATION,
    "self_claim": EdgeType.SELF_CLAIM,
    "self-claim": EdgeType.SELF_CLAIM,
}

_SCHEMA_EDGE_TYPES_LOWER = {k.lower(): v for k, v in SCHEMA_EDGE_TYPES.items()}

# Attribute keys probed, in order, for the issuance timestamp.
TIMESTAMP_KEYS = ("dt", "issuedAt", "issuanceDate", "joinedAt", "timestamp")


def resolve_edge_type(schema_id: str) -> EdgeType:
    """Map a schema identifier to its edge type; unknown schemas map to OTHER."""
    if not schema_id or not isinstance(schema_id, str):
        return EdgeType.OTHER
    edge_type = SCHEMA_EDGE_TYPES.get(schema_id)
    if edge_type is None:
        edge_type = _SCHEMA_EDGE_TYPES_LOWER.get(schema_id.lower(), EdgeType.OTHER)
    return edge_type


def parse_timestamp(value: Any) -> datetime | None:
    """
    Coerce a timestamp hint to an aware UTC datetime.

    Accepts datetimes (naive ones are taken as UTC), ISO 8601 strings with or
    without a trailing 'Z', and epoch seconds. Anything else yields None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            logger.debug("Unparseable timestamp %r ignored.", value)
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


# ── Variants ──────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class DecodedCredential:
    """
    Fields common to every credential variant.

    Fields:
        credential_id: Originating credential id.
        issuer:        Resolved issuer identifier (never empty).
        subject:       Resolved subject identifier (never empty).
        issued_at:     Issuance time, or None if the record carries none.
        role:          Role hint for the subject, if present.
        display_name:  Display-name hint for the subject, if present.
    """

    edge_type: ClassVar[EdgeType]

    credential_id: str
    issuer: str
    subject: str
    issued_at: datetime | None
    role: str | None
    display_name: str | None

    @classmethod
    def variant_fields(cls, record: CredentialRecord, attributes: Mapping[str, Any]) -> dict:
        """Schema-specific fields extracted from the attribute block."""
        return {}


@dataclass(frozen=True)
class MembershipCredential(DecodedCredential):
    edge_type: ClassVar[EdgeType] = EdgeType.MEMBERSHIP

    community_name: str | None = None
    verification_status: str | None = None
    permissions: tuple[str, ...] = ()

    @classmethod
    def variant_fields(cls, record, attributes):
        return {
            "community_name": _text(attributes, "communityName"),
            "verification_status": _text(attributes, "verificationStatus"),
            "permissions": _strings(attributes.get("permissions")),
        }


@dataclass(frozen=True)
class StewardCredential(DecodedCredential):
    edge_type: ClassVar[EdgeType] = EdgeType.STEWARD

    permissions: tuple[str, ...] = ()

    @classmethod
    def variant_fields(cls, record, attributes):
        return {"permissions": _strings(attributes.get("permissions"))}


@dataclass(frozen=True)
class InvitationCredential(DecodedCredential):
    edge_type: ClassVar[EdgeType] = EdgeType.INVITATION

    message: str | None = None

    @classmethod
    def variant_fields(cls, record, attributes):
        return {"message": _text(attributes, "message")}


@dataclass(frozen=True)
class SelfClaimCredential(DecodedCredential):
    edge_type: ClassVar[EdgeType] = EdgeType.SELF_CLAIM


@dataclass(frozen=True)
class OtherCredential(DecodedCredential):
    edge_type: ClassVar[EdgeType] = EdgeType.OTHER

    schema_id: str = ""

    @classmethod
    def variant_fields(cls, record, attributes):
        return {"schema_id": record.schema_id or ""}


_VARIANTS: dict[EdgeType, type[DecodedCredential]] = {
    EdgeType.MEMBERSHIP: MembershipCredential,
    EdgeType.STEWARD: StewardCredential,
    EdgeType.INVITATION: InvitationCredential,
    EdgeType.SELF_CLAIM: SelfClaimCredential,
    EdgeType.OTHER: OtherCredential,
}


# ── Decoder ───────────────────────────────────────────────────────────────────

def decode_credential(record: CredentialRecord | Mapping[str, Any]) -> DecodedCredential:
    """
    Decode one stored credential into its typed variant.

    Resolution rules:
        - issuer:  record.issuer_id, else attributes['issuer'].
        - subject: record.subject_id, else attributes 'i' / 'subject' / 'recipient'.
                   Self-claims without a subject are about their issuer.
        - issued_at: first parseable attribute in TIMESTAMP_KEYS, else
                   record.issued_at, else None.
        - role / display name: attributes 'role' and 'displayName' / 'name'.

    Args:
        record: A CredentialRecord, or a raw mapping in either stored JSON shape.

    Returns:
        The matching DecodedCredential subclass instance.

    Raises:
        MalformedCredentialError: if the record has no id, an id or schema
                                  field is not a string, its attribute block
                                  is not a mapping, or the issuer or subject
                                  cannot be resolved.
    """
    if isinstance(record, Mapping):
        record = CredentialRecord.from_dict(record)
    elif not isinstance(record, CredentialRecord):
        raise MalformedCredentialError("", f"unsupported record type {type(record).__name__}")

    if record.credential_id is not None and not isinstance(record.credential_id, str):
        raise MalformedCredentialError(
            str(record.credential_id),
            f"credential id is a {type(record.credential_id).__name__}, not a string",
        )
    credential_id = (record.credential_id or "").strip()
    if not credential_id:
        raise MalformedCredentialError("", "missing credential id")

    attributes = record.attributes if record.attributes is not None else {}
    if not isinstance(attributes, Mapping):
        raise MalformedCredentialError(credential_id, "attribute block is not an object")

    schema_id = _field(record.schema_id, credential_id, "schema id")
    edge_type = resolve_edge_type(schema_id)

    issuer = _field(record.issuer_id, credential_id, "issuer id") or _text(attributes, "issuer")
    subject = _field(record.subject_id, credential_id, "subject id") or _text(
        attributes, "i", "subject", "recipient"
    )
    if edge_type is EdgeType.SELF_CLAIM and not subject:
        subject = issuer

    if not issuer:
        raise MalformedCredentialError(credential_id, "no resolvable issuer id")
    if not subject:
        raise MalformedCredentialError(credential_id, "no resolvable subject id")

    variant = _VARIANTS[edge_type]
    return variant(
        credential_id=credential_id,
        issuer=issuer,
        subject=subject,
        issued_at=_issued_at(record, attributes),
        role=_text(attributes, "role"),
        display_name=_text(attributes, "displayName", "name"),
        **variant.variant_fields(record, attributes),
    )


def _issued_at(record: CredentialRecord, attributes: Mapping[str, Any]) -> datetime | None:
    for key in TIMESTAMP_KEYS:
        parsed = parse_timestamp(attributes.get(key))
        if parsed is not None:
            return parsed
    return parse_timestamp(record.issued_at)


def _field(value: Any, credential_id: str, label: str) -> str:
    """Stripped string value of a record field; None reads as empty."""
    if value is None:
        return ""
    if not isinstance(value, str):
        raise MalformedCredentialError(
            credential_id, f"{label} is a {type(value).__name__}, not a string"
        )
    return value.strip()


def _text(attributes: Mapping[str, Any], *keys: str) -> str | None:
    """First non-blank string value among keys; non-string values are ignored."""
    for key in keys:
        value = attributes.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _strings(value: Any) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(str(v) for v in value if isinstance(v, str))
