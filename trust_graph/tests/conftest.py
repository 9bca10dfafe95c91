"""
trust_graph/tests/conftest.py: Shared pytest fixtures for the trust graph suite.

Fixtures:
    make_record           Factory for CredentialRecord objects with sane defaults.
    worked_example        Records for org→A, org→B, A→B, B→A.
    worked_example_graph  Graph built from worked_example.
    community_records     A larger community with a disconnected island,
                          a self-claim and an unknown schema.
    community_graph       Graph built from community_records.
    build_graph           Factory building a graph from a list of records.
"""

import pytest

from trust_graph.graph.builder import TrustGraphBuilder
from trust_graph.storage.base import CredentialRecord
from trust_graph.storage.memory import InMemoryCredentialStore

ORG = "EOrg123456789TestOrg"

MEMBERSHIP = "EMatouMembershipSchemaV1"
STEWARD = "EOperationsStewardSchemaV1"
INVITATION = "EInvitationSchemaV1"
SELF_CLAIM = "ESelfClaimSchemaV1"


def _record(
    credential_id: str,
    issuer: str,
    subject: str,
    schema: str = MEMBERSHIP,
    **attributes,
) -> CredentialRecord:
    return CredentialRecord(
        credential_id=credential_id,
        schema_id=schema,
        issuer_id=issuer,
        subject_id=subject,
        attributes=attributes,
    )


def build(records, root: str = ORG):
    return TrustGraphBuilder(InMemoryCredentialStore(records), root).build()


@pytest.fixture
def org() -> str:
    return ORG


@pytest.fixture
def make_record():
    """Factory: make_record(id, issuer, subject, schema=membership, **attributes)."""
    return _record


@pytest.fixture
def worked_example() -> list[CredentialRecord]:
    """
    The canonical four-credential example:

        org ──membership──► A
        org ──steward─────► B
        A ◄──invitation──► B   (one credential each way)
    """
    return [
        _record("ESAID_A", ORG, "EUSER_A", MEMBERSHIP, role="Member",
                displayName="Alice", dt="2026-01-20T00:00:00Z"),
        _record("ESAID_B", ORG, "EUSER_B", STEWARD, role="Steward",
                displayName="Bob", dt="2026-01-21T00:00:00Z"),
        _record("ESAID_AB", "EUSER_A", "EUSER_B", INVITATION, message="Join us!",
                dt="2026-01-22T00:00:00Z"),
        _record("ESAID_BA", "EUSER_B", "EUSER_A", INVITATION, message="Thanks!",
                dt="2026-01-23T00:00:00Z"),
    ]


@pytest.fixture
def worked_example_graph(worked_example):
    return build(worked_example)


@pytest.fixture
def community_records() -> list[CredentialRecord]:
    """
    A small community:

        org → alice, org → bob            (memberships)
        alice → carol, carol → dave       (invitation chain)
        bob ⇄ carol                       (mutual invitations)
        eve ⇄ frank                       (island, never linked to org)
        erin → erin                       (self-claim only)
        org → zed                         (unknown schema → 'other')
    """
    return [
        _record("C01", ORG, "alice", MEMBERSHIP, role="Member", dt="2026-01-01T00:00:00Z"),
        _record("C02", ORG, "bob", MEMBERSHIP, role="Member", dt="2026-01-02T00:00:00Z"),
        _record("C03", "alice", "carol", INVITATION, dt="2026-01-03T00:00:00Z"),
        _record("C04", "carol", "dave", INVITATION, dt="2026-01-04T00:00:00Z"),
        _record("C05", "bob", "carol", INVITATION, dt="2026-01-05T00:00:00Z"),
        _record("C06", "carol", "bob", INVITATION, dt="2026-01-06T00:00:00Z"),
        _record("C07", "eve", "frank", INVITATION, dt="2026-01-07T00:00:00Z"),
        _record("C08", "frank", "eve", INVITATION, dt="2026-01-08T00:00:00Z"),
        _record("C09", "erin", "erin", SELF_CLAIM, displayName="Erin"),
        _record("C10", ORG, "zed", "EUnknownSchemaV1", dt="2026-01-10T00:00:00Z"),
    ]


@pytest.fixture
def community_graph(community_records):
    return build(community_records)


@pytest.fixture
def build_graph():
    """Factory: build_graph(records, root=ORG) → TrustGraph via an in-memory store."""
    return build
