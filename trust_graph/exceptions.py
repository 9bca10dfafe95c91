"""
trust_graph/exceptions.py: Error taxonomy for the trust graph engine.

Only CredentialStoreError is meant to reach callers. Malformed records are
skipped by the builder, and unknown identifiers or empty graphs degrade to
zero-valued results.
"""


class TrustGraphError(Exception):
    """Base class for every error raised by this package."""


class CredentialStoreError(TrustGraphError):
    """The credential store could not be read. Fatal for a build."""


class MalformedCredentialError(TrustGraphError):
    """A single credential record cannot be turned into an edge."""

    def __init__(self, credential_id: str, reason: str):
        self.credential_id = credential_id
        self.reason = reason
        super().__init__(f"credential '{credential_id or '<no id>'}': {reason}")


class GraphIntegrityError(TrustGraphError):
    """An edge was added before both of its endpoint nodes."""
