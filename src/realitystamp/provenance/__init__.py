"""Provenance engine: entropy gate, fingerprints, certificates, verification."""

from __future__ import annotations

from realitystamp.provenance.certificate import CertificateIssuer, ProvenanceCertificate
from realitystamp.provenance.entropy import EntropyCollector, EntropyState
from realitystamp.provenance.fingerprint import fingerprint, truncate_fingerprint
from realitystamp.provenance.session import SessionEvents, SigningSession
from realitystamp.provenance.verifier import TrustVerdict, VerificationEngine, VerificationReport

__all__ = [
    "CertificateIssuer",
    "ProvenanceCertificate",
    "EntropyCollector",
    "EntropyState",
    "fingerprint",
    "truncate_fingerprint",
    "SessionEvents",
    "SigningSession",
    "TrustVerdict",
    "VerificationEngine",
    "VerificationReport",
]
