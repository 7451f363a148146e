"""Reality Stamp - content provenance engine.

Fingerprints user content, binds it to a certificate once enough human
input entropy has been collected, and re-verifies posts against their
original fingerprint to detect tampering.
"""

__version__ = "0.1.0"
