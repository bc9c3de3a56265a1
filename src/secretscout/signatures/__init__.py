"""Signature model and bundle loading."""

from secretscout.signatures.loader import SignatureError, load_signatures
from secretscout.signatures.models import Part, Signature, SignatureKind, SignatureSet

__all__ = [
    "Part",
    "Signature",
    "SignatureError",
    "SignatureKind",
    "SignatureSet",
    "load_signatures",
]
