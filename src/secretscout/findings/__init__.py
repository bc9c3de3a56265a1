"""Finding model, fingerprinting, and redaction."""

from secretscout.findings.models import Finding, make_secret_id
from secretscout.findings.redactor import redact

__all__ = ["Finding", "make_secret_id", "redact"]
