"""Secret value redaction for safe output."""

from __future__ import annotations


def redact(value: str) -> str:
    """Partial reveal for terminal tables: first 4 + last 2 chars.

    Example: ``ghp_Abc123xyz9`` → ``ghp_...z9``. Hidden secrets stay hidden.
    """
    if not value:
        return "[HIDDEN]"
    if len(value) <= 6:
        return "[REDACTED]"
    return f"{value[:4]}...{value[-2:]}"
