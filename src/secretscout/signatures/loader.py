"""Signature bundle loader: YAML to a filtered, compiled SignatureSet."""

from __future__ import annotations

import logging
import re
from importlib import resources
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from secretscout.signatures.models import Part, Signature, SignatureKind, SignatureSet

logger = logging.getLogger(__name__)

DEFAULT_BUNDLE = "default.yaml"

_SECTIONS = (
    ("SimpleSignatures", SignatureKind.EXACT),
    ("PatternSignatures", SignatureKind.REGEX),
    ("SafeFunctionSignatures", SignatureKind.SUPPRESSOR),
)


class SignatureError(Exception):
    """Raised when the signature bundle cannot be used for a scan."""


def _read_bundle(path: Optional[Union[str, Path]]) -> tuple[str, str]:
    """Return ``(text, source)`` for *path* or the bundled default."""
    if path is None:
        ref = resources.files("secretscout.signatures").joinpath(DEFAULT_BUNDLE)
        return ref.read_text(encoding="utf-8"), f"<bundled {DEFAULT_BUNDLE}>"
    p = Path(path)
    if not p.is_file():
        raise SignatureError(f"Signature file not found: {p}")
    try:
        return p.read_text(encoding="utf-8"), str(p)
    except (OSError, UnicodeDecodeError) as exc:
        raise SignatureError(f"Failed to read signature file {p}: {exc}") from exc


def _bundle_version(meta: Any) -> str:
    if not isinstance(meta, dict):
        return ""
    return str(meta.get("Version") or meta.get("version") or "")


_TRUE_WORDS = {"true", "yes", "on"}
_FALSE_WORDS = {"false", "no", "off"}


def _enabled(value: Any) -> bool:
    word = str(value).strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    return int(word) > 0


def _to_signature(entry: Dict[str, Any], kind: SignatureKind, source: str) -> Signature:
    sig_id = str(entry.get("signatureid") or entry.get("id") or "").strip()
    match = entry.get("match")
    if not sig_id or match is None:
        raise SignatureError(f"{source}: {kind.value} signature without signatureid or match: {entry!r}")
    try:
        part = Part.parse(entry.get("part"))
        return Signature.build(
            kind,
            part,
            str(match),
            id=sig_id,
            description=str(entry.get("description", "")),
            comment=str(entry.get("comment", "")),
            enabled=_enabled(entry.get("enable", "1")),
            confidence_level=int(entry.get("confidence-level", 3)),
            entropy=float(entry.get("entropy", 0) or 0),
        )
    except re.error as exc:
        raise SignatureError(f"{source}: signature {sig_id} has an invalid pattern: {exc}") from exc
    except (TypeError, ValueError) as exc:
        raise SignatureError(f"{source}: signature {sig_id} is malformed: {exc}") from exc


def load_signatures(
    path: Optional[Union[str, Path]] = None,
    min_confidence: int = 3,
) -> SignatureSet:
    """Load a signature bundle and keep what is enabled at *min_confidence* or above.

    Suppressors are only filtered on ``enable``; they never produce findings,
    so the confidence floor does not apply to them.
    """
    text, source = _read_bundle(path)
    try:
        # every scalar stays a string; ids are kept exactly as written
        data = yaml.load(text, Loader=yaml.BaseLoader)
    except yaml.YAMLError as exc:
        raise SignatureError(f"Failed to parse {source}: {exc}") from exc
    if not isinstance(data, dict):
        raise SignatureError(f"{source}: expected a mapping at the top level")

    detecting: List[Signature] = []
    suppressors: List[Signature] = []
    for section, kind in _SECTIONS:
        entries = data.get(section) or []
        if not isinstance(entries, list):
            raise SignatureError(f"{source}: {section} must be a list")
        for entry in entries:
            if not isinstance(entry, dict):
                raise SignatureError(f"{source}: {section} entries must be mappings")
            sig = _to_signature(entry, kind, source)
            if not sig.enabled:
                continue
            if kind is SignatureKind.SUPPRESSOR:
                suppressors.append(sig)
            elif sig.confidence_level >= min_confidence:
                detecting.append(sig)

    if not detecting:
        raise SignatureError(
            f"{source}: no enabled signatures at confidence level {min_confidence} or above"
        )

    version = _bundle_version(data.get("Meta"))
    logger.debug(
        "Loaded %d signatures and %d suppressors from %s (version %s)",
        len(detecting), len(suppressors), source, version or "unknown",
    )
    return SignatureSet(signatures=detecting, suppressors=suppressors, version=version)
