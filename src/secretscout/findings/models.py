"""Finding data model and its fingerprint."""

from __future__ import annotations

import hashlib
from dataclasses import asdict, dataclass
from typing import Any, Dict

_ID_SEPARATOR = "\x00"


def make_secret_id(repository: str, file_path: str, line_number: str, content: str) -> str:
    """Deterministic fingerprint of one secret occurrence.

    The commit is not part of it: one secret carried through many commits is
    one finding.
    """
    raw = _ID_SEPARATOR.join((repository, file_path, line_number, content))
    return hashlib.sha1(raw.encode("utf-8")).hexdigest()


def _is_web_url(url: str) -> bool:
    return url.startswith(("http://", "https://"))


@dataclass(frozen=True)
class Finding:
    """One confirmed secret occurrence with its provenance."""

    action: str
    repository_owner: str
    repository_name: str
    commit_hash: str
    commit_author: str
    commit_message: str
    file_path: str
    line_number: str
    signature_id: str
    description: str
    content: str
    secret_id: str
    signatures_version: str = ""
    app_version: str = ""
    repository_url: str = ""
    commit_url: str = ""
    file_url: str = ""

    @classmethod
    def create(
        cls,
        *,
        action: str,
        repository_owner: str,
        repository_name: str,
        repository_url: str,
        commit_hash: str,
        commit_author: str,
        commit_message: str,
        file_path: str,
        line_number: int,
        signature_id: str,
        description: str,
        content: str,
        hide_secrets: bool = False,
        signatures_version: str = "",
        app_version: str = "",
    ) -> "Finding":
        """Build a finding, computing its fingerprint and provenance URLs.

        The fingerprint always covers the real content; *hide_secrets* only
        blanks what is stored on the finding.
        """
        line = str(line_number)
        secret_id = make_secret_id(repository_name, file_path, line, content)
        commit_url = file_url = ""
        if _is_web_url(repository_url) and commit_hash:
            base = repository_url.rstrip("/")
            commit_url = f"{base}/commit/{commit_hash}"
            file_url = f"{base}/blob/{commit_hash}/{file_path}"
        return cls(
            action=action,
            repository_owner=repository_owner,
            repository_name=repository_name,
            commit_hash=commit_hash,
            commit_author=commit_author,
            commit_message=commit_message.strip(),
            file_path=file_path,
            line_number=line,
            signature_id=signature_id,
            description=description,
            content="" if hide_secrets else content,
            secret_id=secret_id,
            signatures_version=signatures_version,
            app_version=app_version,
            repository_url=repository_url,
            commit_url=commit_url,
            file_url=file_url,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
