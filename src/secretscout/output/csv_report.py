"""CSV reporter: one row per finding."""

from __future__ import annotations

import csv
import io
from typing import List

from secretscout.findings.models import Finding

HEADER = [
    "FilePath",
    "Line Number",
    "Action",
    "Description",
    "SignatureID",
    "Finding List",
    "Repo Owner",
    "Repo Name",
    "Commit Hash",
    "Commit Message",
    "Commit Author",
    "File URL",
    "Secret ID",
    "App Version",
    "Signatures Version",
]


def _row(f: Finding) -> List[str]:
    return [
        f.file_path,
        f.line_number,
        f.action,
        f.description,
        f.signature_id,
        f.content,
        f.repository_owner,
        f.repository_name,
        f.commit_hash,
        f.commit_message,
        f.commit_author,
        f.file_url,
        f.secret_id,
        f.app_version,
        f.signatures_version,
    ]


def render(findings: List[Finding]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(HEADER)
    for f in findings:
        writer.writerow(_row(f))
    return buf.getvalue()
