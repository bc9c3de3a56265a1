"""JSON reporter."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from secretscout.findings.models import Finding
from secretscout.session.state import Stats


def stats_to_dict(stats: Stats) -> Dict[str, Any]:
    return {
        "status": stats.status.value,
        "started_at": stats.started_at.isoformat(),
        "finished_at": stats.finished_at.isoformat() if stats.finished_at else None,
        "elapsed_seconds": round(stats.elapsed_seconds, 2),
        "targets": stats.targets,
        "organizations": stats.organizations,
        "users": stats.users,
        "repositories": {
            "found": stats.repositories_found,
            "cloned": stats.repositories_cloned,
            "empty": stats.repositories_empty,
            "failed": stats.repositories_failed,
            "scanned": stats.repositories_scanned,
        },
        "commits": {
            "total": stats.commits_total,
            "scanned": stats.commits_scanned,
            "dirty": stats.commits_dirty,
        },
        "files": {
            "total": stats.files_total,
            "scanned": stats.files_scanned,
            "ignored": stats.files_ignored,
            "dirty": stats.files_dirty,
        },
        "matches_rejected": stats.matches_rejected,
        "findings": stats.findings_total,
    }


def to_dict(findings: List[Finding], stats: Stats) -> Dict[str, Any]:
    return {
        "version": "1.0",
        "total_findings": len(findings),
        "findings": [f.to_dict() for f in findings],
        "stats": stats_to_dict(stats),
    }


def render(findings: List[Finding], stats: Stats) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(findings, stats), indent=2)
