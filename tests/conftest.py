"""Shared test fixtures: signature bundles, sessions, temp git repos."""

from __future__ import annotations

import subprocess
import textwrap
from pathlib import Path
from typing import Dict, Iterable, Optional, Union

import pytest

from secretscout.config.schema import ScoutConfig
from secretscout.session.session import Session
from secretscout.signatures.loader import load_signatures

STRIPE_SECRET = "sk_live_abcdef1234567890"


def git(cwd: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args], cwd=cwd, capture_output=True, text=True, check=True,
    )
    return result.stdout


class RepoBuilder:
    """A throwaway git repository that tests commit files into."""

    def __init__(self, path: Path) -> None:
        self.path = path
        path.mkdir(parents=True, exist_ok=True)
        git(path, "init", "-q")
        git(path, "config", "user.email", "test@test.com")
        git(path, "config", "user.name", "Test")
        git(path, "config", "commit.gpgsign", "false")

    def commit(
        self,
        files: Optional[Dict[str, Union[str, bytes]]] = None,
        message: str = "change",
        delete: Iterable[str] = (),
        rename: Optional[Dict[str, str]] = None,
        symlinks: Optional[Dict[str, str]] = None,
    ) -> str:
        for rel, content in (files or {}).items():
            target = self.path / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                target.write_bytes(content)
            else:
                target.write_text(content)
            git(self.path, "add", rel)
        for rel, link_target in (symlinks or {}).items():
            (self.path / rel).symlink_to(link_target)
            git(self.path, "add", rel)
        for rel in delete:
            git(self.path, "rm", "-q", rel)
        for old, new in (rename or {}).items():
            git(self.path, "mv", old, new)
        git(self.path, "commit", "-q", "-m", message)
        return git(self.path, "rev-parse", "HEAD").strip()


@pytest.fixture
def make_repo(tmp_path: Path):
    """Factory: ``make_repo("name")`` returns a fresh RepoBuilder."""

    def _make(name: str = "project") -> RepoBuilder:
        return RepoBuilder(tmp_path / "repos" / name)

    return _make


@pytest.fixture
def tmp_git_repo(make_repo) -> RepoBuilder:
    """A repository with a single harmless commit."""
    repo = make_repo()
    repo.commit({"README.md": "# Test\n"}, message="init")
    return repo


@pytest.fixture
def signature_file(tmp_path: Path) -> Path:
    """A minimal bundle: one Stripe-style key pattern, one suppressor."""
    path = tmp_path / "signatures.yaml"
    path.write_text(textwrap.dedent("""\
        Meta:
          Version: "test-1"
        SimpleSignatures:
          - signatureid: TEST-PEM
            part: partextension
            match: .pem
            description: PEM file
            enable: 1
            confidence-level: 3
        PatternSignatures:
          - signatureid: TEST-STRIPE
            part: partcontent
            match: 'sk_live_[a-zA-Z0-9]{16,}'
            description: Stripe live key
            enable: 1
            entropy: 0
            confidence-level: 3
          - signatureid: TEST-PASSWORD
            part: partcontent
            match: 'example_password\\d+|real_password\\d+'
            description: Password literal
            enable: 1
            entropy: 0
            confidence-level: 3
        SafeFunctionSignatures:
          - signatureid: SAFE-EXAMPLE
            part: partcontent
            match: example_password
            description: Documentation placeholder
            enable: 1
    """))
    return path


@pytest.fixture
def make_session(signature_file: Path):
    """Factory: a Session over the test bundle, scan settings overridable."""

    def _make(**scan) -> Session:
        cfg = ScoutConfig()
        cfg.signatures.file = str(signature_file)
        for key, value in scan.items():
            setattr(cfg.scan, key, value)
        return Session.create(cfg, signatures=load_signatures(signature_file, cfg.scan.confidence_level))

    return _make
