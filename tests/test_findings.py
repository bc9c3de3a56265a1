"""Tests for findings, fingerprints and redaction."""

from secretscout.findings.models import Finding, make_secret_id
from secretscout.findings.redactor import redact


def _create(**overrides) -> Finding:
    kwargs = dict(
        action="Add",
        repository_owner="acme",
        repository_name="api",
        repository_url="https://github.com/acme/api",
        commit_hash="0123456789abcdef",
        commit_author="Dev <dev@acme.io>",
        commit_message="add config\n",
        file_path="conf/secret.env",
        line_number=3,
        signature_id="PS-0001",
        description="AWS access key",
        content="AKIAIOSFODNN7REAL1234",
    )
    kwargs.update(overrides)
    return Finding.create(**kwargs)


class TestSecretId:
    def test_deterministic(self):
        assert make_secret_id("api", "a.env", "1", "x") == make_secret_id("api", "a.env", "1", "x")

    def test_every_field_counts(self):
        base = make_secret_id("api", "a.env", "1", "x")
        assert base != make_secret_id("web", "a.env", "1", "x")
        assert base != make_secret_id("api", "b.env", "1", "x")
        assert base != make_secret_id("api", "a.env", "2", "x")
        assert base != make_secret_id("api", "a.env", "1", "y")

    def test_no_separator_collisions(self):
        assert make_secret_id("ab", "c", "1", "x") != make_secret_id("a", "bc", "1", "x")

    def test_commit_not_part_of_identity(self):
        assert _create(commit_hash="aaa").secret_id == _create(commit_hash="bbb").secret_id


class TestFindingCreate:
    def test_fields(self):
        f = _create()
        assert f.line_number == "3"
        assert f.commit_message == "add config"
        assert f.content == "AKIAIOSFODNN7REAL1234"

    def test_web_urls(self):
        f = _create()
        assert f.commit_url == "https://github.com/acme/api/commit/0123456789abcdef"
        assert f.file_url == "https://github.com/acme/api/blob/0123456789abcdef/conf/secret.env"

    def test_local_repository_has_no_urls(self):
        f = _create(repository_url="/home/dev/api")
        assert f.commit_url == ""
        assert f.file_url == ""

    def test_hide_secrets_blanks_content_but_keeps_identity(self):
        shown = _create()
        hidden = _create(hide_secrets=True)
        assert hidden.content == ""
        assert hidden.secret_id == shown.secret_id

    def test_to_dict(self):
        d = _create().to_dict()
        assert d["signature_id"] == "PS-0001"
        assert d["line_number"] == "3"


class TestRedact:
    def test_long_value(self):
        assert redact("ghp_Abc123xyz9") == "ghp_...z9"

    def test_short_value(self):
        assert redact("abc") == "[REDACTED]"

    def test_hidden(self):
        assert redact("") == "[HIDDEN]"
