"""Tests for the ignorability filter."""

from pathlib import Path

import pytest

from secretscout.config.schema import DEFAULT_SKIP_EXTENSIONS, DEFAULT_SKIP_PATHS
from secretscout.scanner import ignore as ignore_mod
from secretscout.scanner.ignore import (
    is_binary,
    is_inside,
    is_skippable,
    is_test_path,
    should_ignore,
    should_ignore_change,
)

MB = 1024 * 1024
PNG_HEADER = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR"


def check(path: Path, rel: str = None, scan_tests: bool = False, max_size: int = 10 * MB):
    return should_ignore(path, max_size, scan_tests, DEFAULT_SKIP_EXTENSIONS, DEFAULT_SKIP_PATHS, relative_path=rel)


class TestOrder:
    def test_missing(self, tmp_path):
        assert check(tmp_path / "nope.txt") == (True, "missing")

    def test_skippable_extension(self, tmp_path):
        f = tmp_path / "logo.PNG"
        f.write_bytes(PNG_HEADER)
        assert check(f, "logo.PNG") == (True, "skippable")

    def test_skippable_path(self, tmp_path):
        f = tmp_path / "node_modules" / "lib" / "index.js"
        f.parent.mkdir(parents=True)
        f.write_text("module.exports = {}\n")
        assert check(f, "node_modules/lib/index.js") == (True, "skippable")

    def test_skippable_wins_over_test_and_size(self, tmp_path):
        f = tmp_path / "test" / "big.pdf"
        f.parent.mkdir()
        f.write_bytes(b"x" * 64)
        assert check(f, "test/big.pdf", max_size=1) == (True, "skippable")

    def test_test_file(self, tmp_path):
        f = tmp_path / "tests" / "fixtures.py"
        f.parent.mkdir()
        f.write_text("KEY = 'x'\n")
        assert check(f, "tests/fixtures.py") == (True, "test file")
        assert check(f, "tests/fixtures.py", scan_tests=True) == (False, "")

    def test_too_large(self, tmp_path):
        f = tmp_path / "dump.sql"
        f.write_text("x" * 2048)
        assert check(f, "dump.sql", max_size=1024) == (True, "too large")

    def test_binary_png_regardless_of_extension(self, tmp_path):
        f = tmp_path / "notes.txt"
        f.write_bytes(PNG_HEADER + b"rest of image")
        assert check(f, "notes.txt") == (True, "binary")

    def test_text_file_passes(self, tmp_path):
        f = tmp_path / "app.py"
        f.write_text("print('hello')\n")
        assert check(f, "app.py") == (False, "")

    def test_empty_file_is_scanned(self, tmp_path):
        f = tmp_path / "empty.cfg"
        f.write_bytes(b"")
        assert check(f, "empty.cfg") == (False, "")

    def test_symlink_not_followed(self, tmp_path):
        outside = tmp_path / "credentials"
        outside.write_text("API_KEY=x\n")
        link = tmp_path / "repo" / "link.env"
        link.parent.mkdir()
        link.symlink_to(outside)
        assert check(link, "link.env") == (True, "symlink")

    def test_skipped_extension_never_opened(self, tmp_path, monkeypatch):
        f = tmp_path / "photo.jpg"
        f.write_bytes(b"\xff\xd8\xff")
        monkeypatch.setattr(ignore_mod, "is_binary", lambda head: pytest.fail("file was sniffed"))
        assert check(f, "photo.jpg") == (True, "skippable")


class TestBinarySniff:
    @pytest.mark.parametrize("head", [
        b"\x1f\x8b\x08\x00",
        b"BZh91AY",
        b"PK\x03\x04",
        b"\x89PNG",
        b"MZ\x90\x00",
        b"\x7fELF\x02",
        b"\xfe\xed\xfa\xce",
        b"\xfe\xed\xfa\xcf",
        b"\xca\xfe\xba\xbe",
    ])
    def test_magic_numbers(self, head):
        assert is_binary(head)

    @pytest.mark.parametrize("head", [b"MZ is a postal code prefix\n", b"BZh, see notes\n", b"BZhello\n"])
    def test_text_with_short_magic_prefix(self, head):
        assert not is_binary(head)

    def test_pe_header(self):
        head = b"MZ" + b"\x90" * 58 + (0x40).to_bytes(4, "little") + b"PE\x00\x00"
        assert is_binary(head)

    def test_invalid_utf8(self):
        assert is_binary(b"caf\xe9 au lait")

    def test_utf8_cut_at_boundary_is_text(self):
        assert not is_binary("héllo".encode("utf-8")[:2])

    def test_plain_text(self):
        assert not is_binary(b"API_KEY=abc\n")


class TestHeuristics:
    @pytest.mark.parametrize("path", [
        "test/config.py",
        "tests/config.py",
        "src/testdata/key.txt",
        "pkg/handler_test.go",
        "src/UserTest.java",
        "app/integration_tests/x.py",
    ])
    def test_is_test_path(self, path):
        assert is_test_path(path)

    @pytest.mark.parametrize("path", ["src/app.py", "latest/notes.md", "contest.txt", "docs/testing.md"])
    def test_not_test_path(self, path):
        assert not is_test_path(path)

    def test_clone_prefix_ignored_when_relative_given(self, tmp_path):
        root = tmp_path / "test_clone0"
        root.mkdir()
        f = root / "app.py"
        f.write_text("x = 1\n")
        assert check(f, "app.py") == (False, "")

    def test_skippable_case_insensitive(self):
        assert is_skippable("Vendor/Bundle/gem.rb", [], ["vendor/bundle"])
        assert is_skippable("IMG.JPEG", ["jpeg"], [])
        assert not is_skippable("main.go", ["jpeg"], ["vendor/bundle"])


class TestChangeVariant:
    def test_historical_text_change(self):
        assert should_ignore_change("old.env", "KEY=1", False, MB, False, DEFAULT_SKIP_EXTENSIONS, DEFAULT_SKIP_PATHS) == (False, "")

    def test_historical_binary_change(self):
        decision = should_ignore_change("blob.dat", "", True, MB, False, DEFAULT_SKIP_EXTENSIONS, DEFAULT_SKIP_PATHS)
        assert decision == (True, "binary")

    def test_historical_test_file(self):
        decision = should_ignore_change("pkg/x_test.py", "a", False, MB, False, DEFAULT_SKIP_EXTENSIONS, DEFAULT_SKIP_PATHS)
        assert decision == (True, "test file")

    def test_historical_too_large(self):
        decision = should_ignore_change("big.txt", "x" * 100, False, 10, False, [], [])
        assert decision == (True, "too large")


class TestIsInside:
    def test_regular_file(self, tmp_path):
        f = tmp_path / "repo" / "app.py"
        f.parent.mkdir()
        f.write_text("x\n")
        assert is_inside(f, tmp_path / "repo")

    def test_symlink_is_never_inside(self, tmp_path):
        root = tmp_path / "repo"
        root.mkdir()
        (root / "real.txt").write_text("x\n")
        (root / "alias.txt").symlink_to(root / "real.txt")
        assert not is_inside(root / "alias.txt", root)

    def test_symlinked_directory_escapes(self, tmp_path):
        outside = tmp_path / "home"
        outside.mkdir()
        (outside / "secret.env").write_text("x\n")
        root = tmp_path / "repo"
        root.mkdir()
        (root / "conf").symlink_to(outside)
        assert not is_inside(root / "conf" / "secret.env", root)
