"""Unit tests for platform-aware path utilities."""

import os

import pytest

from pretender.platform import PlatformId
from pretender.platform import paths
from pretender.platform.context import PlatformContext


class TestSeparators:
    """Tests for separator lookups."""

    def test_follow_pretension(self, nix_host):
        nix_host.pretend_to_be(PlatformId.WINDOWS)
        assert paths.path_separator(nix_host) == ";"
        assert paths.alt_separator(nix_host) == "\\"
        assert paths.separators(nix_host) == (";", "\\")

    def test_real_platform_when_unset(self, nix_host):
        assert paths.separators(nix_host) == (":", None)

    def test_default_context_used(self, default_context):
        default_context.pretend_to_be("windows")
        assert paths.path_separator() == ";"


class TestIsAbsolute:
    """Tests for platform-aware absoluteness."""

    @pytest.mark.parametrize("path", [
        "C:\\Windows",
        "c:/temp/file.txt",
        "\\\\server\\share\\dir",
        "//server/share",
        "\\\\?\\C:\\long\\path",
    ])
    def test_windows_absolute(self, nix_host, path):
        nix_host.pretend_to_be(PlatformId.WINDOWS)
        assert paths.is_absolute(path, nix_host)

    @pytest.mark.parametrize("path", ["relative\\dir", "C:relative", "/etc/hosts", "\\\\server"])
    def test_windows_not_absolute(self, nix_host, path):
        nix_host.pretend_to_be(PlatformId.WINDOWS)
        assert not paths.is_absolute(path, nix_host)

    def test_nix_rules(self, windows_host):
        windows_host.pretend_to_be(PlatformId.NIX)
        assert paths.is_absolute("/etc/hosts", windows_host)
        assert not paths.is_absolute("C:\\Windows", windows_host)
        assert not paths.is_absolute("etc/hosts", windows_host)

    def test_accepts_path_objects(self, tmp_path):
        assert paths.is_absolute(tmp_path, PlatformContext())


class TestSearchPath:
    """Tests for PATH-style splitting and joining."""

    def test_split_windows(self, nix_host):
        nix_host.pretend_to_be(PlatformId.WINDOWS)
        assert paths.split_search_path("C:\\bin;D:\\tools;;", nix_host) == ["C:\\bin", "D:\\tools"]

    def test_split_nix(self, nix_host):
        assert paths.split_search_path("/usr/bin:/bin", nix_host) == ["/usr/bin", "/bin"]

    def test_split_empty(self, nix_host):
        assert paths.split_search_path("", nix_host) == []

    def test_join(self, nix_host):
        nix_host.pretend_to_be(PlatformId.WINDOWS)
        assert paths.join_search_path(["C:\\a", "C:\\b"], nix_host) == "C:\\a;C:\\b"
        nix_host.reset()
        assert paths.join_search_path(["/a", "/b"], nix_host) == "/a:/b"


class TestNativePaths:
    """Tests for separator conversion and joining."""

    def test_to_native_windows(self, nix_host):
        nix_host.pretend_to_be(PlatformId.WINDOWS)
        assert paths.to_native("a/b/c", nix_host) == "a\\b\\c"

    def test_to_native_nix(self, nix_host):
        assert paths.to_native("a\\b\\c", nix_host) == "a/b/c"

    def test_join_windows(self, nix_host):
        nix_host.pretend_to_be(PlatformId.WINDOWS)
        assert paths.join("C:\\data", "file.txt", context=nix_host) == "C:\\data\\file.txt"

    def test_join_nix(self, nix_host):
        assert paths.join("/data", "file.txt", context=nix_host) == "/data/file.txt"


class TestRealFilesystem:
    """Tests for helpers that must see the real platform."""

    def test_io_helpers_run_without_pretension(self, tmp_path, default_context, monkeypatch):
        default_context.pretend_to_be(PlatformId.WINDOWS)
        seen = []
        real_isdir = os.path.isdir

        def spy(path):
            seen.append(default_context.pretend_platform)
            return real_isdir(path)

        monkeypatch.setattr(os.path, "isdir", spy)
        assert paths.is_dir(tmp_path)
        assert seen == [None]
        assert default_context.is_pretending_windows()

    def test_exists_and_is_file(self, tmp_path, default_context):
        default_context.pretend_to_be(PlatformId.WINDOWS)
        target = tmp_path / "file.txt"
        target.write_text("x")
        assert paths.exists(target)
        assert paths.is_file(target)
        assert not paths.is_file(tmp_path)
        assert not paths.exists(tmp_path / "missing")

    def test_abspath_and_realpath(self, tmp_path, default_context):
        default_context.pretend_to_be(PlatformId.WINDOWS)
        assert paths.abspath(tmp_path) == os.path.abspath(tmp_path)
        assert paths.realpath(tmp_path) == os.path.realpath(tmp_path)


class TestValidateDirs:
    """Tests for directory validation against the real host."""

    def test_keeps_existing_absolute_dirs(self, tmp_path):
        ctx = PlatformContext()
        ctx.pretend_to_be(PlatformId.WINDOWS)
        first = tmp_path / "modules"
        second = tmp_path / "manifests"
        first.mkdir()
        second.mkdir()
        dirs = [str(first), "relative/dir", str(tmp_path / "missing"), str(second), str(first)]
        assert paths.validate_dirs(dirs, ctx) == [str(first), str(second)]
        assert ctx.is_pretending_windows()

    def test_pretended_windows_paths_rejected_on_nix_host(self, nix_host):
        nix_host.pretend_to_be(PlatformId.WINDOWS)
        assert paths.validate_dirs(["C:\\modules"], nix_host) == []

    def test_restores_on_error(self, nix_host):
        nix_host.pretend_to_be(PlatformId.WINDOWS)

        def broken():
            yield "/tmp"
            raise OSError("unreadable")

        with pytest.raises(OSError, match="unreadable"):
            paths.validate_dirs(broken(), nix_host)
        assert nix_host.is_pretending_windows()
