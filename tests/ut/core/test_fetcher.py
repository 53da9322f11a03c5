"""SourceFetcher 测试 — 暂存目录、覆盖语义、失败清理"""

from __future__ import annotations

from pathlib import Path

import pytest

from aether.core.exceptions import FetchError
from aether.core.fetcher import SourceFetcher, normalize_repo_url


class TestNormalize:
    @pytest.mark.parametrize(
        ("ref", "url"),
        [
            ("user/repo", "https://github.com/user/repo.git"),
            ("https://example.com/x/y.git", "https://example.com/x/y.git"),
            ("git@github.com:user/repo.git", "git@github.com:user/repo.git"),
        ],
    )
    def test_expand(self, ref: str, url: str) -> None:
        assert normalize_repo_url(ref) == url

    def test_custom_host(self) -> None:
        assert normalize_repo_url("u/r", "https://git.local/") == "https://git.local/u/r.git"

    def test_empty_rejected(self) -> None:
        with pytest.raises(FetchError, match="仓库地址为空"):
            normalize_repo_url("  ")


class TestFetch:
    def test_success_copies_tree_and_returns_manifest(
        self, fetcher: SourceFetcher, cloner, tmp_path: Path,
    ) -> None:
        cloner.add_repo(
            "u/a", {"name": "a", "version": "1.0.0", "dependencies": {"b": "2.0.0"}},
            files={"src/index.js": "// a"},
        )
        dest = tmp_path / "out" / "a"
        manifest = fetcher.fetch("u/a", dest)

        assert manifest.name == "a"
        assert manifest.version == "1.0.0"
        assert manifest.dependencies == {"b": "2.0.0"}
        assert (dest / "src" / "index.js").read_text() == "// a"
        assert cloner.calls == ["https://github.com/u/a.git"]

    def test_staging_removed_on_success(self, fetcher: SourceFetcher, cloner, tmp_path: Path) -> None:
        cloner.add_repo("u/a", {"name": "a", "version": "1.0.0"})
        fetcher.fetch("u/a", tmp_path / "dest")
        assert list(fetcher.temp_dir.iterdir()) == []

    def test_reinstall_replaces_not_merges(
        self, fetcher: SourceFetcher, cloner, tmp_path: Path,
    ) -> None:
        dest = tmp_path / "dest"
        dest.mkdir()
        (dest / "stale.txt").write_text("old")
        (dest / "olddir").mkdir()
        cloner.add_repo("u/a", {"name": "a", "version": "2.0.0"}, files={"new.txt": "new"})

        fetcher.fetch("u/a", dest)
        assert not (dest / "stale.txt").exists()
        assert not (dest / "olddir").exists()
        assert (dest / "new.txt").exists()

    def test_clone_failure_leaves_no_staging(
        self, fetcher: SourceFetcher, tmp_path: Path,
    ) -> None:
        dest = tmp_path / "dest"
        with pytest.raises(FetchError, match="git clone 失败"):
            fetcher.fetch("u/missing", dest)
        assert list(fetcher.temp_dir.iterdir()) == []
        assert not dest.exists()

    def test_missing_manifest_fails_and_keeps_destination(
        self, fetcher: SourceFetcher, cloner, tmp_path: Path,
    ) -> None:
        dest = tmp_path / "dest"
        dest.mkdir()
        (dest / "keep.txt").write_text("x")
        cloner.add_repo("u/a", None, files={"README.md": "no manifest"})

        with pytest.raises(FetchError, match="package.aether.json"):
            fetcher.fetch("u/a", dest)
        assert (dest / "keep.txt").exists()
        assert list(fetcher.temp_dir.iterdir()) == []

    def test_malformed_manifest_fails(self, fetcher: SourceFetcher, cloner, tmp_path: Path) -> None:
        url = cloner.add_repo("u/a", None)
        cloner.repos[url]["package.aether.json"] = "{bad"
        with pytest.raises(FetchError):
            fetcher.fetch("u/a", tmp_path / "dest")

    def test_manifest_without_version_fails(
        self, fetcher: SourceFetcher, cloner, tmp_path: Path,
    ) -> None:
        cloner.add_repo("u/a", {"name": "a"})
        with pytest.raises(FetchError, match="version"):
            fetcher.fetch("u/a", tmp_path / "dest")

    def test_staging_names_unique(self, fetcher: SourceFetcher) -> None:
        names = {fetcher._staging_dir().name for _ in range(50)}
        assert len(names) == 50

    def test_cleanup_failure_is_swallowed(
        self, fetcher: SourceFetcher, cloner, tmp_path: Path, monkeypatch, caplog,
    ) -> None:
        cloner.add_repo("u/a", {"name": "a", "version": "1.0.0"})

        def _boom(path: Path) -> None:
            raise OSError("busy")

        monkeypatch.setattr("aether.core.fetcher.remove_tree", _boom)
        manifest = fetcher.fetch("u/a", tmp_path / "dest")
        assert manifest.version == "1.0.0"
        assert "清理临时目录失败" in caplog.text

    def test_cleanup_failure_does_not_mask_primary_error(
        self, fetcher: SourceFetcher, tmp_path: Path, monkeypatch,
    ) -> None:
        def _boom(path: Path) -> None:
            raise OSError("busy")

        monkeypatch.setattr("aether.core.fetcher.remove_tree", _boom)
        with pytest.raises(FetchError, match="git clone 失败"):
            fetcher.fetch("u/missing", tmp_path / "dest")
