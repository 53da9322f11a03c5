"""GitCloner / LocalExecutor 测试"""

from __future__ import annotations

from pathlib import Path

import pytest

from aether.core.exceptions import CloneError
from aether.utils import shell
from aether.utils.git import GitCloner
from aether.utils.shell import CommandResult, LocalExecutor


class RecordingExecutor:
    def __init__(self, returncode: int = 0, stderr: str = "") -> None:
        self.result = CommandResult(returncode=returncode, stdout="", stderr=stderr)
        self.calls: list[tuple[list[str], int | None]] = []
        self.envs: list[dict[str, str] | None] = []

    def execute(self, cmd, *, cwd=".", env=None, timeout=None) -> CommandResult:
        self.calls.append((cmd, timeout))
        self.envs.append(env)
        return self.result


class TestGitCloner:
    def test_full_clone_command(self, tmp_path: Path) -> None:
        ex = RecordingExecutor()
        GitCloner(ex, timeout=30).clone("https://h/u/r.git", tmp_path)
        assert ex.calls == [(["git", "clone", "--", "https://h/u/r.git", str(tmp_path)], 30)]

    def test_shallow_clone(self, tmp_path: Path) -> None:
        ex = RecordingExecutor()
        GitCloner(ex, shallow=True).clone("u", tmp_path)
        assert ex.calls[0][0][:4] == ["git", "clone", "--depth", "1"]

    def test_failure_raises_clone_error(self, tmp_path: Path) -> None:
        ex = RecordingExecutor(returncode=128, stderr="fatal: repository not found")
        with pytest.raises(CloneError, match="rc=128") as exc_info:
            GitCloner(ex).clone("https://h/u/r.git", tmp_path)
        assert exc_info.value.url == "https://h/u/r.git"
        assert "not found" in exc_info.value.stderr

    def test_never_prompts_for_credentials(self, tmp_path: Path) -> None:
        ex = RecordingExecutor()
        GitCloner(ex).clone("u", tmp_path)
        assert ex.envs == [{"GIT_TERMINAL_PROMPT": "0"}]

    def test_long_stderr_keeps_tail(self, tmp_path: Path) -> None:
        ex = RecordingExecutor(returncode=128, stderr="x" * 1000 + "fatal: auth failed")
        with pytest.raises(CloneError) as exc_info:
            GitCloner(ex).clone("u", tmp_path)
        assert exc_info.value.stderr.endswith("fatal: auth failed")
        assert len(exc_info.value.stderr) <= 303

    def test_uses_global_executor_by_default(self, tmp_path: Path, monkeypatch) -> None:
        ex = RecordingExecutor()
        monkeypatch.setattr(shell, "_default_executor", ex)
        GitCloner().clone("u", tmp_path)
        assert len(ex.calls) == 1


class TestLocalExecutor:
    def test_success(self, tmp_path: Path) -> None:
        r = LocalExecutor().execute(["echo", "hello"], cwd=str(tmp_path))
        assert r.success
        assert "hello" in r.stdout

    def test_missing_binary(self, tmp_path: Path) -> None:
        r = LocalExecutor().execute(["definitely-not-a-command-xyz"], cwd=str(tmp_path))
        assert r.returncode == 127
        assert not r.success

    def test_set_executor(self) -> None:
        original = shell.get_executor()
        ex = RecordingExecutor()
        try:
            shell.set_executor(ex)
            assert shell.get_executor() is ex
        finally:
            shell.set_executor(original)

    def test_env_extends_current_environment(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.setenv("APM_OUTER", "kept")
        r = LocalExecutor().execute(
            ["sh", "-c", 'echo "$APM_OUTER $APM_INNER"'], cwd=str(tmp_path), env={"APM_INNER": "added"},
        )
        assert r.stdout.strip() == "kept added"
        assert r.args[0] == "sh"
