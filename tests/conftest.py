from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

import pytest

from herunt.config import DeploymentConfig, build_context
from herunt.tools import Toolchain
from herunt.util.shell import CmdResult

Effect = Callable[[list[str], Path | None], None]


@dataclass
class _Rule:
    prefix: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str
    effect: Effect | None


@dataclass
class FakeRunner:
    """Records every command and answers from rules matched on argv prefix."""

    present: set[str] = field(default_factory=lambda: {"heroku", "git", "rsync"})
    rules: list[_Rule] = field(default_factory=list)
    calls: list[list[str]] = field(default_factory=list)
    cwds: list[Path | None] = field(default_factory=list)
    streamed: list[list[str]] = field(default_factory=list)

    def on(self, *prefix: str, returncode: int = 0, stdout: str = "", stderr: str = "", effect: Effect | None = None) -> FakeRunner:
        # Latest rule wins.
        self.rules.insert(0, _Rule(prefix, returncode, stdout, stderr, effect))
        return self

    def _respond(self, argv: list[str], cwd: Path | None) -> CmdResult:
        self.calls.append(list(argv))
        self.cwds.append(cwd)
        for rule in self.rules:
            if tuple(argv[: len(rule.prefix)]) == rule.prefix:
                if rule.effect:
                    rule.effect(argv, cwd)
                return CmdResult(" ".join(argv), rule.returncode, rule.stdout, rule.stderr)
        return CmdResult(" ".join(argv), 0)

    def which(self, cmd: str) -> str | None:
        return f"/usr/bin/{cmd}" if cmd in self.present else None

    def run(self, argv: list[str], cwd: Path | None = None) -> CmdResult:
        return self._respond(argv, cwd)

    def stream(self, argv, on_output, cwd=None) -> CmdResult:
        self.streamed.append(list(argv))
        res = self._respond(argv, cwd)
        for chunk in (res.stdout, res.stderr):
            if chunk:
                on_output(chunk)
        return res

    def invoked(self, *prefix: str) -> list[list[str]]:
        return [c for c in self.calls if tuple(c[: len(prefix)]) == prefix]

    def tools(self) -> Toolchain:
        return Toolchain(runner=self)


def healthy_runner() -> FakeRunner:
    """A toolchain where the CLI is current, an app exists, and nothing was pushed yet."""
    return (
        FakeRunner()
        .on("heroku", "--version", stdout="heroku/8.7.1 linux-x64 node-v20.10.0\n")
        .on("heroku", "info", stdout="=== sushi-123\nWeb URL: https://sushi-123.herokuapp.com/\n")
        .on("git", "branch", "-r", stdout="")
    )


@pytest.fixture
def fake_runner() -> FakeRunner:
    return healthy_runner()


@pytest.fixture
def app_src(tmp_path: Path) -> Path:
    src = tmp_path / "app"
    src.mkdir()
    (src / "package.json").write_text('{"name": "app"}\n', encoding="utf-8")
    (src / "Procfile").write_text("web: node index.js\n", encoding="utf-8")
    (src / "index.js").write_text("console.log('hi')\n", encoding="utf-8")
    return src


@pytest.fixture
def netrc(tmp_path: Path) -> Path:
    p = tmp_path / "netrc"
    p.write_text(
        "machine api.heroku.com\n  login dev@example.com\n  password secret\n", encoding="utf-8"
    )
    return p


@pytest.fixture
def make_ctx(tmp_path: Path, app_src: Path, netrc: Path):
    def _make(**overrides):
        cfg_kwargs = {"src": app_src, "dest": tmp_path / "deploy"}
        cfg_kwargs.update({k: v for k, v in overrides.items() if k in ("src", "dest", "new_app_region", "exclude", "tools")})
        return build_context(
            DeploymentConfig(**cfg_kwargs),
            user=overrides.get("user", "tester"),
            netrc_path=overrides.get("netrc_path", netrc),
        )

    return _make


@pytest.fixture
def bare_runner() -> FakeRunner:
    return FakeRunner()
