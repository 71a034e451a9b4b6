"""Full deployments with real git and rsync and a scripted stand-in for the Heroku CLI."""

import os
import subprocess
import sys
from pathlib import Path

import pytest

import herunt
from herunt.results import ErrorKind
from herunt.util.shell import which

pytestmark = pytest.mark.skipif(
    sys.platform == "win32" or which("git") is None or which("rsync") is None,
    reason="needs git, rsync and a POSIX shell",
)

FAKE_HEROKU = """#!/bin/sh
case "$1" in
  --version)
    echo "heroku/8.7.1 linux-x64 node-v20.10.0"
    ;;
  info)
    if git config --get remote.heroku.url >/dev/null 2>&1; then
      echo "=== fake-app"
      exit 0
    fi
    echo " !    No app specified." >&2
    exit 1
    ;;
  create)
    git init -q --bare "$FAKE_HEROKU_REMOTE" || exit 1
    git remote add heroku "$FAKE_HEROKU_REMOTE" || exit 1
    echo "Creating fake-app... done, stack is heroku-22"
    echo "https://fake-app.herokuapp.com/ | $FAKE_HEROKU_REMOTE"
    ;;
  *)
    exit 2
    ;;
esac
"""


@pytest.fixture
def heroku_env(tmp_path, monkeypatch):
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    script = bin_dir / "heroku"
    script.write_text(FAKE_HEROKU, encoding="utf-8")
    script.chmod(0o755)
    remote = tmp_path / "remote.git"

    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("FAKE_HEROKU_REMOTE", str(remote))
    for var in ("GIT_AUTHOR", "GIT_COMMITTER"):
        monkeypatch.setenv(f"{var}_NAME", "Herunt Test")
        monkeypatch.setenv(f"{var}_EMAIL", "herunt@example.com")
    return remote


def _git(repo: Path, *args: str) -> str:
    return subprocess.run(
        ["git", *args], cwd=repo, check=True, capture_output=True, text=True
    ).stdout


def _deploy(src, dest, netrc):
    return herunt.deploy(src, dest, user="e2e", netrc_path=netrc, exclude=["*.log"])


def test_first_deployment_into_empty_dest(heroku_env, app_src, netrc, tmp_path):
    (app_src / "node_modules").mkdir()
    (app_src / "node_modules" / "dep.js").write_text("x", encoding="utf-8")
    (app_src / "debug.log").write_text("noise", encoding="utf-8")
    dest = tmp_path / "deploy"

    outcome = _deploy(app_src, dest, netrc)

    assert outcome.ok, outcome.describe()
    assert _git(dest, "rev-parse", "--show-toplevel").strip() == str(dest.resolve())
    files = sorted(p.name for p in dest.iterdir() if p.name != ".git")
    assert files == ["Procfile", "deployment-info", "index.js", "package.json"]
    assert "Deployed by e2e" in (dest / "deployment-info").read_text(encoding="utf-8")

    pushed = _git(heroku_env, "log", "--format=%s", "master")
    assert pushed.splitlines()[0] == "Herunt deployment."
    assert "Initial commit." in pushed
    assert [e.step for e in outcome.trace if e.event == "start"].count("publish") == 1


def test_redeploy_mirrors_changes_and_commits_again(heroku_env, app_src, netrc, tmp_path):
    dest = tmp_path / "deploy"
    assert _deploy(app_src, dest, netrc).ok

    (app_src / "index.js").unlink()
    (app_src / "server.js").write_text("// new\n", encoding="utf-8")
    second = _deploy(app_src, dest, netrc)

    assert second.ok, second.describe()
    assert not (dest / "index.js").exists()
    assert (dest / "server.js").exists()
    assert _git(heroku_env, "log", "--format=%s", "master").splitlines()[:2] == [
        "Herunt deployment.",
        "Herunt deployment.",
    ]


def test_redeploy_with_identical_content_still_succeeds(heroku_env, app_src, netrc, tmp_path):
    dest = tmp_path / "deploy"
    assert _deploy(app_src, dest, netrc).ok
    again = _deploy(app_src, dest, netrc)
    assert again.ok, again.describe()
    assert len(_git(heroku_env, "log", "--format=%s", "master").splitlines()) == 3


def test_missing_heroku_leaves_dest_untouched(app_src, netrc, tmp_path, monkeypatch):
    empty_bin = tmp_path / "empty-bin"
    empty_bin.mkdir()
    monkeypatch.setenv("PATH", str(empty_bin))
    dest = tmp_path / "deploy"

    outcome = _deploy(app_src, dest, netrc)

    assert outcome.kind is ErrorKind.TOOL_MISSING
    assert outcome.failed_step == "cli-present"
    assert not dest.exists()
