from __future__ import annotations

"""Environment health checks.

CONTRACT
- Inputs: ToolSettings, optional src and dest folders, Toolchain
- Outputs (required):
  - DoctorReport (ok=bool, items=[(name, status, details)])
- Invariants:
  - Checks: heroku cli presence/version/auth, git, rsync
  - src layout is checked only when a src folder is given
  - dest state is checked only when a dest folder is given
  - Does not modify system state (read-only checks)
- Failure:
  - Returns DoctorReport with ok=False if a deploy would fail preflight
"""

from dataclasses import dataclass
from pathlib import Path

from .config import ToolSettings, default_netrc_path
from .steps.preflight import check_cli_auth, check_cli_present, check_cli_version
from .steps.source import source_problems
from .tools import Toolchain
from .util.paths import normalize_dir, same_path


@dataclass(frozen=True)
class DoctorItem:
    name: str
    status: str
    details: str


@dataclass(frozen=True)
class DoctorReport:
    ok: bool
    items: list[DoctorItem]


def doctor_report(
    settings: ToolSettings | None = None,
    tools: Toolchain | None = None,
    *,
    src: Path | None = None,
    dest: Path | None = None,
    netrc_path: Path | None = None,
) -> DoctorReport:
    settings = settings or ToolSettings()
    tools = tools or Toolchain(settings=settings)
    netrc_path = netrc_path or default_netrc_path()
    items: list[DoctorItem] = []
    ok = True

    # 1. Critical: Heroku CLI, in pipeline order; later checks need the binary.
    checks = (
        ("cli-present", lambda: check_cli_present(settings, tools)),
        ("cli-version", lambda: check_cli_version(settings, tools)),
        ("cli-auth", lambda: check_cli_auth(settings, netrc_path)),
    )
    for name, check in checks:
        res = check()
        if res.ok:
            items.append(DoctorItem(name, "OK", res.detail or "-"))
            continue
        ok = False
        items.append(DoctorItem(name, "FAIL", f"{res.kind.value}: {res.message}"))
        if name == "cli-present":
            break

    # 2. Critical: binaries the pipeline shells out to
    for label, cmd in (("git binary", settings.git_cmd), ("rsync binary", settings.rsync_cmd)):
        found = tools.runner.which(cmd)
        if found:
            items.append(DoctorItem(label, "OK", found))
        else:
            ok = False
            items.append(DoctorItem(label, "FAIL", f"{cmd} not found in PATH"))

    # 3. Source layout
    if src is not None:
        src = normalize_dir(src)
        problems = source_problems(src, settings)
        if problems:
            ok = False
            items.append(DoctorItem("src folder", "FAIL", " ".join(problems)))
        else:
            items.append(DoctorItem("src folder", "OK", str(src)))

    # 4. Destination (informational: the pipeline creates what is missing)
    if dest is not None:
        dest = normalize_dir(dest)
        if not dest.exists():
            items.append(DoctorItem("dest folder", "INFO", "Missing; will be created"))
        elif not dest.is_dir():
            ok = False
            items.append(DoctorItem("dest folder", "FAIL", f"{dest} exists but isn't a folder"))
        elif tools.runner.which(settings.git_cmd):
            res = tools.git.toplevel(dest)
            if res.ok and same_path(res.stdout.strip(), dest):
                items.append(DoctorItem("dest folder", "OK", "Git repo root"))
            else:
                items.append(
                    DoctorItem("dest folder", "INFO", "Not a Git repo root; will be initialized")
                )

    return DoctorReport(ok=ok, items=items)
