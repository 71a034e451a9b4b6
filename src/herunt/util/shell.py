from __future__ import annotations

"""External process execution.

CONTRACT
- Inputs: argv list, cwd, optional env
- Outputs (required):
  - CmdResult(cmd, returncode, stdout, stderr, elapsed_s)
- Invariants:
  - Always runs with shell=False; argv is never re-split
  - Blocks until the child exits (no timeout is imposed)
  - stream_cmd() delivers output chunks as they arrive, in arrival order
- Failure:
  - Never raises on non-zero exit; caller inspects returncode
  - Missing executable -> returncode 127 with the OS error in stderr
"""

import asyncio
import codecs
import os
import subprocess
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Coroutine, Protocol, TypeVar

from loguru import logger

MISSING_EXECUTABLE_RC = 127

OutputSink = Callable[[str], None]

T = TypeVar("T")


def which(cmd: str) -> str | None:
    for p in os.environ.get("PATH", "").split(os.pathsep):
        if not p:
            continue
        candidate = Path(p) / cmd
        if candidate.is_file() and os.access(candidate, os.X_OK):
            return str(candidate)
    return None


@dataclass(frozen=True)
class CmdResult:
    cmd: str
    returncode: int
    stdout: str = ""
    stderr: str = ""
    elapsed_s: float = 0.0

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def diagnostics(self) -> str:
        """stderr if present, else stdout; trimmed for messages."""
        return (self.stderr.strip() or self.stdout.strip())


def _display(argv: list[str]) -> str:
    return subprocess.list2cmdline(argv)


def run_cmd(
    argv: list[str],
    cwd: Path | None = None,
    env: dict[str, str] | None = None,
) -> CmdResult:
    """Run a command to completion and capture its output in memory."""
    display = _display(argv)
    logger.debug(f"$ {display} (cwd={cwd})")
    start_t = time.time()
    try:
        p = subprocess.run(
            argv,
            cwd=str(cwd) if cwd else None,
            shell=False,
            env=(os.environ | env) if env else None,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
        )
        rc, out, err = p.returncode, p.stdout or "", p.stderr or ""
    except FileNotFoundError as e:
        rc, out, err = MISSING_EXECUTABLE_RC, "", f"{e}\n"
    except OSError as e:
        rc, out, err = 1, "", f"{e}\n"
    elapsed = time.time() - start_t
    logger.debug(f"exit {rc} after {elapsed:.2f}s: {display}")
    return CmdResult(cmd=display, returncode=rc, stdout=out, stderr=err, elapsed_s=elapsed)


async def _pump(stream: asyncio.StreamReader, sink: OutputSink, chunks: list[str]) -> None:
    # One decoder per pipe: a multi-byte character may straddle two reads.
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    while True:
        data = await stream.read(4096)
        text = decoder.decode(data, final=not data)
        if text:
            chunks.append(text)
            sink(text)
        if not data:
            return


async def _stream(
    argv: list[str],
    cwd: Path | None,
    env: dict[str, str] | None,
    on_output: OutputSink,
) -> tuple[int, str, str]:
    proc = await asyncio.create_subprocess_exec(
        *argv,
        cwd=str(cwd) if cwd else None,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        env=(os.environ | env) if env else None,
    )
    out: list[str] = []
    err: list[str] = []
    assert proc.stdout is not None and proc.stderr is not None
    await asyncio.gather(
        _pump(proc.stdout, on_output, out),
        _pump(proc.stderr, on_output, err),
    )
    rc = await proc.wait()
    return rc, "".join(out), "".join(err)


def _run_to_completion(coro: Coroutine[Any, Any, T]) -> T:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    # Already inside a loop (async host, notebook): asyncio.run cannot nest.
    with ThreadPoolExecutor(max_workers=1) as pool:
        return pool.submit(asyncio.run, coro).result()


def stream_cmd(
    argv: list[str],
    on_output: OutputSink,
    cwd: Path | None = None,
    env: dict[str, str] | None = None,
) -> CmdResult:
    """Run a long command, forwarding stdout and stderr to `on_output` live.

    Both pipes are read concurrently so neither can fill up and stall the
    child. Returns only after the process has exited. Safe to call from a
    thread that is already running an event loop.
    """
    display = _display(argv)
    logger.debug(f"$ {display} (cwd={cwd}, streaming)")
    start_t = time.time()
    try:
        rc, out, err = _run_to_completion(_stream(argv, cwd, env, on_output))
    except FileNotFoundError as e:
        rc, out, err = MISSING_EXECUTABLE_RC, "", f"{e}\n"
        on_output(err)
    elapsed = time.time() - start_t
    logger.debug(f"exit {rc} after {elapsed:.2f}s: {display}")
    return CmdResult(cmd=display, returncode=rc, stdout=out, stderr=err, elapsed_s=elapsed)


class CommandRunner(Protocol):
    """Seam between the pipeline and the host's processes."""

    def which(self, cmd: str) -> str | None: ...

    def run(self, argv: list[str], cwd: Path | None = None) -> CmdResult: ...

    def stream(self, argv: list[str], on_output: OutputSink, cwd: Path | None = None) -> CmdResult: ...


@dataclass
class SubprocessRunner:
    env: dict[str, str] | None = None

    def which(self, cmd: str) -> str | None:
        return which(cmd)

    def run(self, argv: list[str], cwd: Path | None = None) -> CmdResult:
        return run_cmd(argv, cwd=cwd, env=self.env)

    def stream(self, argv: list[str], on_output: OutputSink, cwd: Path | None = None) -> CmdResult:
        return stream_cmd(argv, on_output, cwd=cwd, env=self.env)


if __name__ == "__main__":
    import argparse
    import shlex
    import sys

    parser = argparse.ArgumentParser(description="Run a command the way herunt does")
    parser.add_argument("--cmd", required=True, help="Command to run")
    parser.add_argument("--cwd", default=".", help="Working directory")
    parser.add_argument("--stream", action="store_true", help="Stream output live")
    args = parser.parse_args()

    argv = shlex.split(args.cmd)
    if args.stream:
        res = stream_cmd(argv, lambda s: print(s, end="", flush=True), cwd=Path(args.cwd))
    else:
        res = run_cmd(argv, cwd=Path(args.cwd))
        print(f"Stdout: {res.stdout}")
        print(f"Stderr: {res.stderr}")
    print(f"Exit code: {res.returncode}")
    sys.exit(res.returncode)
