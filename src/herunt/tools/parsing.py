"""Parsers for external tool output.

CONTRACT
- Inputs: raw stdout text from heroku / git
- Outputs: version tuples, app names, remote branch names
- Invariants:
  - Pure functions, no IO
  - Version ordering follows semver: major.minor.patch first; pre-release
    and build metadata are only consulted when the cores are equal
- Failure:
  - Raises OutputParseError (a ValueError) when the text has an unexpected shape
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering

_SEMVER_RE = re.compile(
    r"^v?(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<pre>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+(?P<build>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)
_CREATING_RE = re.compile(r"Creating\s+(?P<name>\S+?)\.\.\.\s")
# Newer CLIs print `Creating app... done, ⬢ <name>`.
_BADGE_RE = re.compile(r"done,\s+⬢\s+(?P<name>\S+)")
_INFO_HEADER_RE = re.compile(r"^===\s+(?:⬢\s+)?(?P<name>\S+)")


class OutputParseError(ValueError):
    pass


@total_ordering
@dataclass(frozen=True)
class Version:
    major: int
    minor: int
    patch: int
    prerelease: tuple[str, ...] = ()
    build: str = ""

    @property
    def core(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def __str__(self) -> str:
        s = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            s += "-" + ".".join(self.prerelease)
        if self.build:
            s += "+" + self.build
        return s

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.core == other.core and self.prerelease == other.prerelease

    def __hash__(self) -> int:
        return hash((self.core, self.prerelease))

    def __lt__(self, other: Version) -> bool:
        if self.core != other.core:
            return self.core < other.core
        return _prerelease_lt(self.prerelease, other.prerelease)


def _prerelease_key(ident: str) -> tuple[int, int | str]:
    # Numeric identifiers sort before alphanumeric ones.
    return (0, int(ident)) if ident.isdigit() else (1, ident)


def _prerelease_lt(a: tuple[str, ...], b: tuple[str, ...]) -> bool:
    if a == b:
        return False
    # A release outranks any pre-release of the same core.
    if not a:
        return False
    if not b:
        return True
    for x, y in zip(a, b):
        if x == y:
            continue
        return _prerelease_key(x) < _prerelease_key(y)
    return len(a) < len(b)


def parse_version(text: str) -> Version:
    m = _SEMVER_RE.match(text.strip())
    if not m:
        raise OutputParseError(f"Not a semantic version: {text!r}")
    pre = tuple(m.group("pre").split(".")) if m.group("pre") else ()
    return Version(
        major=int(m.group("major")),
        minor=int(m.group("minor")),
        patch=int(m.group("patch")),
        prerelease=pre,
        build=m.group("build") or "",
    )


def version_at_least(installed: str, minimum: str) -> bool:
    return parse_version(installed) >= parse_version(minimum)


def parse_cli_version(output: str) -> Version:
    """Pull the version out of `<name>/<semver> <platform-info>`.

    Only the first non-empty line is considered; some CLI releases print
    plugin or update notices after it.
    """
    line = next((ln.strip() for ln in output.splitlines() if ln.strip()), "")
    if not line:
        raise OutputParseError("Version output was empty")
    first = line.split()[0]
    name, sep, token = first.partition("/")
    if not sep or not name or not token:
        raise OutputParseError(f"Expected '<name>/<version>' but got {first!r}")
    return parse_version(token)


def parse_created_app_name(output: str) -> str:
    """App name from `heroku create` output, e.g. `Creating sushi-123... done`."""
    m = _CREATING_RE.search(output + "\n")
    if not m:
        raise OutputParseError("Could not find 'Creating <name>... ' in create output")
    name = m.group("name")
    if name == "app":
        badge = _BADGE_RE.search(output)
        if badge:
            return badge.group("name")
    return name


def parse_info_app_name(output: str) -> str | None:
    """App name from the `=== <name>` header of `heroku info`, if present."""
    for line in output.splitlines():
        m = _INFO_HEADER_RE.match(line.strip())
        if m:
            return m.group("name")
    return None


def parse_remote_branches(output: str, remote: str) -> list[str]:
    """Branch names under `remote` in `git branch -r` output.

    Symbolic entries such as `heroku/HEAD -> heroku/master` are skipped.
    """
    prefix = f"{remote}/"
    names = []
    for line in output.splitlines():
        entry = line.strip().lstrip("* ").strip()
        if not entry or "->" in entry:
            continue
        if entry.startswith(prefix):
            names.append(entry[len(prefix):])
    return names
