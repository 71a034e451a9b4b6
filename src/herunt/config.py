from __future__ import annotations

"""Configuration models.

CONTRACT
- Inputs: caller-supplied DeploymentConfig, optional YAML file (herunt.yaml)
- Outputs (required):
  - Immutable DeploymentContext for one pipeline run
- Invariants:
  - source_path/dest_path are absolute with the trailing separator stripped
  - exclude_patterns always contains DEFAULT_EXCLUDES
  - Environment reads ($USER, ~/.netrc) happen only in build_context()
- Failure:
  - Raises ValueError on malformed YAML, invalid schema, missing src/dest, or a bad min_cli_version
"""

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml

from .util.paths import normalize_dir

DEFAULT_EXCLUDES: frozenset[str] = frozenset(
    {
        ".git",
        ".gitignore",
        "node_modules",
        ".DS_Store",
        ".nodemonignore",
        "npm-debug.log",
    }
)

DEFAULT_MANIFESTS: tuple[str, ...] = (
    "package.json",
    "requirements.txt",
    "pyproject.toml",
    "Pipfile",
    "Gemfile",
    "composer.json",
    "go.mod",
    "pom.xml",
)

# Substrings of a .netrc that show the Heroku CLI has stored a session.
DEFAULT_AUTH_HOSTS: tuple[str, ...] = ("api.heroku.com", "git.heroku.com", "code.heroku.com")

CONFIG_FILENAMES = ("herunt.yaml", "herunt.yml", ".herunt.yaml")


@dataclass(frozen=True)
class ToolSettings:
    heroku_cmd: str = "heroku"
    git_cmd: str = "git"
    rsync_cmd: str = "rsync"
    remote: str = "heroku"
    branch: str = "master"
    min_cli_version: str = "2.39.2"
    manifest_files: tuple[str, ...] = DEFAULT_MANIFESTS
    process_file: str = "Procfile"
    marker_file: str = "deployment-info"
    auth_hosts: tuple[str, ...] = DEFAULT_AUTH_HOSTS
    initial_commit_message: str = "Initial commit."
    deploy_commit_message: str = "Herunt deployment."


@dataclass(frozen=True)
class DeploymentConfig:
    """What the caller asks for. Paths may be relative."""

    src: Path
    dest: Path
    new_app_region: str | None = None
    exclude: tuple[str, ...] = ()
    tools: ToolSettings = field(default_factory=ToolSettings)


@dataclass(frozen=True)
class DeploymentContext:
    source_path: Path
    dest_path: Path
    new_app_region: str | None
    exclude_patterns: frozenset[str]
    user: str
    netrc_path: Path
    tools: ToolSettings = field(default_factory=ToolSettings)

    def sorted_excludes(self) -> list[str]:
        return sorted(self.exclude_patterns)


def default_user() -> str:
    return os.environ.get("USER") or os.environ.get("USERNAME") or "Anon"


def default_netrc_path() -> Path:
    if os.name == "nt":
        return Path.home() / "_netrc"
    return Path.home() / ".netrc"


def build_context(
    cfg: DeploymentConfig,
    *,
    user: str | None = None,
    netrc_path: Path | None = None,
) -> DeploymentContext:
    if not str(cfg.src).strip():
        raise ValueError("A source folder (src) is required.")
    if not str(cfg.dest).strip():
        raise ValueError("A destination folder (dest) is required.")
    from .tools.parsing import parse_version  # lazy: tools imports this module

    parse_version(cfg.tools.min_cli_version)
    patterns = {p.strip() for p in cfg.exclude if p and p.strip()}
    return DeploymentContext(
        source_path=normalize_dir(cfg.src),
        dest_path=normalize_dir(cfg.dest),
        new_app_region=cfg.new_app_region or None,
        exclude_patterns=frozenset(patterns) | DEFAULT_EXCLUDES,
        user=user or default_user(),
        netrc_path=netrc_path or default_netrc_path(),
        tools=cfg.tools,
    )


CONFIG_SCHEMA = {
    "type": "object",
    "properties": {
        "src": {"type": "string", "minLength": 1},
        "dest": {"type": "string", "minLength": 1},
        "new_app_region": {"type": ["string", "null"]},
        "exclude": {"type": "array", "items": {"type": "string"}},
        "tools": {
            "type": "object",
            "properties": {
                "heroku_cmd": {"type": "string"},
                "git_cmd": {"type": "string"},
                "rsync_cmd": {"type": "string"},
                "remote": {"type": "string", "pattern": "^[A-Za-z0-9][A-Za-z0-9_.-]*$"},
                "branch": {"type": "string", "pattern": "^[A-Za-z0-9][A-Za-z0-9_./-]*$"},
                "min_cli_version": {"type": "string"},
                "manifest_files": {"type": "array", "items": {"type": "string"}, "minItems": 1},
                "process_file": {"type": "string"},
                "marker_file": {"type": "string"},
                "auth_hosts": {"type": "array", "items": {"type": "string"}, "minItems": 1},
            },
            "additionalProperties": False,
        },
    },
    "additionalProperties": False,
}


def _tool_settings(raw: dict[str, Any]) -> ToolSettings:
    base = ToolSettings()
    overrides: dict[str, Any] = {}
    for key, value in raw.items():
        if isinstance(value, list):
            value = tuple(str(v) for v in value)
        else:
            value = str(value)
        overrides[key] = value
    return replace(base, **overrides)


def load_config_file(path: Path) -> DeploymentConfig:
    """Load a herunt.yaml. Relative src/dest resolve against the file's folder."""
    import jsonschema  # lazy import

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path.name}: {e}") from e
    try:
        jsonschema.validate(instance=data, schema=CONFIG_SCHEMA)
    except jsonschema.ValidationError as e:
        raise ValueError(f"Invalid {path.name} schema: {e.message}") from e

    base = path.resolve().parent
    missing = [k for k in ("src", "dest") if k not in data]
    if missing:
        raise ValueError(f"{path.name} is missing required key(s): {', '.join(missing)}")
    return DeploymentConfig(
        src=base / Path(data["src"]).expanduser(),
        dest=base / Path(data["dest"]).expanduser(),
        new_app_region=data.get("new_app_region"),
        exclude=tuple(data.get("exclude", []) or []),
        tools=_tool_settings(data.get("tools", {}) or {}),
    )


def find_config_file(start: Path) -> Path | None:
    for name in CONFIG_FILENAMES:
        candidate = start / name
        if candidate.is_file():
            return candidate
    return None


def merge_overrides(
    cfg: DeploymentConfig | None,
    *,
    src: Path | None = None,
    dest: Path | None = None,
    new_app_region: str | None = None,
    exclude: tuple[str, ...] = (),
) -> DeploymentConfig:
    """Apply command-line values on top of a file config (or build one from scratch)."""
    if cfg is None:
        if src is None or dest is None:
            raise ValueError("Provide --src and --dest, or a herunt.yaml with src/dest.")
        return DeploymentConfig(src=src, dest=dest, new_app_region=new_app_region, exclude=exclude)
    return replace(
        cfg,
        src=src if src is not None else cfg.src,
        dest=dest if dest is not None else cfg.dest,
        new_app_region=new_app_region if new_app_region is not None else cfg.new_app_region,
        exclude=tuple(cfg.exclude) + tuple(exclude),
    )
