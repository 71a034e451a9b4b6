"""Wrappers around the external tools the pipeline drives."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..config import ToolSettings
from ..util.shell import CommandRunner, SubprocessRunner
from .git import Git
from .heroku import HerokuCli
from .rsync import Rsync


@dataclass
class Toolchain:
    """The git, heroku and rsync wrappers sharing one CommandRunner."""

    settings: ToolSettings = field(default_factory=ToolSettings)
    runner: CommandRunner = field(default_factory=SubprocessRunner)

    @property
    def git(self) -> Git:
        return Git(self.runner, self.settings.git_cmd)

    @property
    def heroku(self) -> HerokuCli:
        return HerokuCli(self.runner, self.settings.heroku_cmd)

    @property
    def rsync(self) -> Rsync:
        return Rsync(self.runner, self.settings.rsync_cmd)


__all__ = ["Git", "HerokuCli", "Rsync", "Toolchain"]
