"""Deployment steps, in the order the pipeline runs them."""

from __future__ import annotations

from .base import Step
from .commit import AddAndCommit, StampMarker
from .destination import BootstrapDest, EnsureDestRepo
from .preflight import CheckCliAuth, CheckCliPresent, CheckCliVersion
from .publish import Publish
from .remote import EnsureRemoteApp, PullLatest
from .source import CheckSource
from .sync import SyncFiles


def default_steps() -> list[Step]:
    return [
        CheckCliPresent(),
        CheckCliVersion(),
        CheckCliAuth(),
        CheckSource(),
        BootstrapDest(),
        EnsureDestRepo(),
        EnsureRemoteApp(),
        PullLatest(),
        SyncFiles(),
        StampMarker(),
        AddAndCommit(),
        Publish(),
    ]


__all__ = [
    "AddAndCommit",
    "BootstrapDest",
    "CheckCliAuth",
    "CheckCliPresent",
    "CheckCliVersion",
    "CheckSource",
    "EnsureDestRepo",
    "EnsureRemoteApp",
    "Publish",
    "PullLatest",
    "StampMarker",
    "Step",
    "SyncFiles",
    "default_steps",
]
