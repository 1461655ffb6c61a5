"""Observed system state data models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class LocalAccount(BaseModel):
    name: str
    enabled: bool


class OverwritePolicy(str, Enum):
    OVERWRITE_AS_NEEDED = "OverwriteAsNeeded"
    ARCHIVE_WHEN_FULL = "ArchiveWhenFull"
    DO_NOT_OVERWRITE = "DoNotOverwrite"

    @property
    def label(self) -> str:
        return {
            OverwritePolicy.OVERWRITE_AS_NEEDED: "Overwrite As Needed",
            OverwritePolicy.ARCHIVE_WHEN_FULL: "Archive When Full",
            OverwritePolicy.DO_NOT_OVERWRITE: "Do Not Overwrite",
        }[self]


class EventLogInfo(BaseModel):
    name: str
    overwrite_policy: OverwritePolicy
    max_size_bytes: int
