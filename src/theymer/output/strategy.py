"""Write decision strategy — (FileStatus, WriteMode) → Decision."""

from __future__ import annotations

from theymer.output.models import Decision, FileStatus, WriteMode


def decide(status: FileStatus, write_mode: WriteMode) -> Decision:
    """Map a file's status under *write_mode* to what should happen to it.

    ======================  ==========  ============
    status                  NORMAL      FORCE
    ======================  ==========  ============
    NOT_TRACKED             WRITE       WRITE
    STALE                   WRITE       WRITE
    UNCHANGED               SKIP        FORCE_WRITE
    MODIFIED                CONFLICT    FORCE_WRITE
    ======================  ==========  ============
    """
    if status in (FileStatus.NOT_TRACKED, FileStatus.STALE):
        return Decision.WRITE
    if write_mode is WriteMode.FORCE:
        return Decision.FORCE_WRITE
    if status is FileStatus.UNCHANGED:
        return Decision.SKIP
    return Decision.CONFLICT
