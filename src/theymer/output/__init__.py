"""File statuses, write decisions, formatting, and run reports."""

from theymer.output.models import Action, Decision, FileStatus, RenderReport, WriteMode
from theymer.output.strategy import decide

__all__ = ["Action", "Decision", "FileStatus", "RenderReport", "WriteMode", "decide"]
