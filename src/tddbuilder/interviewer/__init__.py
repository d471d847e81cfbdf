"""Interviewer implementations for putting questions to the user."""

from tddbuilder.interviewer.base import Interviewer
from tddbuilder.interviewer.callback import CallbackInterviewer
from tddbuilder.interviewer.console import ConsoleInterviewer
from tddbuilder.interviewer.recording import QAPair, RecordingInterviewer
from tddbuilder.interviewer.scripted import ScriptedInterviewer

__all__ = [
    "Interviewer",
    "CallbackInterviewer",
    "ConsoleInterviewer",
    "QAPair",
    "RecordingInterviewer",
    "ScriptedInterviewer",
]
