from .artifacts import ArtifactRecorder
from .browser import BrowserSessionDriver, login
from .types import SessionDriver, SessionError, SessionTiming

__all__ = [
    "ArtifactRecorder",
    "BrowserSessionDriver",
    "login",
    "SessionDriver",
    "SessionError",
    "SessionTiming",
]
