"""Session management for uigen"""

from uigen.session.registry import SessionRegistry
from uigen.session.runner import SessionRunner, SessionState, TurnResult

__all__ = ["SessionRegistry", "SessionRunner", "SessionState", "TurnResult"]
