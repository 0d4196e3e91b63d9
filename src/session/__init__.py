"""Session state and the controller that drives it."""

from src.session.controller import SessionController
from src.session.state import (
    SelectActivity,
    SessionState,
    SetActivities,
    SetError,
    SetGeneratedArticle,
    SetLoading,
    reduce,
)

__all__ = [
    "SelectActivity",
    "SessionController",
    "SessionState",
    "SetActivities",
    "SetError",
    "SetGeneratedArticle",
    "SetLoading",
    "reduce",
]
