"""Chat turn infrastructure.

This module provides the pieces that turn one incoming message into a
persisted exchange:
- build_history: reshapes stored messages into model turns
- ModelInvoker: picks a model variant and gets a reply, with fallbacks
- TurnOrchestrator: validates, loads, invokes and persists a turn
"""

from athena.llm.chat.history import build_history
from athena.llm.chat.invoker import EMPTY_REPLY, UNAVAILABLE_REPLY, ModelInvoker
from athena.llm.chat.models import HistoryTurn, ModelRole, TurnResult, UploadedFile
from athena.llm.chat.orchestrator import TurnOrchestrator

__all__ = [
    "EMPTY_REPLY",
    "HistoryTurn",
    "ModelInvoker",
    "ModelRole",
    "TurnOrchestrator",
    "TurnResult",
    "UNAVAILABLE_REPLY",
    "UploadedFile",
    "build_history",
]
