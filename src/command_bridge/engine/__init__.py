"""Request orchestration and command execution engine.

Exports:
    AbbreviationExpander: Appends expansion hints for short forms.
    ContextSnapshotBuilder: Renders the per-request server snapshot.
    ConversationStore: Bounded per-actor history.
    ResponseParser: MSG/CMD/DELAY reply parser.
    CommandFeedbackLedger: Learned success/failure counters.
    Attempt: One provider round-trip for a request.
    RetryTable: Pending retries per (actor, request).
    CommandExecutionSupervisor: Dispatch, classification and retries.
    RequestOrchestrator: Per-request pipeline.
"""

from __future__ import annotations

from command_bridge.engine.abbreviations import ABBREVIATIONS, AbbreviationExpander
from command_bridge.engine.context import ContextSnapshotBuilder, PluginInventory
from command_bridge.engine.history import ConversationStore
from command_bridge.engine.ledger import CommandFeedback, CommandFeedbackLedger, base_command
from command_bridge.engine.observers import (
    LogKeywordObserver,
    NullObserver,
    Observation,
    OutcomeObserver,
)
from command_bridge.engine.orchestrator import InteractionLog, RequestOrchestrator
from command_bridge.engine.parser import ResponseParser, strip_slash
from command_bridge.engine.policy import resolve_executor
from command_bridge.engine.retry import Attempt, RetryKey, RetryTable
from command_bridge.engine.supervisor import CommandExecutionSupervisor
from command_bridge.engine.tasks import TaskTracker


__all__ = [
    "ABBREVIATIONS",
    "AbbreviationExpander",
    "ContextSnapshotBuilder",
    "PluginInventory",
    "ConversationStore",
    "CommandFeedback",
    "CommandFeedbackLedger",
    "base_command",
    "Observation",
    "OutcomeObserver",
    "LogKeywordObserver",
    "NullObserver",
    "InteractionLog",
    "RequestOrchestrator",
    "ResponseParser",
    "strip_slash",
    "resolve_executor",
    "Attempt",
    "RetryKey",
    "RetryTable",
    "CommandExecutionSupervisor",
    "TaskTracker",
]
