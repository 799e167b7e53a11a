"""Context event system for tracking context mutations and model changes."""

from context_cost_cli.events.bus import EventBus
from context_cost_cli.events.schemas import BackendChanged
from context_cost_cli.events.schemas import ContextCleared
from context_cost_cli.events.schemas import ContextEntryAdded
from context_cost_cli.events.schemas import ContextEntryRemoved
from context_cost_cli.events.schemas import ContextEvent
from context_cost_cli.events.schemas import ModelChanged

__all__ = [
    "EventBus",
    "ContextEvent",
    "ContextEntryAdded",
    "ContextEntryRemoved",
    "ContextCleared",
    "ModelChanged",
    "BackendChanged",
]
