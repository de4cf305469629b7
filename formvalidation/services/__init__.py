"""Collaborator services used by the validation manager."""

from formvalidation.services.event_bus import EventBus, EventListener

__all__ = ["EventBus", "EventListener"]
