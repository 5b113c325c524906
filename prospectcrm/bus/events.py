"""
Event Bus - Decoupled Module Communication
The CRM facade emits an event after every successful mutation; anything that
needs to react (CLI hooks, caches, audit) registers a handler.
"""

from typing import Callable, Dict, List, Any
import logging

logger = logging.getLogger(__name__)


class EventBus:
    """
    Simple event bus for decoupled module communication.
    Modules emit events, other modules register handlers to listen.
    """

    def __init__(self):
        self._handlers: Dict[str, List[Callable]] = {}

    def on(self, event_name: str, handler: Callable):
        """
        Register a handler for an event.

        Args:
            event_name: Name of the event to listen for
            handler: Callable that receives event_data dict
        """
        if event_name not in self._handlers:
            self._handlers[event_name] = []
        self._handlers[event_name].append(handler)
        logger.debug(f"Registered handler for event '{event_name}': {getattr(handler, '__name__', handler)}")

    def off(self, event_name: str, handler: Callable):
        """Unregister a handler. Unknown handlers are ignored."""
        handlers = self._handlers.get(event_name, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event_name: str, event_data: Dict[str, Any] = None):
        """
        Emit an event to all registered handlers.
        A failing handler is logged and does not stop the others.
        """
        if event_data is None:
            event_data = {}

        logger.debug(f"Emitting event '{event_name}' with keys: {sorted(event_data)}")

        for handler in list(self._handlers.get(event_name, [])):
            try:
                handler(event_data)
            except Exception as e:
                logger.error(f"Error in handler {getattr(handler, '__name__', handler)} for event '{event_name}': {e}")

    def clear(self):
        """Clear all handlers (useful for testing)."""
        self._handlers.clear()


# Singleton instance
bus = EventBus()


# =============================================================================
# STANDARD EVENTS
# =============================================================================

EVENT_ORGANIZATION_CREATED = 'organization_created'
EVENT_ORGANIZATION_UPDATED = 'organization_updated'
EVENT_ORGANIZATION_DELETED = 'organization_deleted'

EVENT_CONTACT_CREATED = 'contact_created'
EVENT_CONTACT_UPDATED = 'contact_updated'
EVENT_CONTACT_DELETED = 'contact_deleted'

EVENT_APPOINTMENT_CREATED = 'appointment_created'
EVENT_APPOINTMENT_UPDATED = 'appointment_updated'
EVENT_APPOINTMENT_DELETED = 'appointment_deleted'

EVENT_CONTRACT_CREATED = 'contract_created'
EVENT_CONTRACT_UPDATED = 'contract_updated'
EVENT_CONTRACT_DELETED = 'contract_deleted'

EVENT_DEAL_CREATED = 'deal_created'
EVENT_DEAL_UPDATED = 'deal_updated'
EVENT_DEAL_DELETED = 'deal_deleted'

EVENT_ACTIVITY_CREATED = 'activity_created'
EVENT_ACTIVITY_UPDATED = 'activity_updated'
EVENT_ACTIVITY_DELETED = 'activity_deleted'

EVENT_DOCUMENT_CREATED = 'document_created'
EVENT_DOCUMENT_UPDATED = 'document_updated'
EVENT_DOCUMENT_DELETED = 'document_deleted'

EVENT_ADMIN_CREATED = 'admin_created'
EVENT_ADMIN_DELETED = 'admin_deleted'

EVENT_COMMERCIAL_CREATED = 'commercial_created'
EVENT_COMMERCIAL_DELETED = 'commercial_deleted'

EVENT_DEMO_DATA_LOADED = 'demo_data_loaded'
EVENT_IMPORT_COMPLETE = 'import_complete'
