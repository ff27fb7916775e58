"""Core infrastructure: configuration, logging, events, registry and graphs."""

from jobweave.core.events import EventBus, EventBusProtocol, EventRecorder, NullEventBus
from jobweave.core.registry import ResourceType, ResourceTypeRegistry, default_registry

__all__ = [
    "EventBus",
    "EventBusProtocol",
    "EventRecorder",
    "NullEventBus",
    "ResourceType",
    "ResourceTypeRegistry",
    "default_registry",
]
