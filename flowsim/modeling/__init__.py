"""Reusable simulation components."""

from .base import IdSource, NotificationHook, SimulationModel, find_component
from .events import (
    DequeueEvent,
    EnqueueEvent,
    GeneratorArriveEvent,
    GeneratorStartEvent,
    GeneratorStopEvent,
    ServiceCompleteEvent,
    UpdateToDequeueEvent,
)
from .generator import Generator, GeneratorConfig
from .queue import QueueConfig, SimQueue
from .server import Server, ServerConfig
from .resource_pool import ResourcePool
from .queueing_system import Customer, QueueingSystem

__all__ = [
    "IdSource",
    "NotificationHook",
    "SimulationModel",
    "find_component",
    "GeneratorStartEvent",
    "GeneratorArriveEvent",
    "GeneratorStopEvent",
    "EnqueueEvent",
    "DequeueEvent",
    "UpdateToDequeueEvent",
    "ServiceCompleteEvent",
    "Generator",
    "GeneratorConfig",
    "QueueConfig",
    "SimQueue",
    "Server",
    "ServerConfig",
    "ResourcePool",
    "Customer",
    "QueueingSystem",
]
