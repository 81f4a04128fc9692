"""
Base Domain Classes

Foundational building blocks shared by the locations and bookings domains:
- Entity: Immutable snapshots with a stable string identity
- ValueObject: Immutable objects compared by value
- DomainEvent: Events that represent something that happened
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID, uuid4


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Entity(ABC):
    """
    Base class for all entities

    Entities carry an opaque identifier that is stable across sessions.
    Instances are snapshots: a change produces a new instance with the
    same id, never an in-place mutation.
    """
    id: str


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects

    Value objects are immutable and have no identity.
    Two value objects are equal if all their attributes are equal.
    """
    pass


@dataclass(frozen=True, kw_only=True)
class DomainEvent:
    """
    Base class for domain events

    Domain events are published through the message bus right after the
    mutation that produced them, so subscribers only ever see complete state.
    """
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=utcnow)
    aggregate_id: str | None = None

    def to_dict(self) -> dict:
        """Convert event to dictionary for logging"""
        return {
            'event_id': str(self.event_id),
            'event_type': self.__class__.__name__,
            'occurred_at': self.occurred_at.isoformat(),
            'aggregate_id': self.aggregate_id,
        }
