from abc import ABC, abstractmethod

from booking_core.domain.entities.booking_event import BookingEvent


class EventPublisherPort(ABC):
    @abstractmethod
    def publish(self, event: BookingEvent) -> None:
        """Hand an event to the notification side. May raise; callers never roll back on failure."""
        raise NotImplementedError

    def close(self) -> None:
        """Release held connections. Most publishers hold none."""
        return None
