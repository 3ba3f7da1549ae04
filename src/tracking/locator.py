"""Device locator port and a scripted adapter for development and testing."""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from shared.geo import Location
from tracking.exceptions import LocationUnavailable


class DeviceLocator(ABC):
    """Samples the current device position."""

    @abstractmethod
    async def current_location(self) -> Location:
        """Return the current position.

        Raises:
            LocationUnavailable: permission denied or no fix.
        """
        ...


class ScriptedLocator(DeviceLocator):
    """Replays a fixed sequence of samples, then repeats the last one.

    A sample may be a ``Location`` or an exception instance to raise.
    """

    def __init__(self, samples: Iterable[Location | Exception]) -> None:
        self._samples = list(samples)
        if not self._samples:
            raise ValueError("ScriptedLocator needs at least one sample")
        self.calls = 0

    async def current_location(self) -> Location:
        sample = self._samples[min(self.calls, len(self._samples) - 1)]
        self.calls += 1
        if isinstance(sample, Exception):
            raise sample
        return sample


class UnavailableLocator(DeviceLocator):
    """A device that never yields a position."""

    def __init__(self, reason: str = "Location permission denied") -> None:
        self.reason = reason

    async def current_location(self) -> Location:
        raise LocationUnavailable(self.reason)
