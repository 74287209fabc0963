"""Caller-owned holder for the most recently reported device position."""

import threading
from typing import Any, Optional

from searoute.domain import Coordinate, as_coordinate
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="position")


class LastKnownPosition:
    """Thread-safe, overwrite-on-update store for one position.

    Each owner (the API app, a test) creates its own instance, so state never
    leaks between them.
    """

    def __init__(self, initial: Optional[Coordinate] = None) -> None:
        self._position = initial
        self._lock = threading.Lock()

    def update(self, position: Any) -> Coordinate:
        """Replace the stored position and return it as a Coordinate."""
        coordinate = as_coordinate(position)
        with self._lock:
            self._position = coordinate
        logger.debug("Updated last known position",
                     extra={"latitude": coordinate.latitude, "longitude": coordinate.longitude})
        return coordinate

    def get(self) -> Optional[Coordinate]:
        """Return the last stored position, or None if nothing was reported yet."""
        with self._lock:
            return self._position

    def clear(self) -> None:
        with self._lock:
            self._position = None
