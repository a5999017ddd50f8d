"""
Capability interfaces for the platform sensor and camera collaborators.

The guidance core never calls platform APIs directly. It is handed three
capability objects:

    HeadingSource   push stream of HeadingSample (compass)
    MotionSource    push stream of MotionSample (accelerometer z)
    VideoSink       camera passthrough, started and stopped with guidance

Subscribing (or starting the video stream) returns a Subscription handle.
Closing the handle is the only way to stop callbacks, and closing is
idempotent so it can sit on every exit path of the owner, including error
paths (see contextlib.ExitStack in the state machine).

A CancellationToken is shared by all callbacks of one activation; callbacks
check it first so a callback already in flight when the owner tears down
returns without touching state.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable, Optional

from wayfinder.sensors.types import HeadingSample, MotionSample

logger = logging.getLogger(__name__)

HeadingCallback = Callable[[Optional[HeadingSample]], None]
MotionCallback = Callable[[Optional[MotionSample]], None]


class CancellationToken:
    """One-way flag marking an activation as torn down."""

    def __init__(self) -> None:
        self._event = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()


class Subscription:
    """Handle to an active subscription or stream.

    Args:
        release: Callable invoked exactly once, on the first close().
        name: Label used in log messages.

    Example:
        >>> with source.subscribe(callback) as subscription:
        ...     pass  # callbacks fire here
        >>> subscription.active
        False
    """

    def __init__(self, release: Callable[[], None], name: str = "subscription"):
        self._release = release
        self._lock = threading.Lock()
        self._active = True
        self.name = name

    @property
    def active(self) -> bool:
        return self._active

    def close(self) -> None:
        """Release the underlying resource. Safe to call more than once."""
        with self._lock:
            if not self._active:
                return
            self._active = False
        logger.debug("Releasing %s", self.name)
        self._release()

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "active" if self._active else "closed"
        return f"Subscription({self.name!r}, {state})"


class HeadingSource(ABC):
    """Push source of compass samples."""

    @property
    def absolute(self) -> bool:
        """True if samples are referenced to true north."""
        return False

    def request_permission(self) -> None:
        """Ask the platform for sensor access.

        Raises:
            PermissionDeniedError: If the user declined.
            SensorUnavailableError: If no compass exists.
        """

    @abstractmethod
    def subscribe(self, callback: HeadingCallback) -> Subscription:
        """Start delivering samples to callback until the handle is closed.

        A None sample stands for a reading without an angle.
        """


class MotionSource(ABC):
    """Push source of vertical acceleration samples."""

    def request_permission(self) -> None:
        """Ask the platform for sensor access.

        Raises:
            PermissionDeniedError: If the user declined.
            SensorUnavailableError: If no accelerometer exists.
        """

    @abstractmethod
    def subscribe(self, callback: MotionCallback) -> Subscription:
        """Start delivering samples to callback until the handle is closed."""


class VideoSink(ABC):
    """Camera passthrough. Frames are never interpreted by the core."""

    @abstractmethod
    def start(self) -> Subscription:
        """Acquire the camera and start the passthrough stream.

        Returns:
            Handle whose close() stops the stream and releases the camera.

        Raises:
            PermissionDeniedError: If camera access was declined.
            StreamAcquisitionError: For any other stream failure.
        """
