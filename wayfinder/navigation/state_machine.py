"""
Navigation state machine.

Orchestrates the mode transitions

    SELECTION --select_destination--> BLUEPRINT --start_guidance--> NAVIGATING
        ^                                 |  ^                          |
        |----------- go_back -------------|  |--------- go_back --------|
        |------------------------ finish_arrival (arrived only) --------|

and owns the step countdown. Entering NAVIGATING is the only trigger for
acquiring the camera stream and subscribing to the compass and motion
sources; leaving it (go_back, finish_arrival, close) is the only trigger for
releasing them.

Resource model:
    Each activation owns a CancellationToken and a contextlib.ExitStack of
    Subscription handles. Acquisition happens inside the stack, so a failure
    half way releases whatever was already acquired, and any failure is
    recorded as the session error instead of propagating. Deactivation
    cancels the token under the session lock and closes the stack only after
    the lock is dropped, so a platform release that waits for its callback
    thread cannot deadlock. Every sensor callback checks the token under the
    lock, so a callback in flight at teardown returns without mutating state.

Threading:
    Callbacks may arrive on platform threads. One re-entrant lock guards all
    session, filter and detector state and is held for exactly one callback
    or one transition.
"""

import logging
import threading
import time
from contextlib import ExitStack
from functools import partial
from typing import Callable, Optional, Union

from wayfinder.config import GuidanceConfig
from wayfinder.errors import InvalidTransitionError, SensorError, StreamAcquisitionError
from wayfinder.floorplan import FloorPlan, Room
from wayfinder.guidance.blueprint import BlueprintLayout, layout
from wayfinder.guidance.engine import GuidanceEngine
from wayfinder.navigation.session import NavigationSession, NavMode, RenderState
from wayfinder.sensors.heading import HeadingFilter
from wayfinder.sensors.pdr import StepDetector
from wayfinder.sensors.sources import (
    CancellationToken,
    HeadingSource,
    MotionSource,
    VideoSink,
)
from wayfinder.sensors.types import HeadingSample, MotionSample

logger = logging.getLogger(__name__)


class NavigationStateMachine:
    """Selection -> Blueprint -> Navigating (-> Arrived) controller.

    Usage:
        >>> machine = NavigationStateMachine(
        ...     FloorPlan.default(), heading_source, motion_source, video_sink
        ... )
        >>> machine.select_destination("Kitchen")
        >>> machine.start_guidance()
        >>> # ... sensor callbacks drive the countdown ...
        >>> state = machine.snapshot()
        >>> state.remaining_steps, state.instruction
        >>> machine.go_back()  # releases camera and sensors

    Args:
        floor_plan: Rooms and the fixed start room.
        heading_source: Compass capability.
        motion_source: Accelerometer capability.
        video_sink: Camera passthrough capability.
        config: Policy values shared by all components.
        clock: Time source (seconds) used to stamp motion samples.
        on_exit: Called when go_back() is invoked in SELECTION mode.
    """

    def __init__(
        self,
        floor_plan: Optional[FloorPlan],
        heading_source: HeadingSource,
        motion_source: MotionSource,
        video_sink: VideoSink,
        config: Optional[GuidanceConfig] = None,
        clock: Callable[[], float] = time.monotonic,
        on_exit: Optional[Callable[[], None]] = None,
    ):
        self.floor_plan = floor_plan or FloorPlan.default()
        self.config = config or GuidanceConfig()
        self.heading_source = heading_source
        self.motion_source = motion_source
        self.video_sink = video_sink
        self.on_exit = on_exit
        self._clock = clock

        self.heading_filter = HeadingFilter(self.config)
        self.step_detector = StepDetector(self.config, clock=clock)
        self.guidance = GuidanceEngine(self.config)
        self.session = NavigationSession(remaining_steps=self.config.start_steps)

        self._lock = threading.RLock()
        self._resources: Optional[ExitStack] = None
        self._token: Optional[CancellationToken] = None

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------

    @property
    def mode(self) -> NavMode:
        return self.session.mode

    @property
    def destination(self) -> Optional[Room]:
        return self.session.destination

    @property
    def remaining_steps(self) -> int:
        return self.session.remaining_steps

    @property
    def arrived(self) -> bool:
        return self.session.arrived

    @property
    def last_error(self) -> Optional[str]:
        return self.session.last_error

    @property
    def sensors_active(self) -> bool:
        return self._resources is not None

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def select_destination(self, room: Union[Room, str]) -> BlueprintLayout:
        """Choose a destination and compute its route overview.

        Args:
            room: Room or room name from the floor plan.

        Returns:
            BlueprintLayout for the start -> destination route.

        Raises:
            InvalidTransitionError: If not in SELECTION mode.
            KeyError: If the room is not part of the floor plan.
        """
        with self._lock:
            if self.session.mode is not NavMode.SELECTION:
                raise InvalidTransitionError("select_destination", self.session.mode)

            name = room if isinstance(room, str) else room.name
            destination = self.floor_plan.room(name)

            blueprint = layout(
                self.floor_plan, self.floor_plan.start, destination, self.config
            )
            self.session.destination = destination
            self.session.blueprint = blueprint
            self.session.mode = NavMode.BLUEPRINT
            logger.info(
                "Destination %r selected (map rotation %.0f deg)",
                destination.name, blueprint.rotation_deg,
            )
            return blueprint

    def start_guidance(self) -> None:
        """Enter NAVIGATING: reload the countdown, reset filters, start sensors.

        Sensor or camera failures do not raise; they are recorded as the
        session's last error and guidance continues without heading data.

        Raises:
            InvalidTransitionError: If not in BLUEPRINT mode.
        """
        with self._lock:
            if self.session.mode is not NavMode.BLUEPRINT:
                raise InvalidTransitionError("start_guidance", self.session.mode)

            self.session.reset_guidance(self.config.start_steps)
            self.heading_filter.reset()
            self.step_detector.reset()
            self.session.mode = NavMode.NAVIGATING
            logger.info(
                "Guidance to %r started with %d steps",
                self.session.destination.name, self.session.remaining_steps,
            )
            self._activate()

    def on_step_event(self) -> bool:
        """Count one detected step.

        Returns:
            True if the step was counted, False if ignored (not navigating
            or already arrived).
        """
        with self._lock:
            if self.session.mode is not NavMode.NAVIGATING or self.session.arrived:
                logger.debug("Step ignored in mode %s (arrived=%s)",
                             self.session.mode, self.session.arrived)
                return False

            self.session.remaining_steps = max(0, self.session.remaining_steps - 1)
            if self.session.remaining_steps == 0:
                self.session.instruction = None
                logger.info("Arrived at %r", self.session.destination.name)
            else:
                logger.debug("Step counted, %d remaining", self.session.remaining_steps)
            return True

    def on_sensor_error(self, error: Union[str, Exception]) -> None:
        """Record a sensor error for display. The mode does not change.

        Args:
            error: Message, SensorError, or any other exception.
        """
        if isinstance(error, SensorError):
            message = error.message
        else:
            message = str(error) or SensorError.default_message

        with self._lock:
            self.session.last_error = message
        logger.warning("Sensor error: %s", message)

    def go_back(self) -> Optional[NavMode]:
        """Step back one mode.

        NAVIGATING -> BLUEPRINT releases sensors and resets the countdown;
        BLUEPRINT -> SELECTION clears the destination; in SELECTION the
        on_exit callback is invoked and None is returned.

        Returns:
            The mode after the transition, or None on exit.
        """
        resources = None
        with self._lock:
            mode = self.session.mode

            if mode is NavMode.NAVIGATING:
                resources = self._deactivate()
                self.heading_filter.reset()
                self.step_detector.reset()
                self.session.reset_guidance(self.config.start_steps)
                self.session.mode = NavMode.BLUEPRINT
                logger.info("Guidance stopped, back to blueprint")
            elif mode is NavMode.BLUEPRINT:
                self.session.reset_guidance(self.config.start_steps)
                self.session.destination = None
                self.session.blueprint = None
                self.session.mode = NavMode.SELECTION
                logger.info("Back to destination selection")
            new_mode = self.session.mode

        if mode is not NavMode.SELECTION:
            self._release(resources)
            return new_mode

        logger.info("Leaving navigation")
        if self.on_exit is not None:
            self.on_exit()
        return None

    def finish_arrival(self) -> None:
        """Close an arrived session and return to SELECTION.

        Raises:
            InvalidTransitionError: If the session has not arrived.
        """
        with self._lock:
            if not self.session.arrived:
                raise InvalidTransitionError(
                    "finish_arrival", self.session.mode, reason="destination not reached"
                )

            resources = self._deactivate()
            self.heading_filter.reset()
            self.step_detector.reset()
            self.session.reset_guidance(self.config.start_steps)
            self.session.destination = None
            self.session.blueprint = None
            self.session.mode = NavMode.SELECTION
            logger.info("Arrival confirmed, back to destination selection")

        self._release(resources)

    def close(self) -> None:
        """Release sensors and camera. Safe to call in any mode, repeatedly."""
        with self._lock:
            resources = self._deactivate()
        self._release(resources)

    def __enter__(self) -> "NavigationStateMachine":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Rendering boundary
    # ------------------------------------------------------------------

    def snapshot(self) -> RenderState:
        """Immutable view of everything the renderer needs."""
        with self._lock:
            session = self.session
            arrived = session.arrived
            return RenderState(
                mode=session.mode,
                destination=session.destination.name if session.destination else None,
                remaining_steps=session.remaining_steps,
                arrived=arrived,
                heading=session.heading,
                instruction=None if arrived else session.instruction,
                blueprint=session.blueprint,
                error=session.last_error,
                sensors_active=self._resources is not None,
            )

    # ------------------------------------------------------------------
    # Sensor activation
    # ------------------------------------------------------------------

    def _activate(self) -> None:
        if self._resources is not None:
            return

        token = CancellationToken()
        try:
            with ExitStack() as stack:
                stack.callback(token.cancel)
                self.heading_source.request_permission()
                self.motion_source.request_permission()
                stack.enter_context(self.video_sink.start())
                stack.enter_context(
                    self.heading_source.subscribe(partial(self._on_heading, token))
                )
                stack.enter_context(
                    self.motion_source.subscribe(partial(self._on_motion, token))
                )
                self._resources = stack.pop_all()
        except SensorError as exc:
            self.session.last_error = exc.message
            logger.warning("Could not start sensors (%s): %s", exc.kind, exc.message)
            return
        except Exception as exc:
            # Platform failures outside the SensorError family
            message = str(exc) or StreamAcquisitionError().message
            self.session.last_error = message
            logger.warning("Could not start sensors (%s): %s", type(exc).__name__, message)
            return

        self._token = token
        self.session.sensors_active = True
        logger.debug("Sensors and camera acquired (absolute compass: %s)",
                     self.heading_source.absolute)

    def _deactivate(self) -> Optional[ExitStack]:
        """Cancel the activation and detach its resources.

        Called under the lock. The returned stack must be handed to
        _release() once the lock is dropped.
        """
        if self._resources is None:
            return None

        resources, self._resources = self._resources, None
        token, self._token = self._token, None
        # Cancel before releasing so in-flight callbacks become no-ops
        token.cancel()
        self.session.sensors_active = False
        return resources

    def _release(self, resources: Optional[ExitStack]) -> None:
        if resources is None:
            return
        resources.close()
        logger.debug("Sensors and camera released")

    def _on_heading(self, token: CancellationToken, sample: Optional[HeadingSample]) -> None:
        with self._lock:
            if token.cancelled or sample is None:
                return

            heading = self.heading_filter.update(sample)
            self.session.heading = heading
            if self.session.arrived:
                self.session.instruction = None
            else:
                self.session.instruction = self.guidance.instruction(
                    heading, self.session.destination
                )

    def _on_motion(self, token: CancellationToken, sample: Optional[MotionSample]) -> None:
        with self._lock:
            if token.cancelled:
                return
            if sample is None:
                sample = MotionSample(accel_z=None)

            event = self.step_detector.update(sample, now=self._clock())
            if event is not None:
                self.on_step_event()
