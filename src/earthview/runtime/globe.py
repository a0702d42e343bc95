"""Headless globe runtime.

``GlobeRuntime`` owns the camera rig and the four frame-driven components
and exposes a single ``tick`` entry point for an external driver loop. It
also runs the "place user marker" flow: resolve a location, drop a marker,
and optionally fly the camera to frame it.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Callable, Optional, Sequence

from earthview.camera import ops
from earthview.camera.descriptor import decode, encode
from earthview.camera.rig import CameraRig
from earthview.camera.share import descriptor_from_url
from earthview.camera.state import CameraState, Vec3
from earthview.camera.transition import TransitionScheduler
from earthview.config.models import ViewConfig
from earthview.location.resolver import build_tiers, resolve_location
from earthview.location.types import GeoFix, LocationTier
from earthview.motion.pulse import MarkerPulseEmitter
from earthview.motion.rotation import RotationMode, RotationModeController
from earthview.runtime.frame import CameraView, FrameSnapshot, Renderer
from earthview.runtime.status import StatusBanner
from earthview.utils.timing import monotonic_ms

logger = logging.getLogger(__name__)

STATUS_SEARCHING = "Looking for your location..."
STATUS_UNAVAILABLE = "Unable to retrieve your position"
STATUS_DEVICE = "Position detected"
STATUS_APPROXIMATE = "Approximate position"
STATUS_ALIGNING_SUFFIX = ", aligning..."


def _location_label(fix: GeoFix, *, aligning: bool) -> str:
    label = STATUS_DEVICE if fix.source == "device" else STATUS_APPROXIMATE
    return label + STATUS_ALIGNING_SUFFIX if aligning else label


class GlobeRuntime:
    def __init__(
        self,
        config: Optional[ViewConfig] = None,
        *,
        tiers: Optional[Sequence[LocationTier]] = None,
        renderer: Optional[Renderer] = None,
        time_fn: Callable[[], float] = monotonic_ms,
    ) -> None:
        self.config = config or ViewConfig()
        self._time_fn = time_fn
        policy = self.config.debug_policy
        toggles = policy.logging
        self._log_camera = toggles.log_camera_info
        self._frame_log_every = max(0, int(policy.frame_log_every))

        self.rig = CameraRig(state=CameraState(position=Vec3.from_iterable(self.config.initial_position)))
        self.transitions = TransitionScheduler(time_fn=time_fn, log_debug=toggles.log_transition_debug)
        self.rotation = RotationModeController(log_modes=toggles.log_rotation_modes)
        self.pulses = MarkerPulseEmitter(self.config.pulse, time_fn=time_fn, log_debug=toggles.log_pulse_debug)
        self.status = StatusBanner(self.config.status, time_fn=time_fn, log_changes=toggles.log_status_changes)
        self.tiers: list[LocationTier] = list(tiers) if tiers is not None else build_tiers(self.config.location)
        self.renderer = renderer
        self.marker: Optional[ops.MarkerAnchor] = None
        self._log_location = toggles.log_location_info
        self._last_tick: Optional[float] = None
        self._pending: list[Callable[[float], None]] = []
        self._status_seq = 0
        self._frames = 0

    @property
    def mode(self) -> RotationMode:
        return self.rotation.mode

    def current_descriptor(self) -> str:
        return encode(self.rig.state)

    def _at_frame_time(self, action: Callable[[float], None]) -> None:
        """Run a clock-stamped action on the tick clock.

        Before the first tick there is no time base yet, so the action waits
        and runs at the start of that tick.
        """

        if self._last_tick is not None:
            action(self._last_tick)
        else:
            self._pending.append(action)

    def _show_status(self, message: str, *, persist: bool) -> None:
        self._status_seq += 1
        self.status.show(message, persist=True)
        if not persist:
            self._hide_status(self.config.status.auto_hide_ms)

    def _hide_status(self, delay_ms: float) -> None:
        seq = self._status_seq

        def _hide(now: float) -> None:
            # a newer message owns the banner
            if seq == self._status_seq:
                self.status.hide(delay_ms, now=now)

        self._at_frame_time(_hide)

    # Descriptor handling ------------------------------------------------

    def boot(self, descriptor: str = "") -> bool:
        """Apply an initial descriptor (if valid) and pick the starting mode.

        Returns True when a custom viewpoint was applied; callers then run
        ``place_user_marker(auto_frame=False)``, otherwise auto-framing.
        """

        state = decode(descriptor)
        if state is None and descriptor:
            logger.warning("invalid camera descriptor: %r", descriptor)
        if state is not None:
            self.rig.apply_state(state)
            if self._log_camera:
                logger.info("camera: booted from descriptor %s", descriptor)
        self.rotation.on_init(has_descriptor=state is not None)
        return state is not None

    def boot_from_url(self, url: str) -> bool:
        return self.boot(descriptor_from_url(url, self.config.site_base))

    def apply_descriptor(self, descriptor: str) -> bool:
        """Jump to a shared viewpoint; leaves the camera untouched when invalid."""

        state = decode(descriptor)
        if state is None:
            logger.warning("ignoring invalid camera descriptor: %r", descriptor)
            return False
        self.transitions.cancel()
        self.rig.apply_state(state)
        self.rotation.on_descriptor_applied()
        if self._log_camera:
            logger.info("camera: applied %s", self.current_descriptor())
        return True

    # Location flow ------------------------------------------------------

    async def place_user_marker(self, *, auto_frame: bool = False) -> Optional[GeoFix]:
        if auto_frame:
            self.rotation.on_location_requested(auto_frame=True)
            self._show_status(STATUS_SEARCHING, persist=True)

        fix = await resolve_location(self.tiers, log_info=self._log_location)
        if fix is None:
            self.rotation.on_location_failed()
            self._show_status(STATUS_UNAVAILABLE, persist=False)
            return None

        self._show_status(_location_label(fix, aligning=auto_frame), persist=auto_frame)
        anchor = ops.marker_anchor(fix.lat, fix.lon)
        self.marker = anchor
        self._at_frame_time(lambda now: self.pulses.set_anchor(anchor, now))

        if auto_frame:
            self.rotation.on_location_resolved(auto_frame=True)
            self.rig.target = anchor.position
            destination = ops.focus_position(anchor.position, self.config.framing)
            self._at_frame_time(
                lambda now: self.transitions.start(
                    self.rig,
                    destination,
                    self.config.transition.duration_ms,
                    on_complete=self._on_focus_complete,
                    now=now,
                )
            )
        else:
            self.rig.target = ops.ORIGIN
            self.rig.look_at_target()
            self.rotation.on_location_resolved(auto_frame=False)
            self._hide_status(self.config.status.free_hide_ms)
        return fix

    def _on_focus_complete(self) -> None:
        self.rotation.on_focus_complete()
        self._hide_status(self.config.status.focus_hide_ms)
        if self._log_camera:
            logger.info("camera: focused at %s", self.current_descriptor())

    # Frame tick ---------------------------------------------------------

    def tick(self, now: Optional[float] = None, delta_s: Optional[float] = None) -> FrameSnapshot:
        ts = self._time_fn() if now is None else float(now)
        if delta_s is None:
            delta_s = 0.0 if self._last_tick is None else max(0.0, ts - self._last_tick) / 1000.0
        self._last_tick = ts
        pending, self._pending = self._pending, []
        for action in pending:
            action(ts)

        self.transitions.tick(self.rig, ts)
        self.rig.look_at_target()
        step = self.rotation.tick(delta_s)
        pulse_frames = self.pulses.tick(ts)
        self.status.tick(ts)

        state = self.rig.state
        frame = FrameSnapshot(
            now=ts,
            camera=CameraView(
                position=state.position,
                fov_deg=state.fov_deg,
                roll_deg=state.roll_deg,
                target=self.rig.target,
                orientation=self.rig.orientation,
                forward=ops.view_direction(self.rig.orientation),
            ),
            rotation_mode=self.rotation.mode.value,
            rotation=step,
            globe=dataclasses.replace(self.rotation.orientation),
            search_effects_visible=self.rotation.search_effects_visible,
            pulses=tuple(pulse_frames),
            marker=self.marker,
            status_text=self.status.text,
            transition_active=self.transitions.active,
        )
        self._frames += 1
        if self._frame_log_every and self._frames % self._frame_log_every == 0:
            logger.debug(
                "frame %d: mode=%s pos=%s pulses=%d transition=%s",
                self._frames,
                frame.rotation_mode,
                state.position,
                len(pulse_frames),
                frame.transition_active,
            )
        if self.renderer is not None:
            self.renderer.render(frame)
        return frame


__all__ = ["GlobeRuntime"]
