"""
Two-knob cursor model for live drawing.

Each knob is a value in [0, 1]; the cursor sits at (x * width, y * height).
CursorRecorder samples the cursor at a fixed cadence. Callers pass the clock
in, so the recorder is deterministic and has no timer of its own.
"""
from typing import List, Optional, Sequence

from ..ingestion.models import StrokePoint
from ..stroke_engine.simplification import concatenate_strokes

CAPTURE_INTERVAL_MS = 8
KEY_STEP = 0.01
FRICTION = 0.95
MIN_FLING_VELOCITY = 0.1
STOP_VELOCITY = 0.05
VELOCITY_SCALE = 0.002  # value change per frame per degree/ms


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def normalize_angle(delta: float) -> float:
    """Wraps a rotation delta in degrees into [-180, 180]."""
    if delta > 180:
        delta -= 360
    if delta < -180:
        delta += 360
    return delta


class Knob:
    def __init__(self, value: float = 0.5):
        self.value = _clamp(value)

    def nudge(self, delta: float) -> float:
        self.value = _clamp(self.value + delta)
        return self.value

    def press(self, increment: bool) -> float:
        return self.nudge(KEY_STEP if increment else -KEY_STEP)

    def rotate(self, angle_delta: float) -> float:
        # A full turn sweeps the whole range
        return self.nudge(normalize_angle(angle_delta) / 360)

    def fling(self, velocity: float) -> List[float]:
        """
        Coasts after release with friction. Returns the value after each
        momentum frame; empty when the release was too slow to coast.
        """
        frames: List[float] = []
        if abs(velocity) <= MIN_FLING_VELOCITY:
            return frames
        while abs(velocity) >= STOP_VELOCITY:
            frames.append(self.nudge(velocity * VELOCITY_SCALE))
            velocity *= FRICTION
        return frames


class CursorRecorder:
    def __init__(self, width: float, height: float,
                 x_knob: Optional[Knob] = None, y_knob: Optional[Knob] = None):
        self.width = width
        self.height = height
        self.x_knob = x_knob or Knob()
        self.y_knob = y_knob or Knob()
        self.points: List[StrokePoint] = []
        self._last_capture: Optional[float] = None

    @property
    def cursor(self):
        return self.x_knob.value * self.width, self.y_knob.value * self.height

    def tick(self, now: float) -> Optional[StrokePoint]:
        """Records the cursor if at least CAPTURE_INTERVAL_MS passed since the last capture."""
        if self._last_capture is not None and now - self._last_capture < CAPTURE_INTERVAL_MS:
            return None
        x, y = self.cursor
        point = StrokePoint(x=x, y=y, timestamp=now)
        self.points.append(point)
        self._last_capture = now
        return point

    def inject(self, points: Sequence[StrokePoint]) -> None:
        """Appends generated points after whatever was drawn by hand."""
        self.points = concatenate_strokes(self.points, points)

    def erase(self) -> None:
        self.points = []
        self._last_capture = None
