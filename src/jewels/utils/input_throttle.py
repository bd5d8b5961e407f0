from __future__ import annotations

import math
from dataclasses import dataclass, field
from time import monotonic
from typing import Callable, Dict, NamedTuple

from jewels.constants import THROTTLE_MIN_DISTANCE, THROTTLE_MIN_INTERVAL


class _Press(NamedTuple):
	time: float
	x: float
	y: float


@dataclass(slots=True)
class MouseThrottle:
	"""Debounces pointer presses.

	A press repeating the previous press of the same button within
	``min_interval`` seconds and ``min_distance`` pixels is a bounce and is
	rejected. The default interval sits well under the bomb double-click
	threshold so deliberate double clicks still arrive as two presses.
	"""

	min_interval: float = THROTTLE_MIN_INTERVAL
	min_distance: float = THROTTLE_MIN_DISTANCE
	clock: Callable[[], float] | None = field(default=None, repr=False)

	_now: Callable[[], float] = field(init=False, repr=False)
	_previous: Dict[int, _Press] = field(init=False, repr=False)
	_accepted: int = field(init=False, default=0, repr=False)

	def __post_init__(self) -> None:
		self._now = self.clock or monotonic
		self._previous = {}
		self.min_interval = max(0.0, float(self.min_interval))
		self.min_distance = max(0.0, float(self.min_distance))

	def _is_bounce(self, press: _Press, button: int) -> bool:
		prev = self._previous.get(button)
		if prev is None or press.time - prev.time >= self.min_interval:
			return False
		return math.hypot(press.x - prev.x, press.y - prev.y) <= self.min_distance

	def allow(self, x: float, y: float, button: int) -> bool:
		press = _Press(self._now(), x, y)
		if self._is_bounce(press, button):
			return False
		self._previous[button] = press
		self._accepted += 1
		return True

	def reset(self) -> None:
		self._previous.clear()
		self._accepted = 0

	@property
	def last_sequence(self) -> int | None:
		"""Running count of accepted presses, None before the first one."""
		return self._accepted or None
