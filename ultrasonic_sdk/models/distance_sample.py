"""距离采样模型。"""
from __future__ import annotations

from dataclasses import dataclass, field

from ..utils import now_ts
from .frame import DecodedFrame


@dataclass(frozen=True, slots=True)
class DistanceSample:
	distance_mm: int
	address: int
	timestamp: float = field(default_factory=now_ts, compare=False)

	@classmethod
	def from_frame(cls, frame: DecodedFrame) -> "DistanceSample":
		return cls(distance_mm=frame.value, address=frame.address)

	@property
	def distance_m(self) -> float:
		return self.distance_mm / 1000.0

	def __repr__(self) -> str:  # pragma: no cover
		return (
			f"DistanceSample({self.distance_mm} mm, addr=0x{self.address:04X}, "
			f"ts={self.timestamp:.3f})"
		)


__all__ = ["DistanceSample"]
