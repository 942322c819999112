"""一次命令/应答交换的结果。"""
from __future__ import annotations

from dataclasses import dataclass
import enum
from typing import Optional

from ..exceptions import (
	ChecksumError,
	DeviceRejectedError,
	ExchangeTimeoutError,
	ResponseError,
)
from .distance_sample import DistanceSample
from .frame import DecodedFrame


class Outcome(enum.Enum):
	SUCCESS = "success"
	TIMEOUT = "timeout"
	CHECKSUM_ERROR = "checksum_error"
	RESPONSE_ERROR = "response_error"
	DEVICE_REJECTED = "device_rejected"


_OUTCOME_ERRORS = {
	Outcome.TIMEOUT: ExchangeTimeoutError,
	Outcome.CHECKSUM_ERROR: ChecksumError,
	Outcome.RESPONSE_ERROR: ResponseError,
	Outcome.DEVICE_REJECTED: DeviceRejectedError,
}


@dataclass(frozen=True, slots=True)
class ExchangeResult:
	"""outcome 为终态，不在 SDK 内部重试。frame 仅在收到完整帧时存在。"""

	outcome: Outcome
	frame: Optional[DecodedFrame] = None

	@property
	def ok(self) -> bool:
		return self.outcome is Outcome.SUCCESS

	def raise_for_outcome(self) -> "ExchangeResult":
		"""非 SUCCESS 时抛出对应异常，成功时返回自身便于链式调用。"""
		if self.ok:
			return self
		raw = self.frame.raw.hex() if self.frame else "-"
		raise _OUTCOME_ERRORS[self.outcome](f"交换失败: {self.outcome.value} (frame={raw})")


@dataclass(frozen=True, slots=True)
class DistanceReading:
	"""read_distance 的结果：outcome 加成功时的采样。"""

	result: ExchangeResult
	sample: Optional[DistanceSample] = None

	@property
	def outcome(self) -> Outcome:
		return self.result.outcome

	@property
	def ok(self) -> bool:
		return self.result.ok

	def raise_for_outcome(self) -> DistanceSample:
		self.result.raise_for_outcome()
		return self.sample  # type: ignore[return-value]


__all__ = ["Outcome", "ExchangeResult", "DistanceReading"]
