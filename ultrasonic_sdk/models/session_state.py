"""设备会话状态。"""
from __future__ import annotations

import enum
import threading
from typing import Optional

from ..constants import BROADCAST_ADDRESS, UPLOAD_MODE_AUTO, UPLOAD_MODE_MANUAL
from .distance_sample import DistanceSample


class UploadMode(enum.IntEnum):
	MANUAL = UPLOAD_MODE_MANUAL
	AUTO = UPLOAD_MODE_AUTO


class DeviceSessionState:
	"""上传模式、设备地址和最近一次距离。

	外部只读；只有交换引擎 (设备确认后) 和流解析 (校验通过后) 通过
	_set_* 方法修改。
	"""

	def __init__(self, address: int = BROADCAST_ADDRESS, upload_mode: UploadMode = UploadMode.MANUAL):
		self._lock = threading.Lock()
		self._address = address
		self._upload_mode = upload_mode
		self._last_sample: Optional[DistanceSample] = None

	@property
	def address(self) -> int:
		return self._address

	@property
	def upload_mode(self) -> UploadMode:
		return self._upload_mode

	@property
	def auto_upload(self) -> bool:
		return self._upload_mode is UploadMode.AUTO

	@property
	def last_sample(self) -> Optional[DistanceSample]:
		return self._last_sample

	def _set_address(self, address: int) -> None:
		with self._lock:
			self._address = address

	def _set_upload_mode(self, mode: UploadMode) -> None:
		with self._lock:
			self._upload_mode = UploadMode(mode)

	def _set_last_sample(self, sample: DistanceSample) -> None:
		with self._lock:
			self._last_sample = sample

	def __repr__(self) -> str:  # pragma: no cover
		return (
			f"DeviceSessionState(addr=0x{self._address:04X}, mode={self._upload_mode.name}, "
			f"last={self._last_sample})"
		)


__all__ = ["UploadMode", "DeviceSessionState"]
