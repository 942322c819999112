"""通用工具函数。"""
from __future__ import annotations

from dataclasses import dataclass
import logging
import threading
import time
from typing import Callable

from .exceptions import ParameterError


def now_ts() -> float:
	return time.time()


def hexdump(data: bytes) -> str:
	return " ".join(f"{b:02X}" for b in data)


def check_byte(name: str, value: int, low: int = 0, high: int = 0xFF) -> int:
	"""校验参数是否落在 [low, high]，返回 int 值。"""
	if not isinstance(value, int) or isinstance(value, bool):
		raise ParameterError(f"{name} 必须是整数，实际为 {value!r}")
	if not (low <= value <= high):
		raise ParameterError(f"{name} 必须在 0x{low:02X}-0x{high:02X} 之间，实际为 0x{value:X}")
	return value


class StoppableThread(threading.Thread):
	"""带 stop() 标记的线程基类。"""

	def __init__(self, *args, **kwargs):
		super().__init__(*args, **kwargs)
		self._stop_event = threading.Event()
		self.daemon = True

	def stop(self):  # type: ignore[override]
		self._stop_event.set()

	@property
	def stopped(self) -> bool:
		return self._stop_event.is_set()

	def wait(self, timeout: float) -> bool:
		"""在 stop() 之前最多等待 timeout 秒，返回是否已停止。"""
		return self._stop_event.wait(timeout)


@dataclass
class CallbackHandle:
	remove: Callable[[], None]

	def dispose(self):
		self.remove()


class CallbackRegistry:
	"""线程安全的回调注册。单个回调抛出的异常会记录日志，不影响其他回调。"""

	def __init__(self, name: str = "callback"):
		self._name = name
		self._lock = threading.RLock()
		self._callbacks: list[Callable] = []
		self.logger = logging.getLogger(self.__class__.__name__)

	def register(self, cb: Callable) -> CallbackHandle:
		with self._lock:
			self._callbacks.append(cb)

		def _remove():
			with self._lock:
				if cb in self._callbacks:
					self._callbacks.remove(cb)

		return CallbackHandle(remove=_remove)

	def fire(self, *args, **kwargs):
		with self._lock:
			callbacks = list(self._callbacks)
		for cb in callbacks:
			try:
				cb(*args, **kwargs)
			except Exception:  # noqa: BLE001
				self.logger.exception(f"{self._name} 回调执行失败: {cb!r}")


__all__ = [
	"now_ts",
	"hexdump",
	"check_byte",
	"StoppableThread",
	"CallbackRegistry",
	"CallbackHandle",
]
