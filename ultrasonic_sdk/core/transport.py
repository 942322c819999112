"""传输层：SDK 只依赖 Transport 协议中的几个能力，真实实现基于 pyserial。"""
from __future__ import annotations

import logging
import threading
import time
from typing import Optional, Protocol, runtime_checkable

import serial

from ..config import SensorConfig
from ..exceptions import ExchangeTimeoutError, TransportError


@runtime_checkable
class Transport(Protocol):
	def write(self, data: bytes) -> None: ...

	def read_exact(self, n: int, timeout: float) -> bytes: ...

	def bytes_available(self) -> int: ...

	def reconfigure(self, baudrate: int) -> None: ...

	def reset_input(self) -> None: ...

	def close(self) -> None: ...


class SerialTransport:
	"""pyserial 串口封装。

	read_exact 用单调时钟计算截止时间，剩余时间交给串口驱动的阻塞 read；
	到期仍不足 n 字节则抛 ExchangeTimeoutError，已读到的残帧丢弃。
	"""

	def __init__(self, config: SensorConfig, serial_cls: Optional[type] = None) -> None:
		self.config = config
		self._serial_cls = serial_cls or serial.Serial
		self._ser = None
		self._lock = threading.RLock()
		self.logger = logging.getLogger(self.__class__.__name__)

	# ---------- 生命周期 ----------
	def open(self):
		with self._lock:
			if self._ser is not None:
				return
			try:
				self._ser = self._serial_cls(
					self.config.port,
					self.config.baudrate,
					timeout=self.config.timeout,
					write_timeout=self.config.write_timeout,
				)
			except Exception as e:  # noqa: BLE001
				raise TransportError(f"打开串口 {self.config.port} 失败: {e}") from e
			self.logger.info(f"串口已打开 {self.config.port} @ {self.config.baudrate}")

	def close(self):
		with self._lock:
			if self._ser is None:
				return
			try:
				self._ser.close()
			except (serial.SerialException, OSError) as e:
				raise TransportError(f"关闭串口失败: {e}") from e
			finally:
				self._ser = None
			self.logger.info(f"串口已关闭 {self.config.port}")

	def is_open(self) -> bool:
		return self._ser is not None

	def reconfigure(self, baudrate: int) -> None:
		"""以新波特率重开串口：关闭 -> 等待 settle_delay -> 打开。"""
		with self._lock:
			self.close()
			time.sleep(self.config.settle_delay)
			self.config.baudrate = baudrate
			self.open()

	# ---------- 读写 ----------
	def write(self, data: bytes) -> None:
		ser = self._require_open()
		try:
			ser.write(data)
		except (serial.SerialException, OSError) as e:
			raise TransportError(f"写串口失败: {e}") from e

	def read_exact(self, n: int, timeout: float) -> bytes:
		ser = self._require_open()
		deadline = time.monotonic() + timeout
		buf = bytearray()
		try:
			while len(buf) < n:
				ser.timeout = max(deadline - time.monotonic(), 0)
				buf.extend(ser.read(n - len(buf)))
				if len(buf) < n and time.monotonic() >= deadline:
					raise ExchangeTimeoutError(f"{timeout:.3f}s 内只收到 {len(buf)}/{n} 字节")
		except ExchangeTimeoutError:
			raise  # TimeoutError 也是 OSError，不能包装成 TransportError
		except (serial.SerialException, OSError) as e:
			raise TransportError(f"读串口失败: {e}") from e
		finally:
			ser.timeout = self.config.timeout
		return bytes(buf)

	def bytes_available(self) -> int:
		ser = self._require_open()
		try:
			return ser.in_waiting
		except (serial.SerialException, OSError) as e:
			raise TransportError(f"查询串口缓冲失败: {e}") from e

	def reset_input(self) -> None:
		ser = self._require_open()
		try:
			ser.reset_input_buffer()
		except (serial.SerialException, OSError) as e:
			raise TransportError(f"清空接收缓冲失败: {e}") from e

	def _require_open(self):
		if self._ser is None:
			raise TransportError("串口未打开")
		return self._ser

	# context manager
	def __enter__(self):
		self.open()
		return self

	def __exit__(self, exc_type, exc, tb):  # noqa: D401
		self.close()
		return False


__all__ = ["Transport", "SerialTransport"]
