"""传感器会话：负责打开/关闭串口，持有会话状态，协调交换与流读取。"""
from __future__ import annotations

import logging
import threading
from typing import Optional

from ..config import SensorConfig
from ..exceptions import TransportError, UploadModeError
from ..models.command import CommModeVariant, ResetKind
from ..models.distance_sample import DistanceSample
from ..models.outcome import DistanceReading, ExchangeResult
from ..models.session_state import DeviceSessionState, UploadMode
from ..utils import CallbackRegistry
from .exchange import ExchangeEngine
from .stream_reader import StreamResynchronizer, StreamWorker
from .transport import SerialTransport, Transport


class SensorSession:
	"""高层封装：统一生命周期管理。

	同一时刻只允许一个调用方持有会话。交换与流读取共用一把可重入锁，
	不会同时读同一个串口；自动上传模式下 read_distance 直接拒绝。

	可注册回调 (仅 start_streaming 启动后台线程时触发)：
	- on_sample(DistanceSample)
	- on_error(Exception)

	换串口或改波特率前，调用方需保证没有进行中的交换或轮询。
	"""

	def __init__(
		self,
		config: SensorConfig,
		serial_cls: Optional[type] = None,
		transport: Optional[Transport] = None,
	) -> None:
		self.config = config
		self._transport = transport or SerialTransport(config, serial_cls=serial_cls)
		self._lock = threading.RLock()
		self.state = DeviceSessionState(address=config.address)

		self.on_sample = CallbackRegistry("sample")
		self.on_error = CallbackRegistry("error")

		self.engine = ExchangeEngine(
			self._transport,
			self.state,
			timeout=config.response_timeout,
			lock=self._lock,
		)
		self.resync = StreamResynchronizer(
			self._transport,
			self.state,
			lock=self._lock,
			read_timeout=config.timeout,
		)
		self.engine.on_mode_change.register(self.resync.reset)
		self._worker: Optional[StreamWorker] = None
		self._running = False
		self.logger = logging.getLogger(self.__class__.__name__)

	# ---------- public API ----------
	def open(self):
		with self._lock:
			if self._running:
				return
			opener = getattr(self._transport, "open", None)
			if opener is not None:
				opener()
			self._running = True
			self.logger.info(f"会话已打开: {self.config.port}")

	def close(self):
		self.stop_streaming()
		with self._lock:
			if not self._running:
				return
			try:
				self._transport.close()
			finally:
				self._running = False
				self.logger.info("会话已关闭")

	def is_open(self) -> bool:
		return self._running

	@property
	def upload_mode(self) -> UploadMode:
		return self.state.upload_mode

	@property
	def last_sample(self) -> Optional[DistanceSample]:
		return self.state.last_sample

	# 配置命令
	def reset(self, kind: ResetKind = ResetKind.SOFT, timeout: Optional[float] = None) -> ExchangeResult:
		return self._engine().reset(kind, timeout)

	def set_address(self, new_address: int, timeout: Optional[float] = None) -> ExchangeResult:
		return self._engine().set_address(new_address, timeout)

	def set_baud_rate(self, index: int, timeout: Optional[float] = None) -> ExchangeResult:
		return self._engine().set_baud_rate(index, timeout)

	def set_upload_mode(self, mode: UploadMode, timeout: Optional[float] = None) -> ExchangeResult:
		return self._engine().set_upload_mode(mode, timeout)

	def set_upload_interval(self, interval: int, timeout: Optional[float] = None) -> ExchangeResult:
		return self._engine().set_upload_interval(interval, timeout)

	def set_led_mode(self, mode: int, timeout: Optional[float] = None) -> ExchangeResult:
		return self._engine().set_led_mode(mode, timeout)

	def set_relay_mode(self, mode: int, timeout: Optional[float] = None) -> ExchangeResult:
		return self._engine().set_relay_mode(mode, timeout)

	def set_communication_mode(
		self,
		mode: int,
		variant: CommModeVariant,
		timeout: Optional[float] = None,
	) -> ExchangeResult:
		return self._engine().set_communication_mode(mode, variant, timeout)

	# 测距
	def read_distance(self, timeout: Optional[float] = None) -> DistanceReading:
		return self._engine().read_distance(timeout)

	def poll_stream(self) -> Optional[DistanceSample]:
		self._require_open()
		return self.resync.poll_stream()

	def start_streaming(self) -> None:
		"""启动后台线程持续 poll_stream，采样通过 on_sample 回调。"""
		self._require_open()
		if not self.state.auto_upload:
			raise UploadModeError("请先 set_upload_mode(UploadMode.AUTO)")
		with self._lock:
			if self._worker is not None and self._worker.is_alive():
				return
			self._worker = StreamWorker(
				self.resync,
				sample_callback=self.on_sample.fire,
				error_callback=self._on_worker_error,
			)
			self._worker.start()
			self.logger.info("后台流读取已启动")

	def stop_streaming(self, timeout: float = 1.0) -> None:
		worker = self._worker
		if worker is None:
			return
		worker.stop()
		if worker is not threading.current_thread():
			worker.join(timeout=timeout)
		self._worker = None
		self.logger.info("后台流读取已停止")

	def is_streaming(self) -> bool:
		return self._worker is not None and self._worker.is_alive()

	def _on_worker_error(self, err: Exception) -> None:
		self.logger.error(f"后台流读取异常退出: {err}")
		self.on_error.fire(err)

	def _engine(self) -> ExchangeEngine:
		self._require_open()
		return self.engine

	def _require_open(self) -> None:
		if not self._running:
			raise TransportError("会话未打开")

	# context manager
	def __enter__(self):
		self.open()
		return self

	def __exit__(self, exc_type, exc, tb):  # noqa: D401
		self.close()
		return False


__all__ = ["SensorSession"]
