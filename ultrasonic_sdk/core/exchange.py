"""命令/应答交换：发送一帧，等待并校验对应的应答帧。"""
from __future__ import annotations

import logging
import threading
from typing import Optional

from ..constants import BAUD_RATES, FRAME_SIZE, RESPONSE_TIMEOUT
from ..exceptions import UploadModeError
from ..models.command import Command, CommandKind, CommModeVariant, ResetKind
from ..models.distance_sample import DistanceSample
from ..models.outcome import DistanceReading, ExchangeResult, Outcome
from ..models.session_state import DeviceSessionState, UploadMode
from ..utils import CallbackRegistry, hexdump
from .frame_codec import build_frame, parse_frame
from .transport import Transport


class ExchangeEngine:
	"""单次交换只尝试一次，结果用 Outcome 表示；重试由调用方决定。

	传输层写失败 (TransportError) 直接向上抛出。设备确认后才修改会话状态：
	- SET_UPLOAD_MODE 切换上传模式并触发 on_mode_change
	- SET_ADDRESS 更新后续命令使用的地址
	- SET_BAUD 以新波特率重开串口后才返回
	"""

	def __init__(
		self,
		transport: Transport,
		state: Optional[DeviceSessionState] = None,
		timeout: float = RESPONSE_TIMEOUT,
		lock: Optional[threading.RLock] = None,
	) -> None:
		self._transport = transport
		self.state = state or DeviceSessionState()
		self.timeout = timeout
		self._lock = lock or threading.RLock()
		self.on_mode_change = CallbackRegistry("mode_change")
		self.logger = logging.getLogger(self.__class__.__name__)

	def exchange(self, command: Command, timeout: Optional[float] = None) -> ExchangeResult:
		timeout = self.timeout if timeout is None else timeout
		frame = build_frame(command.code, command.address, command.payload, sync=command.sync)
		with self._lock:
			self._transport.reset_input()
			self.logger.debug(f"TX {command.kind.name}: {hexdump(frame)}")
			self._transport.write(frame)
			try:
				raw = self._transport.read_exact(FRAME_SIZE, timeout)
			except TimeoutError as e:
				self.logger.warning(f"{command.kind.name} 等待应答超时: {e}")
				return ExchangeResult(Outcome.TIMEOUT)
			self.logger.debug(f"RX {command.kind.name}: {hexdump(raw)}")

			decoded, outcome = parse_frame(raw, command.code, expected_sync=command.sync)
			if outcome is not Outcome.SUCCESS:
				self.logger.warning(f"{command.kind.name} 应答无效: {outcome.value} ({hexdump(raw)})")
				return ExchangeResult(outcome)
			if command.expects_ack and not decoded.acknowledged:
				self.logger.warning(f"{command.kind.name} 被设备拒绝: status=0x{decoded.status:02X}")
				return ExchangeResult(Outcome.DEVICE_REJECTED, decoded)
			self._apply(command)
			return ExchangeResult(Outcome.SUCCESS, decoded)

	def _apply(self, command: Command) -> None:
		if command.kind is CommandKind.SET_UPLOAD_MODE:
			mode = UploadMode(command.payload[0])
			self.state._set_upload_mode(mode)
			self.logger.info(f"上传模式已切换为 {mode.name}")
			self.on_mode_change.fire(mode)
		elif command.kind is CommandKind.SET_ADDRESS:
			address = int.from_bytes(command.payload[:2], "big")
			self.state._set_address(address)
			self.logger.info(f"设备地址已改为 0x{address:04X}")
		elif command.kind is CommandKind.SET_BAUD:
			baudrate = BAUD_RATES[command.payload[0]]
			self.logger.info(f"设备已确认波特率 {baudrate}，重开串口")
			self._transport.reconfigure(baudrate)

	# ---------- 具体操作 ----------
	def reset(self, kind: ResetKind = ResetKind.SOFT, timeout: Optional[float] = None) -> ExchangeResult:
		return self.exchange(Command.reset(kind, address=self.state.address), timeout)

	def set_address(self, new_address: int, timeout: Optional[float] = None) -> ExchangeResult:
		return self.exchange(Command.set_address(new_address, address=self.state.address), timeout)

	def set_baud_rate(self, index: int, timeout: Optional[float] = None) -> ExchangeResult:
		"""index 0-9 对应 BAUD_RATES。成功返回时串口已按新波特率重开。"""
		return self.exchange(Command.set_baud(index, address=self.state.address), timeout)

	def set_upload_mode(self, mode: UploadMode, timeout: Optional[float] = None) -> ExchangeResult:
		return self.exchange(Command.set_upload_mode(mode, address=self.state.address), timeout)

	def set_upload_interval(self, interval: int, timeout: Optional[float] = None) -> ExchangeResult:
		"""interval 单位 100 ms。"""
		return self.exchange(Command.set_upload_interval(interval, address=self.state.address), timeout)

	def set_led_mode(self, mode: int, timeout: Optional[float] = None) -> ExchangeResult:
		return self.exchange(Command.set_led(mode, address=self.state.address), timeout)

	def set_relay_mode(self, mode: int, timeout: Optional[float] = None) -> ExchangeResult:
		return self.exchange(Command.set_relay(mode, address=self.state.address), timeout)

	def set_communication_mode(
		self,
		mode: int,
		variant: CommModeVariant,
		timeout: Optional[float] = None,
	) -> ExchangeResult:
		return self.exchange(Command.set_comm_mode(mode, variant, address=self.state.address), timeout)

	def read_distance(self, timeout: Optional[float] = None) -> DistanceReading:
		"""按需读取一次距离。自动上传模式下设备不应答，直接抛 UploadModeError。"""
		if self.state.auto_upload:
			raise UploadModeError("自动上传模式下不能按需读取距离，请先切回手动模式或使用 poll_stream")
		result = self.exchange(Command.read_distance(address=self.state.address), timeout)
		if not result.ok:
			return DistanceReading(result)
		sample = DistanceSample.from_frame(result.frame)
		self.state._set_last_sample(sample)
		return DistanceReading(result, sample)


__all__ = ["ExchangeEngine"]
