"""命令模型。

每种设备操作对应一个 CommandKind，并只能通过 Command 的同名类方法构造，
参数在构造时校验，超出协议范围抛 ParameterError。
"""
from __future__ import annotations

from dataclasses import dataclass
import enum

from ..constants import (
	BAUD_RATES,
	BROADCAST_ADDRESS,
	CMD_READ_DISTANCE,
	CMD_RESET,
	CMD_SET_ADDRESS,
	CMD_SET_BAUD,
	CMD_SET_COMM_MODE,
	CMD_SET_COMM_MODE_ALT,
	CMD_SET_LED,
	CMD_SET_RELAY,
	CMD_SET_UPLOAD_INTERVAL,
	CMD_SET_UPLOAD_MODE,
	FRAME_SYNC,
	FRAME_SYNC_ALT,
	MAX_DEVICE_ADDRESS,
	MAX_PAYLOAD,
	MAX_UPLOAD_INTERVAL,
	MIN_UPLOAD_INTERVAL,
	RESET_HARD,
	RESET_SOFT,
)
from ..exceptions import ParameterError
from ..utils import check_byte
from .session_state import UploadMode


class CommandKind(enum.Enum):
	RESET = "reset"
	SET_ADDRESS = "set_address"
	SET_BAUD = "set_baud"
	SET_UPLOAD_MODE = "set_upload_mode"
	SET_UPLOAD_INTERVAL = "set_upload_interval"
	SET_LED = "set_led"
	SET_RELAY = "set_relay"
	SET_COMM_MODE = "set_comm_mode"
	READ_DISTANCE = "read_distance"


class ResetKind(enum.IntEnum):
	HARD = RESET_HARD
	SOFT = RESET_SOFT


class CommModeVariant(enum.Enum):
	"""通讯模式命令的两种已知编码 (sync, cmd)，哪一种正确需实机确认。"""

	A = (FRAME_SYNC_ALT, CMD_SET_COMM_MODE_ALT)
	B = (FRAME_SYNC, CMD_SET_COMM_MODE)

	@property
	def sync(self) -> int:
		return self.value[0]

	@property
	def code(self) -> int:
		return self.value[1]


@dataclass(frozen=True, slots=True)
class Command:
	"""表示一个待发送命令。

	kind:    操作类型
	code:    命令码 (1 字节)
	sync:    同步字节，与 code 成对使用
	address: 目标设备地址，0xFFFF 为广播
	payload: 0-3 字节参数，依次放入 Data0 / Data1 / Status
	"""

	kind: CommandKind
	code: int
	sync: int = FRAME_SYNC
	address: int = BROADCAST_ADDRESS
	payload: bytes = b""

	def __post_init__(self):
		check_byte("command code", self.code)
		check_byte("sync", self.sync)
		check_byte("address", self.address, 0, 0xFFFF)
		if len(self.payload) > MAX_PAYLOAD:
			raise ParameterError(f"payload 最多 {MAX_PAYLOAD} 字节，实际 {len(self.payload)}")

	@property
	def expects_ack(self) -> bool:
		"""配置命令需要设备返回 0x66 确认，读距离命令不需要。"""
		return self.kind is not CommandKind.READ_DISTANCE

	# ---------- 构造 ----------
	@classmethod
	def reset(cls, kind: ResetKind = ResetKind.SOFT, address: int = BROADCAST_ADDRESS) -> "Command":
		kind = ResetKind(kind)
		return cls(CommandKind.RESET, CMD_RESET, address=address, payload=bytes([kind]))

	@classmethod
	def set_address(cls, new_address: int, address: int = BROADCAST_ADDRESS) -> "Command":
		check_byte("new address", new_address, 0, MAX_DEVICE_ADDRESS)
		return cls(
			CommandKind.SET_ADDRESS,
			CMD_SET_ADDRESS,
			address=address,
			payload=new_address.to_bytes(2, "big"),
		)

	@classmethod
	def set_baud(cls, index: int, address: int = BROADCAST_ADDRESS) -> "Command":
		check_byte("baud index", index, 0, len(BAUD_RATES) - 1)
		return cls(CommandKind.SET_BAUD, CMD_SET_BAUD, address=address, payload=bytes([index]))

	@classmethod
	def set_upload_mode(cls, mode: UploadMode, address: int = BROADCAST_ADDRESS) -> "Command":
		try:
			mode = UploadMode(mode)
		except ValueError as e:
			raise ParameterError(f"未知上传模式: {mode!r}") from e
		return cls(CommandKind.SET_UPLOAD_MODE, CMD_SET_UPLOAD_MODE, address=address, payload=bytes([mode]))

	@classmethod
	def set_upload_interval(cls, interval: int, address: int = BROADCAST_ADDRESS) -> "Command":
		check_byte("upload interval", interval, MIN_UPLOAD_INTERVAL, MAX_UPLOAD_INTERVAL)
		return cls(
			CommandKind.SET_UPLOAD_INTERVAL,
			CMD_SET_UPLOAD_INTERVAL,
			address=address,
			payload=bytes([interval]),
		)

	@classmethod
	def set_led(cls, mode: int, address: int = BROADCAST_ADDRESS) -> "Command":
		check_byte("led mode", mode)
		return cls(CommandKind.SET_LED, CMD_SET_LED, address=address, payload=bytes([mode]))

	@classmethod
	def set_relay(cls, mode: int, address: int = BROADCAST_ADDRESS) -> "Command":
		check_byte("relay mode", mode)
		return cls(CommandKind.SET_RELAY, CMD_SET_RELAY, address=address, payload=bytes([mode]))

	@classmethod
	def set_comm_mode(cls, mode: int, variant: CommModeVariant, address: int = BROADCAST_ADDRESS) -> "Command":
		if not isinstance(variant, CommModeVariant):
			raise ParameterError(f"必须显式指定 CommModeVariant，实际为 {variant!r}")
		check_byte("comm mode", mode)
		return cls(
			CommandKind.SET_COMM_MODE,
			variant.code,
			sync=variant.sync,
			address=address,
			payload=bytes([mode]),
		)

	@classmethod
	def read_distance(cls, address: int = BROADCAST_ADDRESS) -> "Command":
		return cls(CommandKind.READ_DISTANCE, CMD_READ_DISTANCE, address=address)

	def __repr__(self) -> str:  # pragma: no cover - 简单 repr
		return (
			f"Command({self.kind.name}, sync=0x{self.sync:02X}, code=0x{self.code:02X}, "
			f"addr=0x{self.address:04X}, payload={self.payload.hex()})"
		)


__all__ = ["Command", "CommandKind", "ResetKind", "CommModeVariant"]
