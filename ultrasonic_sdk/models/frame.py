"""解码后的帧字段。"""
from __future__ import annotations

from dataclasses import dataclass

from ..constants import ACK_STATUS


@dataclass(frozen=True, slots=True)
class DecodedFrame:
	"""通过同步字节、命令码和校验的 9 字节帧。

	address: 字节 3-4 (大端)
	value:   字节 5-6 (大端)，距离帧中即距离 mm
	status:  字节 7，配置应答中 0x66 为确认
	"""

	sync: int
	cmd: int
	address: int
	value: int
	status: int
	raw: bytes

	@property
	def acknowledged(self) -> bool:
		return self.status == ACK_STATUS

	def __repr__(self) -> str:  # pragma: no cover - 简单 repr
		return (
			f"DecodedFrame(cmd=0x{self.cmd:02X}, addr=0x{self.address:04X}, "
			f"value={self.value}, status=0x{self.status:02X})"
		)


__all__ = ["DecodedFrame"]
