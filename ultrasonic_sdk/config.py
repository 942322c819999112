"""串口与会话配置。"""
from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Optional

from .constants import (
	BAUD_SETTLE_DELAY,
	BROADCAST_ADDRESS,
	DEFAULT_BAUDRATE,
	DEFAULT_TIMEOUT,
	DEFAULT_WRITE_TIMEOUT,
	ENV_BAUDRATE,
	ENV_PORT,
	RESPONSE_TIMEOUT,
)


@dataclass
class SensorConfig:
	port: str
	baudrate: int = DEFAULT_BAUDRATE
	timeout: float = DEFAULT_TIMEOUT
	write_timeout: float = DEFAULT_WRITE_TIMEOUT
	response_timeout: float = RESPONSE_TIMEOUT
	address: int = BROADCAST_ADDRESS
	settle_delay: float = BAUD_SETTLE_DELAY

	@classmethod
	def from_env(cls, port: Optional[str] = None, **overrides) -> "SensorConfig":
		"""优先级: 参数 > 环境变量 ULTRASONIC_PORT / ULTRASONIC_BAUD > 默认值。"""
		port = port or (os.getenv(ENV_PORT) or "").strip()
		if not port:
			raise ValueError(f"未提供串口，请传入 port 或设置环境变量 {ENV_PORT}")
		baud = os.getenv(ENV_BAUDRATE)
		if baud and "baudrate" not in overrides:
			overrides["baudrate"] = int(baud)
		return cls(port=port, **overrides)


__all__ = ["SensorConfig"]
