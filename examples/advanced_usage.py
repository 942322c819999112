"""进阶用法：

1. 自定义 mock 串口 (无硬件调试)，write 后自动生成应答帧
2. 自动上传模式下注入乱码，观察逐字节重同步
3. 调用方自己实现重试
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path

# 兼容直接运行路径
if __package__ is None and __name__ == "__main__":  # pragma: no cover
	parent = Path(__file__).resolve().parents[1]
	if str(parent) not in sys.path:
		sys.path.insert(0, str(parent))

from ultrasonic_sdk import (  # noqa: E402
	ACK_STATUS,
	CMD_READ_DISTANCE,
	Outcome,
	SensorConfig,
	SensorSession,
	UploadMode,
	build_frame,
)


class MockSerial:
	"""简化的 mock：配置命令回 0x66 确认，读距离回固定距离。"""

	def __init__(self, *_, **kwargs):
		self.timeout = kwargs.get("timeout")
		self._pending = bytearray()
		self.distance = 1500

	@property
	def in_waiting(self):
		return len(self._pending)

	def write(self, data: bytes):  # noqa: D401
		sync, cmd = data[0], data[1]
		addr = int.from_bytes(data[3:5], "big")
		if cmd == CMD_READ_DISTANCE:
			payload = self.distance.to_bytes(2, "big") + b"\x00"
		else:
			payload = bytes(data[5:7]) + bytes([ACK_STATUS])
		self._pending.extend(build_frame(cmd, addr, payload, sync=sync))

	def push(self, data: bytes):
		self._pending.extend(data)

	def read(self, n: int):  # noqa: D401
		out = bytes(self._pending[:n])
		del self._pending[:n]
		return out

	def reset_input_buffer(self):
		self._pending.clear()

	def close(self):  # noqa: D401
		pass


def read_with_retry(sensor: SensorSession, attempts: int = 3):
	for i in range(attempts):
		reading = sensor.read_distance()
		if reading.ok:
			return reading.sample
		print(f"第 {i + 1} 次读取失败: {reading.outcome.value}")
		if reading.outcome is Outcome.DEVICE_REJECTED:
			break
	return None


def demo():
	logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
	mock = MockSerial()
	cfg = SensorConfig(port="MOCK")
	with SensorSession(cfg, serial_cls=lambda *a, **kw: mock) as sensor:
		print("手动读取:", read_with_retry(sensor))

		sensor.set_upload_mode(UploadMode.AUTO)
		frame = build_frame(CMD_READ_DISTANCE, 0xFFFF, b"\x02\x58\x00")
		mock.push(b"\x62\x33\x00" + frame + b"\xAA" + frame)
		while True:
			sample = sensor.poll_stream()
			if sample is not None:
				print("流采样:", sample)
			elif sensor.resync.backlog() < 9:
				break
		print(f"有效帧 {sensor.resync.frames_ok}, 丢弃字节 {sensor.resync.bytes_discarded}")
		sensor.set_upload_mode(UploadMode.MANUAL)


if __name__ == "__main__":  # pragma: no cover
	demo()
