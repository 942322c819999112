"""基础用法示例。

1. 自动列出可用串口，让用户输入序号或自定义端口名
2. 手动模式下读取 5 次距离
3. 切换到自动上传模式，后台线程接收 3 秒后切回手动

运行前请确认已连接硬件；若自动扫描为空，可手动输入 (例如 COM3)。
"""
from __future__ import annotations

import logging
import os
import re
import sys
import time
from pathlib import Path

# 无论 cwd/调试/命令行，始终将项目根目录插入 sys.path
project_root = Path(__file__).resolve().parent.parent
if str(project_root) not in sys.path:
	sys.path.insert(0, str(project_root))

from serial.tools import list_ports  # noqa: E402

from ultrasonic_sdk import ENV_PORT, SensorConfig, SensorSession, UploadMode  # noqa: E402


def choose_port() -> str:
	ports = list(list_ports.comports())
	if not ports:
		print("未发现可用串口。")
		try:
			return input("请手动输入端口名 (直接回车退出，示例 COM3): ").strip()
		except KeyboardInterrupt:
			print("\n用户取消输入。")
			return ""
	print("发现以下串口:")
	for idx, p in enumerate(ports):
		print(f"[{idx}] {p.device} - {p.description or ''} ({p.hwid or ''})")
	while True:
		try:
			sel = input("请选择序号，或直接输入端口名 (回车退出): ").strip()
		except KeyboardInterrupt:
			print("\n用户取消选择。")
			return ""
		if sel == "":
			return ""
		if sel.isdigit():
			num = int(sel)
			if 0 <= num < len(ports):
				return ports[num].device
			print(f"序号无效，请输入0到{len(ports)-1}之间的数字")
			continue
		if re.match(r"^COM\d+$", sel) or re.match(r"^/dev/tty(USB|ACM|S)\d+$", sel):
			return sel
		print("端口名格式似乎不正确，请重新输入。")


def main():
	logging.basicConfig(
		format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
		level=logging.INFO,
	)
	# 方法优先级: 命令行参数 > 环境变量 ULTRASONIC_PORT > 交互选择
	if len(sys.argv) > 1:
		port = sys.argv[1].strip()
	elif os.getenv(ENV_PORT):
		port = os.getenv(ENV_PORT).strip()
	else:
		port = choose_port()
	if not port:
		print("未提供端口，退出。")
		return

	cfg = SensorConfig.from_env(port)
	print(f"打开串口 {port} ... (Ctrl+C 可安全退出)")
	try:
		with SensorSession(cfg) as sensor:
			for _ in range(5):
				reading = sensor.read_distance()
				if reading.ok:
					print(f"[DIST] {reading.sample.distance_mm} mm")
				else:
					print(f"[DIST] 失败: {reading.outcome.value}")
				time.sleep(0.2)

			if not sensor.set_upload_mode(UploadMode.AUTO).ok:
				print("切换自动上传失败")
				return
			sensor.set_upload_interval(1)
			sensor.on_sample.register(lambda s: print(f"[AUTO] {s.distance_mm} mm"))
			sensor.on_error.register(lambda err: print("[ERROR]", err))
			sensor.start_streaming()
			time.sleep(3)
			sensor.stop_streaming()
			sensor.set_upload_mode(UploadMode.MANUAL)
	except KeyboardInterrupt:
		print("\n检测到 Ctrl+C，中止示例...")
	print("已关闭串口")


if __name__ == "__main__":  # pragma: no cover
	main()
