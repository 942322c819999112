"""自动上传模式下的流解析：在连续字节流中找帧边界。"""
from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from ..constants import CMD_READ_DISTANCE, DEFAULT_TIMEOUT, FRAME_SIZE, FRAME_SYNC, STREAM_POLL_INTERVAL
from ..exceptions import UploadModeError
from ..models.distance_sample import DistanceSample
from ..models.outcome import Outcome
from ..models.session_state import DeviceSessionState
from ..utils import StoppableThread, hexdump
from .frame_codec import parse_frame
from .transport import Transport


class StreamResynchronizer:
	"""逐次轮询，每次最多解析出一个距离帧。

	窗口内 9 字节校验失败时只丢弃 1 字节，下次轮询从下一个位置继续找，
	因此任意位置的损坏/丢字节最多丢弃 9 字节就能重新对齐。
	窗口最多保存一帧，轮询慢于设备上传时积压留在串口驱动缓冲里。
	"""

	def __init__(
		self,
		transport: Transport,
		state: DeviceSessionState,
		lock: Optional[threading.RLock] = None,
		read_timeout: float = DEFAULT_TIMEOUT,
	) -> None:
		self._transport = transport
		self.state = state
		self._lock = lock or threading.RLock()
		self.read_timeout = read_timeout
		self._buf = bytearray()
		self.frames_ok = 0
		self.bytes_discarded = 0
		self.logger = logging.getLogger(self.__class__.__name__)

	def poll_stream(self) -> Optional[DistanceSample]:
		"""不阻塞：字节不足一帧时直接返回 None。"""
		with self._lock:
			if not self.state.auto_upload:
				raise UploadModeError("poll_stream 只能在自动上传模式下调用")
			self._fill()
			if len(self._buf) < FRAME_SIZE:
				return None
			window = bytes(self._buf[:FRAME_SIZE])
			decoded, outcome = parse_frame(window, CMD_READ_DISTANCE, expected_sync=FRAME_SYNC)
			if outcome is not Outcome.SUCCESS:
				del self._buf[0]
				self.bytes_discarded += 1
				self.logger.debug(f"丢弃 1 字节 ({outcome.value}): {hexdump(window)}")
				return None
			del self._buf[:FRAME_SIZE]
			self.frames_ok += 1
		sample = DistanceSample.from_frame(decoded)
		self.state._set_last_sample(sample)
		return sample

	def reset(self, *_args) -> None:
		"""清空窗口缓冲 (上传模式切换时调用)。"""
		with self._lock:
			if self._buf:
				self.logger.debug(f"清空流缓冲 {len(self._buf)} 字节")
			self._buf.clear()

	@property
	def buffered(self) -> int:
		return len(self._buf)

	def backlog(self) -> int:
		"""窗口缓冲加串口驱动缓冲中尚未解析的字节数。"""
		with self._lock:
			return len(self._buf) + self._transport.bytes_available()

	def _fill(self) -> None:
		# 窗口最多一帧，其余留在驱动缓冲
		want = min(self._transport.bytes_available(), FRAME_SIZE - len(self._buf))
		if want <= 0:
			return
		self._buf.extend(self._transport.read_exact(want, self.read_timeout))


class StreamWorker(StoppableThread):
	"""后台线程，持续调用 poll_stream，把采样交给回调。"""

	def __init__(
		self,
		resync: StreamResynchronizer,
		sample_callback: Callable[[DistanceSample], None],
		error_callback: Callable[[Exception], None],
		idle_interval: float = STREAM_POLL_INTERVAL,
	) -> None:
		super().__init__(name="StreamWorker")
		self._resync = resync
		self._sample_cb = sample_callback
		self._err_cb = error_callback
		self._idle = idle_interval

	def run(self):
		while not self.stopped:
			try:
				sample = self._resync.poll_stream()
			except UploadModeError:
				# 已切回手动模式
				break
			except Exception as e:  # noqa: BLE001
				self._err_cb(e)
				break
			if sample is not None:
				self._sample_cb(sample)
			elif self._resync.backlog() < FRAME_SIZE:
				# 积压不足一帧时才休眠，丢字节重同步期间连续轮询
				self.wait(self._idle)


__all__ = ["StreamResynchronizer", "StreamWorker"]
