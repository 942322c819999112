import time

import pytest

from ultrasonic_sdk.constants import CMD_READ_DISTANCE
from ultrasonic_sdk.core.frame_codec import build_frame
from ultrasonic_sdk.core.stream_reader import StreamResynchronizer, StreamWorker
from ultrasonic_sdk.exceptions import UploadModeError
from ultrasonic_sdk.models.session_state import DeviceSessionState, UploadMode


class StreamTransport:
	"""模拟自动上传时的接收缓冲。"""

	def __init__(self, data: bytes = b""):
		self._data = bytearray(data)

	def feed(self, data: bytes):
		self._data.extend(data)

	def bytes_available(self) -> int:
		return len(self._data)

	def read_exact(self, n: int, timeout: float) -> bytes:
		out = bytes(self._data[:n])
		del self._data[:n]
		return out


def distance_frame(mm: int, addr: int = 0xFFFF) -> bytes:
	return build_frame(CMD_READ_DISTANCE, addr, bytes([mm >> 8, mm & 0xFF, 0x00]))


def corrupted(frame: bytes) -> bytes:
	bad = bytearray(frame)
	bad[8] ^= 0x5A
	return bytes(bad)


def make_resync(data: bytes = b""):
	state = DeviceSessionState(upload_mode=UploadMode.AUTO)
	tr = StreamTransport(data)
	return StreamResynchronizer(tr, state), tr, state


def test_poll_returns_none_until_full_frame():
	frame = distance_frame(800)
	resync, tr, _ = make_resync(frame[:5])
	assert resync.poll_stream() is None
	assert resync.bytes_discarded == 0
	tr.feed(frame[5:])
	sample = resync.poll_stream()
	assert sample.distance_mm == 800


def test_valid_frame_updates_state():
	resync, _, state = make_resync(distance_frame(1234, addr=0x0002))
	sample = resync.poll_stream()
	assert sample.distance_mm == 1234
	assert sample.address == 0x0002
	assert state.last_sample == sample
	assert resync.frames_ok == 1


def test_valid_then_corrupted_frame():
	resync, _, _ = make_resync(distance_frame(500) + corrupted(distance_frame(600)))
	assert resync.poll_stream().distance_mm == 500
	assert resync.poll_stream() is None
	assert resync.bytes_discarded == 1
	# 剩余 8 字节不足一帧，不再丢弃
	for _ in range(5):
		assert resync.poll_stream() is None
	assert resync.bytes_discarded == 1


def test_recovers_after_corrupted_frame_within_one_frame():
	resync, _, _ = make_resync(
		distance_frame(500) + corrupted(distance_frame(600)) + distance_frame(700)
	)
	samples = []
	for _ in range(20):
		s = resync.poll_stream()
		if s is not None:
			samples.append(s.distance_mm)
	assert samples == [500, 700]
	assert resync.bytes_discarded == 9


@pytest.mark.parametrize("garbage_len", range(1, 9))
def test_leading_garbage_discarded_byte_by_byte(garbage_len):
	garbage = bytes([0xAA] * garbage_len)
	resync, _, _ = make_resync(garbage + distance_frame(321))
	results = [resync.poll_stream() for _ in range(garbage_len + 1)]
	assert all(r is None for r in results[:-1])
	assert results[-1].distance_mm == 321
	assert resync.bytes_discarded == garbage_len


def test_dropped_byte_recovery_bounded():
	frame = distance_frame(900)
	truncated = frame[:3] + frame[4:]  # 丢失一个字节
	resync, _, _ = make_resync(truncated + frame + frame)
	samples = []
	for _ in range(30):
		s = resync.poll_stream()
		if s is not None:
			samples.append(s)
	assert len(samples) == 2
	assert resync.bytes_discarded <= 9


def test_window_holds_at_most_one_frame():
	frames = b"".join(distance_frame(mm) for mm in (10, 20, 30, 40, 50))
	resync, tr, _ = make_resync(frames)
	assert resync.poll_stream().distance_mm == 10
	assert resync.buffered == 0
	assert tr.bytes_available() == 36
	assert resync.backlog() == 36
	rest = [resync.poll_stream().distance_mm for _ in range(4)]
	assert rest == [20, 30, 40, 50]
	assert resync.backlog() == 0


def test_window_bounded_during_resync():
	resync, _, _ = make_resync(b"\xAA" * 40 + distance_frame(77))
	samples = []
	for _ in range(60):
		s = resync.poll_stream()
		assert resync.buffered <= 9
		if s is not None:
			samples.append(s.distance_mm)
	assert samples == [77]
	assert resync.bytes_discarded == 40


def test_poll_requires_auto_mode():
	resync, _, state = make_resync(distance_frame(1))
	state._set_upload_mode(UploadMode.MANUAL)
	with pytest.raises(UploadModeError):
		resync.poll_stream()


def test_reset_clears_window():
	resync, _, _ = make_resync(b"\x62\x33\x09")
	resync.poll_stream()
	assert resync.buffered == 3
	resync.reset()
	assert resync.buffered == 0


def test_stream_worker_delivers_samples():
	resync, tr, state = make_resync(distance_frame(100) + b"\x00" + distance_frame(200))
	received = []
	errors = []
	worker = StreamWorker(resync, received.append, errors.append, idle_interval=0.005)
	worker.start()
	time.sleep(0.1)
	tr.feed(distance_frame(300))
	time.sleep(0.1)
	worker.stop()
	worker.join(timeout=1)
	assert [s.distance_mm for s in received] == [100, 200, 300]
	assert errors == []


def test_stream_worker_exits_when_mode_switched():
	resync, _, state = make_resync()
	errors = []
	worker = StreamWorker(resync, lambda s: None, errors.append, idle_interval=0.005)
	worker.start()
	state._set_upload_mode(UploadMode.MANUAL)
	worker.join(timeout=1)
	assert not worker.is_alive()
	assert errors == []
