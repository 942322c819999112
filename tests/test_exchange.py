import pytest

from ultrasonic_sdk.constants import ACK_STATUS, CMD_READ_DISTANCE, CMD_SET_BAUD, CMD_SET_UPLOAD_MODE
from ultrasonic_sdk.core.exchange import ExchangeEngine
from ultrasonic_sdk.core.frame_codec import build_frame
from ultrasonic_sdk.exceptions import (
	ChecksumError,
	DeviceRejectedError,
	ExchangeTimeoutError,
	ParameterError,
	TransportError,
	UploadModeError,
)
from ultrasonic_sdk.models.command import CommModeVariant, ResetKind
from ultrasonic_sdk.models.outcome import Outcome
from ultrasonic_sdk.models.session_state import DeviceSessionState, UploadMode


class FakeTransport:
	"""按顺序返回预设应答；没有应答时模拟超时。"""

	def __init__(self, responses=None, fail_write=False):
		self.responses = list(responses or [])
		self.fail_write = fail_write
		self.written = []
		self.reconfigured = []
		self.resets = 0

	def write(self, data: bytes):
		if self.fail_write:
			raise TransportError("写失败")
		self.written.append(bytes(data))

	def read_exact(self, n: int, timeout: float) -> bytes:
		if not self.responses:
			raise ExchangeTimeoutError("no data")
		return self.responses.pop(0)

	def bytes_available(self) -> int:
		return 0

	def reconfigure(self, baudrate: int):
		self.reconfigured.append(baudrate)

	def reset_input(self):
		self.resets += 1

	def close(self):
		pass


def ack(cmd, value=0, status=ACK_STATUS, sync=0x62, addr=0xFFFF):
	return build_frame(cmd, addr, bytes([value >> 8, value & 0xFF, status]), sync=sync)


def test_exchange_success_writes_frame():
	tr = FakeTransport([ack(0x37)])
	engine = ExchangeEngine(tr)
	result = engine.set_led_mode(1)
	assert result.outcome is Outcome.SUCCESS
	assert result.frame.acknowledged
	assert tr.written == [build_frame(0x37, 0xFFFF, b"\x01")]
	assert tr.resets == 1


def test_device_rejected_is_distinct_outcome():
	tr = FakeTransport([ack(0x38, status=0x00)])
	result = ExchangeEngine(tr).set_relay_mode(1)
	assert result.outcome is Outcome.DEVICE_REJECTED
	assert result.frame is not None
	with pytest.raises(DeviceRejectedError):
		result.raise_for_outcome()


def test_checksum_error_outcome():
	bad = bytearray(ack(0x35))
	bad[5] ^= 0x10
	result = ExchangeEngine(FakeTransport([bytes(bad)])).set_upload_interval(10)
	assert result.outcome is Outcome.CHECKSUM_ERROR
	with pytest.raises(ChecksumError):
		result.raise_for_outcome()


def test_response_error_on_wrong_command():
	result = ExchangeEngine(FakeTransport([ack(0x37)])).set_relay_mode(0)
	assert result.outcome is Outcome.RESPONSE_ERROR


def test_timeout_outcome():
	result = ExchangeEngine(FakeTransport()).reset(ResetKind.HARD)
	assert result.outcome is Outcome.TIMEOUT
	with pytest.raises(TimeoutError):
		result.raise_for_outcome()


def test_write_failure_propagates():
	engine = ExchangeEngine(FakeTransport(fail_write=True))
	with pytest.raises(TransportError):
		engine.set_led_mode(0)


def test_upload_mode_flips_only_after_ack():
	state = DeviceSessionState()
	changes = []
	engine = ExchangeEngine(FakeTransport([ack(CMD_SET_UPLOAD_MODE, status=0x00)]), state)
	engine.on_mode_change.register(changes.append)
	assert engine.set_upload_mode(UploadMode.AUTO).outcome is Outcome.DEVICE_REJECTED
	assert state.upload_mode is UploadMode.MANUAL
	assert changes == []

	engine = ExchangeEngine(FakeTransport([ack(CMD_SET_UPLOAD_MODE)]), state)
	engine.on_mode_change.register(changes.append)
	assert engine.set_upload_mode(UploadMode.AUTO).ok
	assert state.upload_mode is UploadMode.AUTO
	assert changes == [UploadMode.AUTO]


def test_upload_mode_unchanged_on_timeout():
	state = DeviceSessionState()
	ExchangeEngine(FakeTransport(), state).set_upload_mode(UploadMode.AUTO)
	assert not state.auto_upload


def test_baud_change_reconfigures_transport_on_success():
	tr = FakeTransport([ack(CMD_SET_BAUD)])
	result = ExchangeEngine(tr).set_baud_rate(9)
	assert result.ok
	assert tr.reconfigured == [460800]


@pytest.mark.parametrize("outcome_frame", [None, "reject"])
def test_baud_change_not_applied_on_failure(outcome_frame):
	responses = [] if outcome_frame is None else [ack(CMD_SET_BAUD, status=0x01)]
	tr = FakeTransport(responses)
	assert not ExchangeEngine(tr).set_baud_rate(0).ok
	assert tr.reconfigured == []


def test_baud_index_table():
	for index, baud in enumerate([1200, 2400, 4800, 9600, 19200, 38400, 57600, 115200, 230400, 460800]):
		tr = FakeTransport([ack(CMD_SET_BAUD)])
		ExchangeEngine(tr).set_baud_rate(index)
		assert tr.reconfigured == [baud]


def test_set_address_updates_target_address():
	state = DeviceSessionState()
	tr = FakeTransport([ack(0x32), ack(0x37, addr=0x1234)])
	engine = ExchangeEngine(tr, state)
	assert engine.set_address(0x1234).ok
	assert state.address == 0x1234
	engine.set_led_mode(1)
	assert tr.written[1][3:5] == b"\x12\x34"


def test_set_address_parameter_error_sends_nothing():
	tr = FakeTransport()
	with pytest.raises(ParameterError):
		ExchangeEngine(tr).set_address(0xFFFF)
	assert tr.written == []


def test_comm_mode_variant_a_uses_alt_sync():
	tr = FakeTransport([ack(0x30, sync=0x61)])
	result = ExchangeEngine(tr).set_communication_mode(2, CommModeVariant.A)
	assert result.ok
	assert tr.written[0][:2] == b"\x61\x30"


def test_comm_mode_variant_b():
	tr = FakeTransport([ack(0x31)])
	assert ExchangeEngine(tr).set_communication_mode(2, CommModeVariant.B).ok
	assert tr.written[0][:2] == b"\x62\x31"


def test_read_distance_returns_sample():
	state = DeviceSessionState()
	tr = FakeTransport([ack(CMD_READ_DISTANCE, value=1500, status=0x00, addr=0x0001)])
	reading = ExchangeEngine(tr, state).read_distance()
	assert reading.ok
	assert reading.sample.distance_mm == 1500
	assert reading.sample.address == 0x0001
	assert state.last_sample == reading.sample
	assert reading.raise_for_outcome() is reading.sample


def test_read_distance_failure_keeps_last_sample():
	state = DeviceSessionState()
	reading = ExchangeEngine(FakeTransport(), state).read_distance()
	assert reading.outcome is Outcome.TIMEOUT
	assert reading.sample is None
	assert state.last_sample is None


def test_read_distance_refused_in_auto_mode():
	state = DeviceSessionState(upload_mode=UploadMode.AUTO)
	tr = FakeTransport([ack(CMD_READ_DISTANCE)])
	with pytest.raises(UploadModeError):
		ExchangeEngine(tr, state).read_distance()
	assert tr.written == []
