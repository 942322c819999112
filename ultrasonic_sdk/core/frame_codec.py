"""9 字节帧的构造与解析 (纯函数)。"""
from __future__ import annotations

from functools import reduce
from operator import xor
from typing import Iterable, Optional, Tuple

from ..constants import FRAME_LEN_MARKER, FRAME_SIZE, FRAME_SYNC, MAX_PAYLOAD
from ..exceptions import ParameterError
from ..models.frame import DecodedFrame
from ..models.outcome import Outcome
from ..utils import check_byte


def checksum(data: Iterable[int]) -> int:
	"""对所有字节做异或。构造和解析共用，对 9 字节完整帧结果为 0。"""
	return reduce(xor, data, 0)


def build_frame(cmd: int, addr: int, payload: bytes | Iterable[int] = b"", sync: int = FRAME_SYNC) -> bytes:
	check_byte("cmd", cmd)
	check_byte("sync", sync)
	check_byte("addr", addr, 0, 0xFFFF)
	payload = bytes(payload)
	if len(payload) > MAX_PAYLOAD:
		raise ParameterError(f"payload 最多 {MAX_PAYLOAD} 字节，实际 {len(payload)}")
	body = bytes([sync, cmd, FRAME_LEN_MARKER, (addr >> 8) & 0xFF, addr & 0xFF])
	body += payload.ljust(MAX_PAYLOAD, b"\x00")
	return body + bytes([checksum(body)])


def parse_frame(
	frame: bytes,
	expected_cmd: int,
	expected_sync: int = FRAME_SYNC,
) -> Tuple[Optional[DecodedFrame], Outcome]:
	"""校验并解码一帧。

	顺序：长度 (RESPONSE_ERROR) -> XOR 校验 (CHECKSUM_ERROR) -> 同步字节/命令码 (RESPONSE_ERROR)。
	前 8 字节任意单比特翻转都由校验发现。
	Len 字节固定为 0x09，这里不检查。Status 字节是否为确认由调用方判断。
	"""
	frame = bytes(frame)
	if len(frame) != FRAME_SIZE:
		return None, Outcome.RESPONSE_ERROR
	if checksum(frame[:8]) != frame[8]:
		return None, Outcome.CHECKSUM_ERROR
	if frame[0] != expected_sync or frame[1] != expected_cmd:
		return None, Outcome.RESPONSE_ERROR
	decoded = DecodedFrame(
		sync=frame[0],
		cmd=frame[1],
		address=int.from_bytes(frame[3:5], "big"),
		value=int.from_bytes(frame[5:7], "big"),
		status=frame[7],
		raw=frame,
	)
	return decoded, Outcome.SUCCESS


__all__ = ["checksum", "build_frame", "parse_frame"]
