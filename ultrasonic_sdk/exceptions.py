"""自定义异常类型。"""

class UltrasonicError(Exception):
	"""SDK 基础异常。"""


class TransportError(UltrasonicError):
	"""串口打开、读写或重配置失败。"""


class ExchangeTimeoutError(UltrasonicError, TimeoutError):
	"""在超时时间内没有收到完整的 9 字节帧。"""


class ProtocolError(UltrasonicError):
	"""协议帧格式错误。"""


class ChecksumError(ProtocolError):
	"""XOR 校验失败。"""


class ResponseError(ProtocolError):
	"""同步字节或命令码与期望不符。"""


class DeviceRejectedError(UltrasonicError):
	"""帧结构正确，但设备未返回确认 (0x66)。"""


class ParameterError(UltrasonicError, ValueError):
	"""命令参数超出协议范围。"""


class UploadModeError(UltrasonicError):
	"""当前上传模式下不允许该操作。"""


__all__ = [
	"UltrasonicError",
	"TransportError",
	"ExchangeTimeoutError",
	"ProtocolError",
	"ChecksumError",
	"ResponseError",
	"DeviceRejectedError",
	"ParameterError",
	"UploadModeError",
]
