from .exchange import ExchangeEngine  # noqa: F401
from .frame_codec import build_frame, checksum, parse_frame  # noqa: F401
from .sensor_session import SensorSession  # noqa: F401
from .stream_reader import StreamResynchronizer, StreamWorker  # noqa: F401
from .transport import SerialTransport, Transport  # noqa: F401

__all__ = [
	"ExchangeEngine",
	"build_frame",
	"checksum",
	"parse_frame",
	"SensorSession",
	"StreamResynchronizer",
	"StreamWorker",
	"SerialTransport",
	"Transport",
]
