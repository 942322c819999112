"""超声波测距模块 Python SDK。"""

from .constants import *  # noqa: F401,F403
from .exceptions import *  # noqa: F401,F403
from .config import SensorConfig  # noqa: F401
from .core.sensor_session import SensorSession  # noqa: F401
from .core.exchange import ExchangeEngine  # noqa: F401
from .core.frame_codec import build_frame, checksum, parse_frame  # noqa: F401
from .core.transport import SerialTransport, Transport  # noqa: F401
from .models import (  # noqa: F401
	Command,
	CommandKind,
	CommModeVariant,
	DistanceReading,
	DistanceSample,
	ExchangeResult,
	Outcome,
	ResetKind,
	UploadMode,
)

__version__ = "1.0.0"

__all__ = [
	"SensorSession",
	"SensorConfig",
	"ExchangeEngine",
	"SerialTransport",
	"Transport",
	"build_frame",
	"checksum",
	"parse_frame",
	"Command",
	"CommandKind",
	"CommModeVariant",
	"DistanceReading",
	"DistanceSample",
	"ExchangeResult",
	"Outcome",
	"ResetKind",
	"UploadMode",
]
