from .command import Command, CommandKind, CommModeVariant, ResetKind  # noqa: F401
from .distance_sample import DistanceSample  # noqa: F401
from .frame import DecodedFrame  # noqa: F401
from .outcome import DistanceReading, ExchangeResult, Outcome  # noqa: F401
from .session_state import DeviceSessionState, UploadMode  # noqa: F401

__all__ = [
	"Command",
	"CommandKind",
	"CommModeVariant",
	"ResetKind",
	"DistanceSample",
	"DecodedFrame",
	"DistanceReading",
	"ExchangeResult",
	"Outcome",
	"DeviceSessionState",
	"UploadMode",
]
