"""SDK 常量定义。

超声波测距模块使用固定 9 字节帧 (请求与应答格式相同)：

| Sync(1) | Cmd(1) | Len(1) | AddrHi(1) | AddrLo(1) | Data0(1) | Data1(1) | Status(1) | XOR(1) |

Sync: 通常为 0x62 (通讯模式命令的一个变体使用 0x61)
Len:  固定 0x09，只是标记，不参与解析
Addr: 设备地址，大端；0xFFFF 为广播
Data: 命令参数 / 应答中的距离值 (大端, mm)
Status: 配置命令应答中 0x66 表示设备确认
XOR:  对前 8 字节做异或
"""

FRAME_SYNC = 0x62
FRAME_SYNC_ALT = 0x61
FRAME_LEN_MARKER = 0x09
FRAME_SIZE = 9
MAX_PAYLOAD = 3  # Data0 / Data1 / Status 三个字节

ACK_STATUS = 0x66

# 命令码
CMD_SET_BAUD = 0x30
CMD_SET_COMM_MODE = 0x31
CMD_SET_ADDRESS = 0x32
CMD_READ_DISTANCE = 0x33
CMD_SET_UPLOAD_MODE = 0x34
CMD_SET_UPLOAD_INTERVAL = 0x35
CMD_SET_LED = 0x37
CMD_SET_RELAY = 0x38
CMD_RESET = 0x39

# 通讯模式命令的另一种编码 (sync=0x61, cmd=0x30)
CMD_SET_COMM_MODE_ALT = 0x30

RESET_HARD = 0xFE
RESET_SOFT = 0xFD

UPLOAD_MODE_MANUAL = 0x00
UPLOAD_MODE_AUTO = 0x01

# 地址
BROADCAST_ADDRESS = 0xFFFF
MAX_DEVICE_ADDRESS = 0xFFFE

# 波特率索引表 (索引即 SetBaud 命令的参数)
BAUD_RATES = (1200, 2400, 4800, 9600, 19200, 38400, 57600, 115200, 230400, 460800)

# 上传间隔单位 (秒)，参数范围 1-255
UPLOAD_INTERVAL_UNIT = 0.1
MIN_UPLOAD_INTERVAL = 1
MAX_UPLOAD_INTERVAL = 0xFF

# 默认串口参数
DEFAULT_BAUDRATE = 9600
DEFAULT_TIMEOUT = 0.05  # 串口 read timeout
DEFAULT_WRITE_TIMEOUT = 0.2

# 等待应答超时
RESPONSE_TIMEOUT = 1.0

# 修改波特率后关闭/重开串口之间的等待
BAUD_SETTLE_DELAY = 0.1

# 后台流读取线程空闲等待
STREAM_POLL_INTERVAL = 0.01

# 环境变量
ENV_PORT = "ULTRASONIC_PORT"
ENV_BAUDRATE = "ULTRASONIC_BAUD"

__all__ = [
	"FRAME_SYNC",
	"FRAME_SYNC_ALT",
	"FRAME_LEN_MARKER",
	"FRAME_SIZE",
	"MAX_PAYLOAD",
	"ACK_STATUS",
	"CMD_SET_BAUD",
	"CMD_SET_COMM_MODE",
	"CMD_SET_ADDRESS",
	"CMD_READ_DISTANCE",
	"CMD_SET_UPLOAD_MODE",
	"CMD_SET_UPLOAD_INTERVAL",
	"CMD_SET_LED",
	"CMD_SET_RELAY",
	"CMD_RESET",
	"CMD_SET_COMM_MODE_ALT",
	"RESET_HARD",
	"RESET_SOFT",
	"UPLOAD_MODE_MANUAL",
	"UPLOAD_MODE_AUTO",
	"BROADCAST_ADDRESS",
	"MAX_DEVICE_ADDRESS",
	"BAUD_RATES",
	"UPLOAD_INTERVAL_UNIT",
	"MIN_UPLOAD_INTERVAL",
	"MAX_UPLOAD_INTERVAL",
	"DEFAULT_BAUDRATE",
	"DEFAULT_TIMEOUT",
	"DEFAULT_WRITE_TIMEOUT",
	"RESPONSE_TIMEOUT",
	"BAUD_SETTLE_DELAY",
	"STREAM_POLL_INTERVAL",
	"ENV_PORT",
	"ENV_BAUDRATE",
]
