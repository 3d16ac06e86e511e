"""统一业务异常模型。

所有跨模块抛出的业务级错误都应该继承自 BusinessError，
便于会话层统一捕获，并转成 notify 提示与 on_error 回调。

注意：用户主动取消（abort/clear）不属于错误，不在这里建模。
"""


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "MISSING_API_KEY"）。
        message: 用户可读错误信息。
        http_status: 映射到 HTTP 时可用的状态码，默认 400。
        extra: 其他补充字段（例如 engine、url 等）。
    """

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class ConfigurationError(BusinessError):
    """必需的密钥/地址缺失，必须在任何网络请求之前短路。"""


class TransportError(BusinessError):
    """网络失败或厂商返回非 2xx 状态码。"""


class VendorStreamError(BusinessError):
    """成功的流中夹带了厂商错误对象，本次调用就此终止。"""


class ParseError(BusinessError):
    """帧无法解析为结构化数据，对当前调用是致命错误，不重试。"""


class SessionBusyError(BusinessError):
    """会话已有请求在进行中时再次调用 send。"""
