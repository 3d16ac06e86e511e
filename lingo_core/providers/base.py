"""厂商适配器抽象接口。

会话层（ChatSession）不直接依赖任何厂商的请求格式，而是依赖此协议：

- 每个厂商家族实现一个 VendorAdapter（OpenAI 兼容 / 文心 / Gemini）。
- 负责：把统一的 Message 历史转成具体 HTTP 请求，把单个帧解析为增量、
  结束信号与错误，并提供与其响应格式匹配的帧解码器。

这样可以在不改会话代码的前提下接入更多厂商。
"""

from typing import Any, Mapping, Optional, Protocol, Sequence

from lingo_core.domain.models import FrameResult, HttpRequestSpec, Message, VendorConfig
from lingo_core.streaming import FrameDecoder


class VendorAdapter(Protocol):
    """厂商适配器协议。

    实现者需要提供：
    - name: 引擎名称，用于日志。
    - terminal_on_eof: 响应体读完即视为正常结束（没有显式结束帧的厂商）。
    - resolve_config: 合并 覆盖项 > 设置 > 默认值，缺少必需项时抛 ConfigurationError。
    - build_request: 由历史消息构造请求。
    - new_decoder: 为一次调用创建新的帧解码器。
    - parse_frame: 解析单个帧，格式错误时抛 ParseError。
    - parse_error_body: 从非 2xx 响应体中提取可读错误信息。
    """

    name: str
    terminal_on_eof: bool

    def resolve_config(self, overrides: Mapping[str, Optional[str]], cfg: Any) -> VendorConfig:
        ...

    def build_request(self, history: Sequence[Message], config: VendorConfig) -> HttpRequestSpec:
        ...

    def new_decoder(self) -> FrameDecoder:
        ...

    def parse_frame(self, frame: Any) -> FrameResult:
        ...

    def parse_error_body(self, status_code: int, body: bytes) -> str:
        ...
