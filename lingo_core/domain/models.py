"""统一的对话与请求数据模型。

本模块定义了会话层与各厂商适配器之间共享的标准数据结构：

- Message: 一条对话消息（system/user/assistant）。
- SessionStatus: 会话状态机的状态。
- VendorConfig: 一次调用实际使用的地址/密钥/模型。
- HttpRequestSpec: 适配器构造出的 HTTP 请求（url/headers/body）。
- FrameResult: 适配器从单个帧中解析出的增量、结束信号与错误。

所有适配器都必须只依赖这些模型，并负责在各自的 API JSON 和这些模型之间做转换。
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Literal, Optional


# 消息角色（与 OpenAI 风格的 role 字段对应）
Role = Literal["system", "user", "assistant"]


@dataclass
class Message:
    """一条对话消息。

    - role: 消息角色。
    - content: 纯文本内容；流式生成时只有最后一条 assistant 消息会被追加。
    - is_error: 该消息是否为错误提示（仅供 UI 渲染）。
    """

    role: Role
    content: str
    is_error: bool = False

    def to_payload(self) -> Dict[str, Any]:
        return {"role": self.role, "content": self.content}


class SessionStatus(str, Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    STREAMING = "streaming"
    COMPLETE = "complete"
    ERROR = "error"
    ABORTED = "aborted"


@dataclass
class VendorConfig:
    """合并后的厂商配置：调用方覆盖 > 持久化设置 > 内置默认值。"""

    endpoint: Optional[str] = None
    api_key: Optional[str] = None
    model: Optional[str] = None


@dataclass
class HttpRequestSpec:
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Dict[str, Any] = field(default_factory=dict)


@dataclass
class FrameResult:
    """单个帧的解析结果。

    - delta: 本帧携带的增量文本（可能为空串）。
    - terminal: 本帧是否为厂商的结束信号。
    - error: 厂商在流内报告的错误信息；非空时本次调用终止。
    """

    delta: str = ""
    terminal: bool = False
    error: Optional[str] = None
