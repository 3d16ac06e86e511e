"""百度文心一言（ERNIE Bot）适配器。

与 OpenAI 兼容接口的差异：
- 认证: AccessToken 作为 URL 查询参数 access_token，不使用请求头。
- 请求: {messages, stream: true}，没有 model 字段；
  文心不接受 system 角色，发送前统一改写为 user。
- 响应: SSE，增量在 result 字段；没有 [DONE]，由帧内 is_end 布尔值表示结束。
- 错误: 非 2xx 时返回 {error: {message}}；流内帧可能直接携带 error。
"""

import json
from typing import Any, Dict, List, Mapping, Optional, Sequence

import httpx

from lingo_core.domain.exceptions import ParseError
from lingo_core.domain.models import FrameResult, HttpRequestSpec, Message, VendorConfig
from lingo_core.providers.registry import (
    EngineProfile,
    WENXIN_PROFILE,
    decode_error_body,
    error_message_from,
    malformed_frame,
    resolve_vendor_config,
)
from lingo_core.streaming import EventStreamDecoder


class ErnieAdapter:
    terminal_on_eof = False

    def __init__(self, profile: EngineProfile = WENXIN_PROFILE):
        self.profile = profile
        self.name = profile.name

    def resolve_config(self, overrides: Mapping[str, Optional[str]], cfg: Any) -> VendorConfig:
        return resolve_vendor_config(self.profile, overrides, cfg)

    def build_request(self, history: Sequence[Message], config: VendorConfig) -> HttpRequestSpec:
        url = httpx.URL(config.endpoint or "", params={"access_token": config.api_key or ""})
        return HttpRequestSpec(
            url=str(url),
            headers={"Content-Type": "application/json"},
            body={
                "messages": self.format_messages(history),
                "stream": True,
            },
        )

    @staticmethod
    def format_messages(history: Sequence[Message]) -> List[Dict[str, Any]]:
        """文心没有 system 角色的概念，统一映射为 user。"""

        return [
            {"role": "user" if m.role == "system" else m.role, "content": m.content}
            for m in history
        ]

    def new_decoder(self) -> EventStreamDecoder:
        return EventStreamDecoder()

    def parse_frame(self, frame: Any) -> FrameResult:
        try:
            data = json.loads(frame)
        except (TypeError, json.JSONDecodeError) as exc:
            raise ParseError(code="PARSE_ERROR", message=f"Invalid stream frame: {str(frame)[:200]!r}") from exc
        if not isinstance(data, dict):
            raise malformed_frame(frame)
        # 流内错误帧：{error: ...}，部分接口版本使用 error_code/error_msg
        if data.get("error"):
            return FrameResult(terminal=True, error=error_message_from(data["error"]))
        if data.get("error_msg"):
            return FrameResult(terminal=True, error=str(data["error_msg"]))
        result = data.get("result") or ""
        if not isinstance(result, str):
            raise malformed_frame(frame)
        return FrameResult(delta=result, terminal=bool(data.get("is_end")))

    def parse_error_body(self, status_code: int, body: bytes) -> str:
        data = decode_error_body(body)
        if isinstance(data, dict):
            if data.get("error"):
                return error_message_from(data["error"])
            if data.get("error_msg"):
                return str(data["error_msg"])
        return f"{self.profile.display_name}请求失败 (HTTP {status_code})"
