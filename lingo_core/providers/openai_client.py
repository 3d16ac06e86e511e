"""OpenAI 兼容接口适配器。

OpenAI / DeepSeek / Moonshot 以及用户自定义服务均使用 chat/completions 端点：
- URL: {base_url}/chat/completions
- 认证: Authorization: Bearer <api_key>
- 响应: SSE，每帧 data 为一个 JSON，增量在 choices[0].delta.content，
  以字面量 ``[DONE]`` 帧结束；帧内出现 error 字段即为厂商错误。

本实现只依赖公共字段：model/messages/stream。
"""

import json
from typing import Any, Mapping, Optional, Sequence

from lingo_core.domain.exceptions import ParseError
from lingo_core.domain.models import FrameResult, HttpRequestSpec, Message, VendorConfig
from lingo_core.providers.registry import (
    EngineProfile,
    OPENAI_PROFILE,
    decode_error_body,
    error_message_from,
    malformed_frame,
    resolve_vendor_config,
)
from lingo_core.streaming import EventStreamDecoder


DONE_SENTINEL = "[DONE]"
COMPLETIONS_PATH = "/chat/completions"


class OpenAICompatibleAdapter:
    """OpenAI 兼容家族的适配器，具体引擎由 EngineProfile 决定。"""

    terminal_on_eof = False

    def __init__(self, profile: EngineProfile = OPENAI_PROFILE):
        self.profile = profile
        self.name = profile.name

    def resolve_config(self, overrides: Mapping[str, Optional[str]], cfg: Any) -> VendorConfig:
        return resolve_vendor_config(self.profile, overrides, cfg)

    def build_request(self, history: Sequence[Message], config: VendorConfig) -> HttpRequestSpec:
        headers = {"Content-Type": "application/json"}
        if config.api_key:
            headers["Authorization"] = f"Bearer {config.api_key}"
        return HttpRequestSpec(
            url=self._completions_url(config.endpoint or ""),
            headers=headers,
            body={
                "model": config.model,
                "messages": [m.to_payload() for m in history],
                "stream": True,
            },
        )

    def new_decoder(self) -> EventStreamDecoder:
        return EventStreamDecoder()

    def parse_frame(self, frame: Any) -> FrameResult:
        if frame == DONE_SENTINEL:
            return FrameResult(terminal=True)
        try:
            data = json.loads(frame)
        except (TypeError, json.JSONDecodeError) as exc:
            raise ParseError(code="PARSE_ERROR", message=f"Invalid stream frame: {str(frame)[:200]!r}") from exc
        if not isinstance(data, dict):
            raise malformed_frame(frame)
        if data.get("error"):
            return FrameResult(terminal=True, error=error_message_from(data["error"]))
        choices = data.get("choices") or []
        if not isinstance(choices, list):
            raise malformed_frame(frame)
        if not choices:
            return FrameResult()
        choice = choices[0] or {}
        if not isinstance(choice, dict):
            raise malformed_frame(frame)
        delta = choice.get("delta") or {}
        if not isinstance(delta, dict):
            raise malformed_frame(frame)
        content = delta.get("content") or ""
        if not isinstance(content, str):
            raise malformed_frame(frame)
        return FrameResult(delta=content)

    def parse_error_body(self, status_code: int, body: bytes) -> str:
        data = decode_error_body(body)
        if isinstance(data, dict) and data.get("error"):
            return error_message_from(data["error"])
        return f"{self.profile.display_name} request failed (HTTP {status_code})"

    @staticmethod
    def _completions_url(endpoint: str) -> str:
        base = endpoint.rstrip("/")
        if base.endswith(COMPLETIONS_PATH):
            return base
        return f"{base}{COMPLETIONS_PATH}"
