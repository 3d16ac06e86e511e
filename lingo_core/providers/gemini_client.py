"""Google Gemini 适配器。

与 OpenAI 风格的差异最大：

1. 历史消息需要转置为 contents 结构：assistant -> "model"，其余 -> "user"，
   文本放在 parts: [{text}] 中。
2. 认证: API key 作为查询参数 key。
3. 响应没有 SSE 分帧，整个响应体是一个逐步写完的 JSON 数组，
   由 GrowingArrayDecoder 增量恢复其中的元素。
4. 没有结束帧：数组闭合（或流读完且没有剩余可解析内容）即为结束。
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence

import httpx

from lingo_core.domain.models import FrameResult, HttpRequestSpec, Message, VendorConfig
from lingo_core.infrastructure.logging.logger import logger
from lingo_core.providers.registry import (
    EngineProfile,
    GEMINI_PROFILE,
    decode_error_body,
    error_message_from,
    malformed_frame,
    resolve_vendor_config,
)
from lingo_core.streaming import GrowingArrayDecoder


class GeminiAdapter:
    terminal_on_eof = True

    def __init__(self, profile: EngineProfile = GEMINI_PROFILE):
        self.profile = profile
        self.name = profile.name

    def resolve_config(self, overrides: Mapping[str, Optional[str]], cfg: Any) -> VendorConfig:
        return resolve_vendor_config(self.profile, overrides, cfg)

    def build_request(self, history: Sequence[Message], config: VendorConfig) -> HttpRequestSpec:
        base = (config.endpoint or "").rstrip("/")
        url = httpx.URL(
            f"{base}/{config.model}:streamGenerateContent",
            params={"key": config.api_key or ""},
        )
        return HttpRequestSpec(
            url=str(url),
            headers={"Content-Type": "application/json"},
            body={"contents": self.to_contents(history)},
        )

    @staticmethod
    def to_contents(history: Sequence[Message]) -> List[Dict[str, Any]]:
        """把 OpenAI 风格的消息列表转换为 Gemini 的 contents。"""

        return [
            {
                "role": "model" if m.role == "assistant" else "user",
                "parts": [{"text": m.content}],
            }
            for m in history
        ]

    def new_decoder(self) -> GrowingArrayDecoder:
        return GrowingArrayDecoder()

    def parse_frame(self, frame: Any) -> FrameResult:
        if isinstance(frame, str):
            # 数组开始前的杂散文本，不属于回答内容
            logger.warning(
                "Ignored non-JSON content in Gemini stream",
                extra={"extra": {"engine": self.name, "preview": frame[:64]}},
            )
            return FrameResult()
        if not isinstance(frame, dict):
            raise malformed_frame(frame)
        if frame.get("error"):
            return FrameResult(terminal=True, error=error_message_from(frame["error"]))
        candidates = frame.get("candidates") or []
        if not isinstance(candidates, list):
            raise malformed_frame(frame)
        if not candidates:
            return FrameResult()
        candidate = candidates[0] or {}
        if not isinstance(candidate, dict):
            raise malformed_frame(frame)
        content = candidate.get("content") or {}
        if not isinstance(content, dict):
            raise malformed_frame(frame)
        parts = content.get("parts") or []
        if not isinstance(parts, list):
            raise malformed_frame(frame)
        if not parts:
            return FrameResult()
        part = parts[0] or {}
        if not isinstance(part, dict) or not isinstance(part.get("text") or "", str):
            raise malformed_frame(frame)
        return FrameResult(delta=part.get("text") or "")

    def parse_error_body(self, status_code: int, body: bytes) -> str:
        data = decode_error_body(body)
        if isinstance(data, list) and data and isinstance(data[0], dict) and data[0].get("error"):
            return error_message_from(data[0]["error"])
        if isinstance(data, dict) and data.get("error"):
            return error_message_from(data["error"])
        return f"{self.profile.display_name}请求失败 (HTTP {status_code})"
