"""逐步增长的 JSON 数组解码器（变体 B）。

Gemini 的 streamGenerateContent 没有 SSE 分帧，整个响应体就是一个慢慢
写完的 JSON 数组，例如依次收到::

    "["
    "{...第一个元素...}"
    ",{...第二个元素...}]"

解码器维护一个文本缓冲区，每收到一块就把缓冲区规整为 ``[<body>]`` 尝试解析：

- 解析成功：一次性产出数组中的全部元素并清空缓冲区；
- 解析失败且数组尚未闭合：继续等待更多字节；
- 解析失败但片段以 ``]`` 结尾（看起来已完整）：直接抛出 ParseError；
- 开头既不是 ``[`` 也不是续接内容：原样返回文本（作为非 JSON 内容）。
"""

import codecs
import json
from typing import Any, List

from lingo_core.domain.exceptions import ParseError


class GrowingArrayDecoder:
    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""
        self._opened = False
        self.finished = False

    def feed(self, chunk: bytes) -> List[Any]:
        return self._consume(self._decoder.decode(chunk, False))

    def close(self) -> List[Any]:
        """流结束：剩余缓冲区若仍有内容却无法解析，视为格式错误。"""

        frames = self._consume(self._decoder.decode(b"", True))
        leftover = self._buffer.strip()
        if leftover and not self.finished:
            raise ParseError(code="PARSE_ERROR", message=f"Incomplete JSON array: {leftover[:200]!r}")
        self.finished = True
        return frames

    def _consume(self, text: str) -> List[Any]:
        self._buffer += text
        head = self._buffer.lstrip()
        if not head:
            return []
        if self.finished:
            raise ParseError(code="PARSE_ERROR", message=f"Unexpected data after array end: {head[:200]!r}")
        if not self._opened:
            if not head.startswith("["):
                self._buffer = ""
                return [head]
            self._opened = True
            head = head[1:]
        if head.startswith(","):
            head = head[1:]
        self._buffer = head
        return self._drain()

    def _drain(self) -> List[Any]:
        body = self._buffer.strip()
        closed = body.endswith("]")
        if closed:
            body = body[:-1]
        if not body.strip():
            # 只有 "[" 时不能当作完整的空数组解析
            if closed:
                self._buffer = ""
                self.finished = True
            return []
        json_text = "[" + body + "]"
        try:
            elements = json.loads(json_text)
        except json.JSONDecodeError as exc:
            if closed:
                raise ParseError(
                    code="PARSE_ERROR",
                    message=f"Invalid JSON fragment: {json_text[:200]!r}",
                ) from exc
            return []
        self._buffer = ""
        self.finished = closed
        return elements
