"""流式响应分帧。

- EventStreamDecoder: SSE（空行分隔的 data: 帧）。
- GrowingArrayDecoder: 逐步增长的 JSON 数组。

两者接口一致：feed(bytes) -> 新完成的帧列表；close() 冲刷剩余内容；
finished 表示结构上已经结束。
"""

from typing import Any, List, Protocol

from .event_stream import EventStreamDecoder
from .growing_array import GrowingArrayDecoder


class FrameDecoder(Protocol):
    finished: bool

    def feed(self, chunk: bytes) -> List[Any]:
        ...

    def close(self) -> List[Any]:
        ...


__all__ = ["FrameDecoder", "EventStreamDecoder", "GrowingArrayDecoder"]
