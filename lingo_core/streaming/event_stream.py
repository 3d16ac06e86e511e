"""Server-Sent Events 帧解码器（变体 A）。

把网络字节流切分成一个个 ``data:`` 帧：

1. 使用增量 UTF-8 解码器，把跨 chunk 被截断的多字节字符留到下一次再解码；
2. 按 CR / LF / CRLF 切行；
3. ``data:`` 行累积到当前事件，空行触发一次事件，输出拼接后的 data 文本。

注释行（以 ``:`` 开头）以及 event/id/retry 等字段与文本增量无关，直接忽略。
"""

import codecs
from typing import List


class EventStreamDecoder:
    """增量 SSE 解码器，``feed`` 每次返回本次新完成的帧（按到达顺序）。"""

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""
        self._data_lines: List[str] = []
        self._started = False
        self.finished = False

    def feed(self, chunk: bytes) -> List[str]:
        text = self._decoder.decode(chunk, False)
        return self._consume(text, final=False)

    def close(self) -> List[str]:
        """流结束时调用：冲刷解码器与缓冲区中剩余的完整行。

        末尾没有空行结尾的事件按 SSE 约定丢弃。
        """

        text = self._decoder.decode(b"", True)
        frames = self._consume(text, final=True)
        self._data_lines = []
        self.finished = True
        return frames

    def _consume(self, text: str, final: bool) -> List[str]:
        if not self._started and text:
            self._started = True
            if text.startswith("\ufeff"):
                text = text[1:]
        self._buffer += text
        frames: List[str] = []
        while True:
            cr = self._buffer.find("\r")
            lf = self._buffer.find("\n")
            if cr == -1 and lf == -1:
                break
            if cr == -1 or (lf != -1 and lf < cr):
                idx, end = lf, lf + 1
            else:
                idx = cr
                if idx + 1 == len(self._buffer):
                    # \r\n 可能被拆在两个 chunk 之间，等下一块再判断
                    if not final:
                        break
                    end = idx + 1
                elif self._buffer[idx + 1] == "\n":
                    end = idx + 2
                else:
                    end = idx + 1
            line = self._buffer[:idx]
            self._buffer = self._buffer[end:]
            frame = self._process_line(line)
            if frame is not None:
                frames.append(frame)
        return frames

    def _process_line(self, line: str):
        if line == "":
            if not self._data_lines:
                return None
            data = "\n".join(self._data_lines)
            self._data_lines = []
            return data
        if line.startswith(":"):
            return None
        name, sep, value = line.partition(":")
        if sep and value.startswith(" "):
            value = value[1:]
        if name == "data":
            self._data_lines.append(value)
        return None
