"""会话级取消令牌。

一次调用对应一个令牌：abort/clear 触发（trip）令牌，
令牌再取消绑定的 asyncio 任务，使正在等待的网络读取立即结束。
令牌一旦触发不可恢复，下一次 send 会换一个新的令牌。
"""

import asyncio
from typing import Optional


class CancellationToken:
    def __init__(self) -> None:
        self._tripped = False
        self._reason: Optional[str] = None
        self._task: Optional["asyncio.Future"] = None

    @property
    def tripped(self) -> bool:
        return self._tripped

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def trip(self, reason: Optional[str] = None) -> None:
        """请求取消；重复调用无副作用。"""

        if self._tripped:
            return
        self._tripped = True
        self._reason = reason
        task = self._task
        if task is not None and not task.done():
            task.cancel()

    def bind(self, task: "asyncio.Future") -> None:
        """绑定正在执行的调用任务；令牌已触发时立即取消它。"""

        self._task = task
        if self._tripped and not task.done():
            task.cancel()

    def unbind(self) -> None:
        self._task = None

    def __repr__(self) -> str:
        return f"CancellationToken(tripped={self._tripped}, reason={self._reason!r})"
