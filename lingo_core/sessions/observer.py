"""会话观察者接口。

UI 通过观察者接收会话的生命周期事件。每个钩子既可以是普通函数，
也可以是协程函数（会话会 await 其返回值）。
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol


class SessionObserver(Protocol):
    def on_before_request(self) -> Any:
        ...

    def on_generating(self, cumulative: str) -> Any:
        ...

    def on_complete(self, final_text: str) -> Any:
        ...

    def on_error(self, message: str) -> Any:
        ...

    def on_clear(self) -> Any:
        ...


@dataclass
class CallbackObserver:
    """以回调函数组装的观察者，未提供的钩子直接忽略。"""

    before_request: Optional[Callable[[], Any]] = None
    generating: Optional[Callable[[str], Any]] = None
    complete: Optional[Callable[[str], Any]] = None
    error: Optional[Callable[[str], Any]] = None
    clear: Optional[Callable[[], Any]] = None

    def on_before_request(self) -> Any:
        if self.before_request is not None:
            return self.before_request()
        return None

    def on_generating(self, cumulative: str) -> Any:
        if self.generating is not None:
            return self.generating(cumulative)
        return None

    def on_complete(self, final_text: str) -> Any:
        if self.complete is not None:
            return self.complete(final_text)
        return None

    def on_error(self, message: str) -> Any:
        if self.error is not None:
            return self.error(message)
        return None

    def on_clear(self) -> Any:
        if self.clear is not None:
            return self.clear()
        return None
