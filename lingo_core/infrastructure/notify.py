"""通知（toast）出口。

会话层只通过 ``notify(kind, message)`` 这一窄接口向用户界面发出提示，
具体怎么展示（浏览器 toast、桌面通知、终端输出）由调用方注入。
默认实现只把提示写入日志。
"""

import logging
from typing import Callable, Literal

from lingo_core.infrastructure.logging.logger import logger


NoticeKind = Literal["error", "warning", "info", "success"]

Notifier = Callable[[str, str], None]

_LEVELS = {
    "error": logging.ERROR,
    "warning": logging.WARNING,
}


def log_notifier(kind: str, message: str) -> None:
    """默认通知出口：以对应级别记录一条日志。"""

    logger.log(
        _LEVELS.get(kind, logging.INFO),
        message,
        extra={"extra": {"notice_kind": kind}},
    )
