"""包级 JSON 行日志。

每条记录一行 JSON：ts / level / name / msg，再合并调用方通过
``extra={"extra": {...}}`` 传入的结构化字段（trace_id、engine 等）。
开启 log_redact_content 时，消息正文与 content/preview 字段只保留前 64 个字符，
避免把用户划词内容与模型回答完整写进日志。
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from lingo_core.config.settings import settings


LOGGER_NAME = "lingo_core"
LOG_FILE = "lingo.log"
REDACT_LIMIT = 64
_REDACTED_FIELDS = ("content", "preview")


class JsonFormatter(logging.Formatter):
    def __init__(self, redact: bool = False):
        super().__init__()
        self.redact = redact

    def format(self, record: logging.LogRecord) -> str:
        msg = record.getMessage()
        if self.redact:
            msg = (msg or "")[:REDACT_LIMIT]
        payload: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "name": record.name,
            "msg": msg,
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            for key, value in extra.items():
                if self.redact and key in _REDACTED_FIELDS and isinstance(value, str):
                    value = value[:REDACT_LIMIT]
                payload[key] = value
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logger(
    name: str = LOGGER_NAME,
    log_dir: Optional[str] = None,
    redact: Optional[bool] = None,
) -> logging.Logger:
    """创建（或复用）写入 ``<log_dir>/lingo.log`` 的 JSON 行日志器。"""

    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)
    if logger.handlers:
        return logger
    directory = Path(log_dir if log_dir is not None else settings.log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    fh = logging.FileHandler(directory / LOG_FILE, encoding="utf-8")
    fh.setLevel(logging.INFO)
    fh.setFormatter(JsonFormatter(settings.log_redact_content if redact is None else redact))
    logger.addHandler(fh)
    return logger


logger = setup_logger()
