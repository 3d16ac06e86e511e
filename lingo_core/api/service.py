"""对外 API 服务模块。

提供简化的函数接口供上层应用（划词翻译弹窗、单词卡片）调用：

- translate_text: 整句翻译。
- explain_word: 结合所在句子解释选中的单词。

两者都会选择引擎、用设置中的提示词模板（模板为空时用内置提示词）生成会话种子并立即发送，
返回会话对象，调用方可继续 refresh / abort / send 追问。
"""

import logging
from typing import Any, Callable, List, Mapping, Optional

import httpx

from lingo_core.config.settings import settings as default_settings
from lingo_core.domain.models import Message
from lingo_core.infrastructure.logging.logger import logger
from lingo_core.infrastructure.notify import Notifier
from lingo_core.prompts import (
    SelectionContext,
    format_text,
    prompt_seed,
    sentence_prompt,
    sentence_seed,
    word_prompt,
    word_seed,
)
from lingo_core.providers import select_engine
from lingo_core.sessions import CallbackObserver, ChatSession


ENGINE_NOT_FOUND = "engine doesn't exist"

SuccessCallback = Callable[[str, List[Message]], Any]


async def _start(
    engine: Optional[str],
    seed: List[Message],
    *,
    before_request: Optional[Callable[[], Any]],
    on_generating: Optional[Callable[[str], Any]],
    on_success: Optional[SuccessCallback],
    on_error: Optional[Callable[[str], Any]],
    settings: Any,
    overrides: Optional[Mapping[str, Optional[str]]],
    notify: Optional[Notifier],
    transport: Optional[httpx.AsyncBaseTransport],
) -> Optional[ChatSession]:
    engine_id = engine or getattr(settings, "default_engine", None)
    factory = select_engine(engine_id)
    if factory is None:
        logger.log(logging.WARNING, ENGINE_NOT_FOUND, extra={"extra": {"engine": engine_id}})
        if on_error is not None:
            on_error(ENGINE_NOT_FOUND)
        return None

    session: Optional[ChatSession] = None

    def _complete(result: str) -> Any:
        if on_success is not None:
            return on_success(result, list(session.messages) if session else [])
        return None

    observer = CallbackObserver(
        before_request=before_request,
        generating=on_generating,
        complete=_complete,
        error=on_error,
    )
    session = factory(
        observer=observer,
        seed=seed,
        overrides=overrides,
        settings=settings,
        notify=notify,
        transport=transport,
    )
    await session.send()
    return session


async def translate_text(
    text: str,
    engine: Optional[str] = None,
    *,
    before_request: Optional[Callable[[], Any]] = None,
    on_generating: Optional[Callable[[str], Any]] = None,
    on_success: Optional[SuccessCallback] = None,
    on_error: Optional[Callable[[str], Any]] = None,
    settings: Any = None,
    overrides: Optional[Mapping[str, Optional[str]]] = None,
    notify: Optional[Notifier] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Optional[ChatSession]:
    """翻译一段文本。

    Args:
        text: 待翻译文本，换行与多余空白会被折叠。
        engine: 引擎名，缺省时取设置中的 default_engine。
        on_success: 完成时回调 (译文, 完整消息列表)。

    Returns:
        已完成本轮调用的会话；引擎不存在时回调 on_error 并返回 None。
    """

    cfg = settings if settings is not None else default_settings
    text = format_text(text)
    system_prompt = getattr(cfg, "sentence_system_prompt", None)
    user_content = getattr(cfg, "sentence_user_content", None)
    if system_prompt and user_content:
        seed = sentence_seed(text, cfg.target_language, system_prompt, user_content)
    else:
        # 用户清空了自定义模板：回退到内置的句子提示词
        seed = prompt_seed(sentence_prompt(text, cfg.target_language))
    return await _start(
        engine,
        seed,
        before_request=before_request,
        on_generating=on_generating,
        on_success=on_success,
        on_error=on_error,
        settings=cfg,
        overrides=overrides,
        notify=notify,
        transport=transport,
    )


async def explain_word(
    selection: SelectionContext,
    engine: Optional[str] = None,
    *,
    before_request: Optional[Callable[[], Any]] = None,
    on_generating: Optional[Callable[[str], Any]] = None,
    on_success: Optional[SuccessCallback] = None,
    on_error: Optional[Callable[[str], Any]] = None,
    settings: Any = None,
    overrides: Optional[Mapping[str, Optional[str]]] = None,
    notify: Optional[Notifier] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Optional[ChatSession]:
    """结合所在句子解释选中的单词，参数含义同 translate_text。"""

    cfg = settings if settings is not None else default_settings
    system_prompt = getattr(cfg, "word_system_prompt", None)
    user_content = getattr(cfg, "word_user_content", None)
    if system_prompt and user_content:
        seed = word_seed(selection, cfg.target_language, system_prompt, user_content)
    else:
        seed = prompt_seed(word_prompt(selection.word, selection.sentence, cfg.target_language))
    return await _start(
        engine,
        seed,
        before_request=before_request,
        on_generating=on_generating,
        on_success=on_success,
        on_error=on_error,
        settings=cfg,
        overrides=overrides,
        notify=notify,
        transport=transport,
    )
