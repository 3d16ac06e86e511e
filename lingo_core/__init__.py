"""Lingo Core 顶层包。

该包提供划词翻译工具的 AI 对话核心实现，
包括配置加载、领域模型、流式帧解码、多厂商适配、
流式会话状态机、提示词种子与翻译编排等能力。
"""

from lingo_core.api.service import explain_word, translate_text
from lingo_core.prompts import SelectionContext
from lingo_core.providers import available_engines, select_engine
from lingo_core.sessions import CallbackObserver, ChatSession

__all__ = [
    "CallbackObserver",
    "ChatSession",
    "SelectionContext",
    "available_engines",
    "explain_word",
    "select_engine",
    "translate_text",
]
