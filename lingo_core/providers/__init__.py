"""LLM 厂商集成层。

该包下的模块负责：
- 定义厂商适配器抽象接口 (base)。
- 维护引擎与厂商配置 (registry)。
- 提供三类线协议的具体实现 (openai_client、ernie_client、gemini_client)。
- 根据引擎名选择会话构造器 (select_engine)。
"""

from functools import partial
from typing import Callable, Dict, List, Optional, Type

from lingo_core.providers.base import VendorAdapter
from lingo_core.providers.ernie_client import ErnieAdapter
from lingo_core.providers.gemini_client import GeminiAdapter
from lingo_core.providers.openai_client import OpenAICompatibleAdapter
from lingo_core.providers.registry import ENGINE_PROFILES, EngineProfile, get_engine_profile
from lingo_core.sessions.chat_session import ChatSession

_ADAPTERS: Dict[str, Type] = {
    "openai": OpenAICompatibleAdapter,
    "ernie": ErnieAdapter,
    "gemini": GeminiAdapter,
}


def create_adapter(profile: EngineProfile) -> VendorAdapter:
    return _ADAPTERS[profile.wire](profile)


def select_engine(engine_id: Optional[str]) -> Optional[Callable[..., ChatSession]]:
    """根据引擎名返回绑定了对应适配器的会话构造器；未知引擎返回 None。

    返回值的其余参数与 ChatSession 相同（observer、seed、overrides 等）。
    """

    profile = get_engine_profile(engine_id)
    if profile is None:
        return None
    return partial(ChatSession, create_adapter(profile))


def available_engines() -> List[str]:
    return list(ENGINE_PROFILES)


__all__ = [
    "VendorAdapter",
    "OpenAICompatibleAdapter",
    "ErnieAdapter",
    "GeminiAdapter",
    "create_adapter",
    "select_engine",
    "available_engines",
]
