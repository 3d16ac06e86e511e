"""引擎与厂商配置。

本模块把“引擎名”（用户在设置里选择的值，如 "deepseek"）与
“线协议家族”（openai / ernie / gemini）以及各自的配置项解耦：

- wire: 使用哪一类适配器。
- *_setting: 从设置读取器上读取哪个属性。
- default_*: 设置中也没有时使用的内置默认值。

上层只关心引擎名，具体走哪个地址、用哪个模型由这里集中配置。"""

import json
from dataclasses import dataclass
from typing import Any, Literal, Mapping, Optional

from lingo_core.domain.exceptions import ConfigurationError, ParseError
from lingo_core.domain.models import VendorConfig


WireFamily = Literal["openai", "ernie", "gemini"]


@dataclass(frozen=True)
class EngineProfile:
    """单个聊天引擎的配置。"""

    name: str
    display_name: str
    wire: WireFamily
    key_setting: Optional[str]
    endpoint_setting: Optional[str]
    model_setting: Optional[str] = None
    default_endpoint: Optional[str] = None
    default_model: Optional[str] = None
    key_required: bool = True


OPENAI_PROFILE = EngineProfile(
    name="openai",
    display_name="OpenAI",
    wire="openai",
    key_setting="openai_key",
    endpoint_setting="openai_base_url",
    model_setting="openai_model",
    default_endpoint="https://api.openai.com/v1",
    default_model="gpt-4o",
)

DEEPSEEK_PROFILE = EngineProfile(
    name="deepseek",
    display_name="DeepSeek",
    wire="openai",
    key_setting="deepseek_api_key",
    endpoint_setting="deepseek_base_url",
    model_setting="deepseek_model",
    default_endpoint="https://api.deepseek.com",
    default_model="deepseek-chat",
)

MOONSHOT_PROFILE = EngineProfile(
    name="moonshot",
    display_name="MoonShot",
    wire="openai",
    key_setting="moonshot_key",
    endpoint_setting="moonshot_base_url",
    model_setting="moonshot_model",
    default_endpoint="https://api.moonshot.cn/v1",
    default_model="moonshot-v1-8k",
)

# 自定义服务：地址必须由用户提供，密钥可选
CUSTOM_PROFILE = EngineProfile(
    name="custom",
    display_name="Custom",
    wire="openai",
    key_setting="custom_ai_key",
    endpoint_setting="custom_ai_address",
    model_setting="custom_ai_model",
    key_required=False,
)

WENXIN_PROFILE = EngineProfile(
    name="wenxin",
    display_name="文心一言",
    wire="ernie",
    key_setting="wenxin_token",
    endpoint_setting="wenxin_base_url",
    default_endpoint="https://aip.baidubce.com/rpc/2.0/ai_custom/v1/wenxinworkshop/chat/ernie_bot_8k",
)

GEMINI_PROFILE = EngineProfile(
    name="gemini",
    display_name="Gemini",
    wire="gemini",
    key_setting="gemini_key",
    endpoint_setting="gemini_base_url",
    model_setting="gemini_model",
    default_endpoint="https://generativelanguage.googleapis.com/v1beta/models",
    default_model="gemini-pro",
)


ENGINE_PROFILES: Mapping[str, EngineProfile] = {
    p.name: p
    for p in (
        OPENAI_PROFILE,
        GEMINI_PROFILE,
        WENXIN_PROFILE,
        MOONSHOT_PROFILE,
        DEEPSEEK_PROFILE,
        CUSTOM_PROFILE,
    )
}


def get_engine_profile(name: Optional[str]) -> Optional[EngineProfile]:
    """根据名称获取 EngineProfile，名称不区分大小写；未知名称返回 None。"""

    if not name:
        return None
    return ENGINE_PROFILES.get(str(name).strip().lower())


def _pick(override: Optional[str], cfg: Any, attr: Optional[str], default: Optional[str]) -> Optional[str]:
    if override is not None:
        return override
    if attr:
        value = getattr(cfg, attr, None)
        if value is not None:
            return value
    return default


def resolve_vendor_config(
    profile: EngineProfile,
    overrides: Mapping[str, Optional[str]],
    cfg: Any,
) -> VendorConfig:
    """合并一次调用的厂商配置：调用方覆盖 > 持久化设置 > 内置默认值。"""

    config = VendorConfig(
        endpoint=_pick(overrides.get("endpoint"), cfg, profile.endpoint_setting, profile.default_endpoint),
        api_key=_pick(overrides.get("api_key"), cfg, profile.key_setting, None),
        model=_pick(overrides.get("model"), cfg, profile.model_setting, profile.default_model),
    )
    if not config.endpoint:
        raise ConfigurationError(
            code="MISSING_ENDPOINT",
            message=f"{profile.display_name} url is empty",
            engine=profile.name,
        )
    if profile.key_required and not config.api_key:
        raise ConfigurationError(
            code="MISSING_API_KEY",
            message=f"{profile.display_name} apiKey is empty",
            engine=profile.name,
        )
    return config


def error_message_from(error: Any) -> str:
    """把厂商 error 字段（对象或字符串）转成一行可读信息。"""

    if isinstance(error, dict):
        message = error.get("message") or error.get("error_msg")
        if message:
            return str(message)
        return json.dumps(error, ensure_ascii=False)
    return str(error)


def decode_error_body(body: bytes) -> Any:
    """尽力把错误响应体解析为 JSON；失败返回 None。"""

    if not body:
        return None
    try:
        return json.loads(body.decode("utf-8", errors="replace"))
    except json.JSONDecodeError:
        return None


def malformed_frame(frame: Any) -> ParseError:
    """帧是合法 JSON 但结构不符合厂商约定。"""

    return ParseError(code="PARSE_ERROR", message=f"Unexpected stream frame: {str(frame)[:200]!r}")
