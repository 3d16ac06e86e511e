"""配置管理模块。

支持从环境变量、.env 以及 config.yaml 加载配置。

这里就是会话层所依赖的“设置读取器”：各引擎的密钥、地址、模型名，
以及翻译提示词模板都从这里按需读取（每次 send 时读取，而非构造时缓存）。
"""

import os
import warnings
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_config_from_yaml() -> Dict[str, Any]:
    """从 config.yaml 加载配置（若存在）。"""
    candidates = []
    explicit = os.getenv("LINGO_CONFIG_FILE")
    if explicit:
        candidates.append(Path(explicit).expanduser())
    candidates.extend([
        Path.cwd() / "config.yaml",
        Path(__file__).resolve().parents[2] / "config.yaml",
        Path(__file__).resolve().parents[1] / "config.yaml",
    ])

    seen: set[Path] = set()
    for path in candidates:
        if not path or path in seen:
            continue
        seen.add(path)
        try:
            if path.exists():
                data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
                if isinstance(data, dict):
                    return data
                warnings.warn(f"Config file {path} is not a mapping, ignored")
        except (OSError, yaml.YAMLError) as exc:
            warnings.warn(f"Failed to read config file {path}: {exc}")
    return {}


DEFAULT_WORD_SYSTEM_PROMPT = (
    "我正在学习英语，接下来我会提供给你一个句子和这个句子中的一个单词，"
    "请以牛津英汉词典的格式解释句子中的这个单词的含义，并举出一个英文例句，"
    "同时把英文例句翻译成中文"
)
DEFAULT_WORD_USER_CONTENT = "单词是：{word}，句子是{sentence}"
DEFAULT_SENTENCE_SYSTEM_PROMPT = (
    "You are a translation AI. You only need to provide the translation result "
    "without adding any irrelevant content."
)
DEFAULT_SENTENCE_USER_CONTENT = "Translate the following text to {targetLanguage}:{sentence}"


class Settings(BaseSettings):
    """配置设置（使用 Pydantic）。"""

    # ---- 引擎选择 ----
    default_engine: str = Field(
        default="openai",
        description="默认使用的聊天引擎，例如 openai、gemini、wenxin",
    )

    # OpenAI 及兼容接口
    openai_key: Optional[str] = Field(default=None, description="OpenAI API 密钥")
    openai_base_url: str = Field(
        default="https://api.openai.com/v1",
        description="OpenAI API 基础URL",
    )
    openai_model: str = Field(default="gpt-4o", description="OpenAI 模型名")

    # DeepSeek
    deepseek_api_key: Optional[str] = Field(default=None, description="DeepSeek API 密钥")
    deepseek_base_url: str = Field(default="https://api.deepseek.com", description="DeepSeek API 基础URL")
    deepseek_model: str = Field(default="deepseek-chat", description="DeepSeek 模型名")

    # Moonshot
    moonshot_key: Optional[str] = Field(default=None, description="Moonshot API 密钥")
    moonshot_base_url: str = Field(default="https://api.moonshot.cn/v1", description="Moonshot API 基础URL")
    moonshot_model: str = Field(default="moonshot-v1-8k", description="Moonshot 模型名")

    # 自定义 OpenAI 兼容服务：地址必填，密钥可选
    custom_ai_address: Optional[str] = Field(default=None, description="自定义服务地址")
    custom_ai_model: Optional[str] = Field(default=None, description="自定义服务模型名")
    custom_ai_key: Optional[str] = Field(default=None, description="自定义服务 API 密钥")

    # 百度文心一言
    wenxin_token: Optional[str] = Field(default=None, description="文心一言 AccessToken")
    wenxin_base_url: str = Field(
        default="https://aip.baidubce.com/rpc/2.0/ai_custom/v1/wenxinworkshop/chat/ernie_bot_8k",
        description="文心一言对话接口地址",
    )

    # Google Gemini
    gemini_key: Optional[str] = Field(default=None, description="Gemini API 密钥")
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta/models",
        description="Gemini 模型接口根路径",
    )
    gemini_model: str = Field(default="gemini-pro", description="Gemini 模型名")

    # ---- 翻译相关 ----
    target_language: str = Field(default="zh-Hans", description="目标语言")
    source_language: str = Field(default="en", description="源语言")
    word_system_prompt: str = Field(default=DEFAULT_WORD_SYSTEM_PROMPT)
    word_user_content: str = Field(default=DEFAULT_WORD_USER_CONTENT)
    sentence_system_prompt: str = Field(default=DEFAULT_SENTENCE_SYSTEM_PROMPT)
    sentence_user_content: str = Field(default=DEFAULT_SENTENCE_USER_CONTENT)

    http_timeout: float = Field(default=30.0, ge=1.0, description="HTTP 超时时间（秒）")
    log_dir: str = Field(default="logs", description="日志目录")
    log_redact_content: bool = Field(default=False, description="是否脱敏日志内容")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @staticmethod
    def _config_source() -> Dict[str, Any]:
        return _load_config_from_yaml()

    @field_validator("openai_key", "deepseek_api_key", "moonshot_key", "gemini_key", "wenxin_token")
    @classmethod
    def validate_api_key(cls, v: Optional[str]) -> Optional[str]:
        if v and len(v) < 10:
            raise ValueError("API key seems too short")
        return v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            cls._config_source,
            file_secret_settings,
        )


settings = Settings()
