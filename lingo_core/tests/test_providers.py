from lingo_core.providers import available_engines, select_engine
from lingo_core.providers.ernie_client import ErnieAdapter
from lingo_core.providers.gemini_client import GeminiAdapter
from lingo_core.providers.openai_client import OpenAICompatibleAdapter
from lingo_core.sessions import ChatSession


def test_select_engine_binds_adapter_family():
    expected = {
        "openai": OpenAICompatibleAdapter,
        "deepseek": OpenAICompatibleAdapter,
        "moonshot": OpenAICompatibleAdapter,
        "custom": OpenAICompatibleAdapter,
        "wenxin": ErnieAdapter,
        "gemini": GeminiAdapter,
    }
    for name, cls in expected.items():
        factory = select_engine(name)
        session = factory()
        assert isinstance(session, ChatSession)
        assert isinstance(session.adapter, cls)
        assert session.adapter.name == name


def test_select_engine_is_case_insensitive():
    assert select_engine("Gemini")().adapter.name == "gemini"


def test_unknown_engine_returns_none():
    assert select_engine("google") is None
    assert select_engine("youdao") is None
    assert select_engine(None) is None


def test_available_engines():
    assert sorted(available_engines()) == ["custom", "deepseek", "gemini", "moonshot", "openai", "wenxin"]


def test_factory_passes_seed_and_overrides():
    from lingo_core.domain.models import Message

    seed = [Message(role="user", content="hi")]
    session = select_engine("openai")(seed=seed, overrides={"model": "gpt-4o-mini"})
    assert session.messages == seed
    assert session.messages is not seed
    assert session._overrides == {"model": "gpt-4o-mini"}
