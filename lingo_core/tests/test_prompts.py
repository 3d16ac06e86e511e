from lingo_core.config.settings import DEFAULT_SENTENCE_USER_CONTENT, DEFAULT_WORD_USER_CONTENT
from lingo_core.prompts import (
    SelectionContext,
    format_text,
    is_same_word,
    render_template,
    sentence_prompt,
    sentence_seed,
    word_prompt,
    word_seed,
)


def test_format_text_collapses_whitespace():
    assert format_text("Hello\r\nworld,\n\n  how\tare you") == "Hello world, how are you"
    assert format_text("") == ""


def test_is_same_word():
    assert is_same_word(" Apple", "apple ")
    assert not is_same_word("apple", "apples")
    assert not is_same_word("", "")


def test_render_template_replaces_every_placeholder():
    text = render_template("{word}/{word} in {sentence} -> {targetLanguage}", "zh-Hans", "run", "I run.")
    assert text == "run/run in I run. -> zh-Hans"


def test_sentence_seed_structure():
    seed = sentence_seed("Good morning", "ja", "Translate into {targetLanguage}.", DEFAULT_SENTENCE_USER_CONTENT)
    assert [(m.role, m.content) for m in seed] == [
        ("system", "Translate into ja."),
        ("assistant", "OK."),
        ("user", "Translate the following text to ja:Good morning"),
    ]


def test_word_seed_uses_explicit_selection():
    selection = SelectionContext(word="bank", sentence="We sat on the river bank.")
    seed = word_seed(selection, "zh-Hans", "Explain {word}", DEFAULT_WORD_USER_CONTENT)
    assert seed[0].content == "Explain bank"
    assert seed[1].content == "OK."
    assert seed[2].content == "单词是：bank，句子是We sat on the river bank."


def test_word_prompt_with_and_without_context():
    with_ctx = word_prompt("bank", "We sat on the river bank.", "zh-Hans")
    assert with_ctx.content == "单词是：bank，句子是：We sat on the river bank."
    assert with_ctx.command == "好的，我明白了，请给我这个单词。"
    assert "zh-Hans" in with_ctx.role
    assert "{targetLanguage}" not in with_ctx.role

    assert word_prompt("bank", "Bank ", "zh-Hans").content == "单词是：bank。"
    assert word_prompt("bank", None, "zh-Hans").content == "单词是：bank。"


def test_sentence_prompt():
    prompt = sentence_prompt("Hello", "fr")
    assert prompt.command == "OK."
    assert prompt.content == "Translate the following text to fr:Hello"
    assert prompt.role.startswith("You are a translator.")
