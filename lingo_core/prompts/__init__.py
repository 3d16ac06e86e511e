"""提示词与会话种子。

- 单词/句子两种场景的结构化提示词（角色设定、确认指令、内容）。
- 由用户可配置的模板生成会话的初始历史（种子）：
  [system(角色设定), assistant("OK."), user(请求内容)]。

模板支持 {targetLanguage}、{word}、{sentence} 三个占位符。
单词场景的角色设定按语言(locale) 从 prompts/<locale> 目录读取。
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from lingo_core.domain.models import Message


PROMPTS_DIR = Path(__file__).resolve().parent

WORD_COMMAND_PROMPT = "好的，我明白了，请给我这个单词。"
SENTENCE_ROLE_PROMPT = (
    "You are a translator. Please translate the text into a colloquial, professional, "
    "elegant and fluent content, without the style of machine translation."
)
SENTENCE_COMMAND_PROMPT = "OK."
SEED_ACK = "OK."

_WHITESPACE_RE = re.compile(r"\s+")


@dataclass
class SelectionContext:
    """用户在页面上选中的单词及其所在句子。"""

    word: str
    sentence: str = ""


@dataclass
class PromptTriple:
    role: str
    command: str
    content: str


def format_text(text: Optional[str]) -> str:
    """把换行与连续空白折叠为单个空格。"""

    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", text.replace("\r\n", " "))


def is_same_word(word1: Optional[str], word2: Optional[str]) -> bool:
    """忽略大小写与首尾空白比较两个单词；任一为空时返回 False。"""

    if not word1 or not word2:
        return False
    return word1.strip().lower() == word2.strip().lower()


def render_template(template: str, target_language: str, word: str = "", sentence: str = "") -> str:
    return (
        template.replace("{targetLanguage}", target_language)
        .replace("{word}", word)
        .replace("{sentence}", sentence)
    )


def load_word_role_prompt(locale: str = "zh") -> str:
    fname = PROMPTS_DIR / locale / "word_role.md"
    return fname.read_text(encoding="utf-8").strip()


def _seed(role_prompt: str, content: str) -> List[Message]:
    return [
        Message(role="system", content=role_prompt),
        Message(role="assistant", content=SEED_ACK),
        Message(role="user", content=content),
    ]


def sentence_seed(text: str, target_language: str, system_prompt: str, user_content: str) -> List[Message]:
    return _seed(
        render_template(system_prompt, target_language, sentence=text),
        render_template(user_content, target_language, sentence=text),
    )


def word_seed(
    selection: SelectionContext,
    target_language: str,
    system_prompt: str,
    user_content: str,
) -> List[Message]:
    return _seed(
        render_template(system_prompt, target_language, selection.word, selection.sentence),
        render_template(user_content, target_language, selection.word, selection.sentence),
    )


def word_prompt(word: str, context: Optional[str], target_language: str, locale: str = "zh") -> PromptTriple:
    """单词解释提示词；没有上下文或上下文就是单词本身时只给出单词。"""

    if not context or is_same_word(word, context):
        content = f"单词是：{word}。"
    else:
        content = f"单词是：{word}，句子是：{context}"
    return PromptTriple(
        role=render_template(load_word_role_prompt(locale), target_language),
        command=WORD_COMMAND_PROMPT,
        content=content,
    )


def sentence_prompt(text: str, target_language: str) -> PromptTriple:
    return PromptTriple(
        role=SENTENCE_ROLE_PROMPT,
        command=SENTENCE_COMMAND_PROMPT,
        content=f"Translate the following text to {target_language}:{text}",
    )


def prompt_seed(prompt: PromptTriple) -> List[Message]:
    """内置提示词对应的会话种子：[system(角色), assistant(确认), user(内容)]。"""

    return [
        Message(role="system", content=prompt.role),
        Message(role="assistant", content=prompt.command),
        Message(role="user", content=prompt.content),
    ]
