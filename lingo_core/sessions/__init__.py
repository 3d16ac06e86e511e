"""会话层：对话历史、状态机与取消。"""

from lingo_core.sessions.cancellation import CancellationToken
from lingo_core.sessions.chat_session import ChatSession
from lingo_core.sessions.observer import CallbackObserver, SessionObserver

__all__ = ["CancellationToken", "ChatSession", "CallbackObserver", "SessionObserver"]
