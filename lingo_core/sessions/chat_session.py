"""流式聊天会话。

一个 ChatSession 持有一段对话历史，并通过注入的 VendorAdapter 与某个厂商交互。
每次 send 的流程：

1. 合并配置（覆盖项 > 设置 > 默认值），缺少密钥/地址时直接报错返回，不发请求；
2. 追加用户消息（可选）与一条空的 assistant 占位消息；
3. 以除占位消息外的历史构造请求，发起流式 POST；
4. 把响应字节交给适配器的帧解码器，逐帧解析出增量并追加到占位消息，
   每次追加后以本次调用累积的文本回调 on_generating；
5. 收到结束信号（或流正常结束）后回调 on_complete。

abort/clear 通过取消令牌终止正在进行的调用，已追加的增量保留，
被取消的调用既不回调 on_complete 也不回调 on_error。
"""

import asyncio
import inspect
import logging
from typing import TYPE_CHECKING, Any, Awaitable, Dict, Iterable, List, Mapping, Optional, Set
from uuid import uuid4

import httpx

from lingo_core.config.settings import settings as default_settings
from lingo_core.domain.exceptions import (
    BusinessError,
    ConfigurationError,
    SessionBusyError,
    TransportError,
    VendorStreamError,
)
from lingo_core.domain.models import HttpRequestSpec, Message, SessionStatus
from lingo_core.infrastructure.logging.logger import logger
from lingo_core.infrastructure.notify import Notifier, log_notifier
from lingo_core.sessions.cancellation import CancellationToken
from lingo_core.sessions.observer import CallbackObserver

if TYPE_CHECKING:
    from lingo_core.providers.base import VendorAdapter


_BUSY_STATES = (SessionStatus.REQUESTING, SessionStatus.STREAMING)


async def _await(awaitable: Awaitable[Any]) -> Any:
    return await awaitable


class ChatSession:
    def __init__(
        self,
        adapter: "VendorAdapter",
        observer: Optional[Any] = None,
        seed: Optional[Iterable[Message]] = None,
        overrides: Optional[Mapping[str, Optional[str]]] = None,
        settings: Any = None,
        notify: Optional[Notifier] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.adapter = adapter
        self.observer = observer if observer is not None else CallbackObserver()
        self.messages: List[Message] = list(seed or [])
        self.status = SessionStatus.IDLE
        self.token = CancellationToken()
        self._overrides: Dict[str, Optional[str]] = dict(overrides or {})
        self._settings = settings if settings is not None else default_settings
        self._notify: Notifier = notify or log_notifier
        self._transport = transport
        self._hook_tasks: Set["asyncio.Task"] = set()

    @property
    def busy(self) -> bool:
        return self.status in _BUSY_STATES

    async def send(self, content: Optional[str] = None) -> None:
        """发送一轮对话；content 为 None 时以现有历史重新生成。

        配置缺失、网络失败、厂商错误都不会抛给调用方，而是通过
        notify 与 on_error 报告，状态置为 ERROR。
        """

        if self.busy:
            raise SessionBusyError(
                code="SESSION_BUSY",
                message="A request is already in progress",
                engine=self.adapter.name,
            )

        log_ctx: Dict[str, Any] = {
            "trace_id": f"tr-{uuid4().hex}",
            "engine": self.adapter.name,
        }

        try:
            config = self.adapter.resolve_config(self._overrides, self._settings)
        except ConfigurationError as exc:
            await self._report(exc, log_ctx)
            return

        # 空字符串与 None 一样视为“不追加用户消息”
        if content:
            self.messages.append(Message(role="user", content=content))
        placeholder = Message(role="assistant", content="")
        self.messages.append(placeholder)
        self.status = SessionStatus.REQUESTING
        if self.token.tripped:
            self.token = CancellationToken()
        token = self.token

        try:
            await self._run(config, placeholder, token, log_ctx)
        except Exception as exc:
            # 观察者钩子或适配器的意外异常：会话不能停留在忙碌状态
            if self.busy:
                self.status = SessionStatus.ERROR
                placeholder.is_error = True
            self._log(
                logging.ERROR,
                "Chat call crashed",
                log_ctx,
                error=f"{exc.__class__.__name__}: {exc}",
            )
            raise

    async def _run(self, config: Any, placeholder: Message, token: CancellationToken, log_ctx: Dict[str, Any]) -> None:
        await self._emit("on_before_request")
        if token.tripped:
            # on_before_request 期间被 abort/clear，状态已由它们设置
            self._log(logging.INFO, "Chat call cancelled before request", log_ctx, reason=token.reason)
            return

        request = self.adapter.build_request(self.messages[:-1], config)
        self._log(
            logging.INFO,
            "Chat call started",
            log_ctx,
            model=config.model,
            messages=len(self.messages) - 1,
        )

        task = asyncio.ensure_future(self._exchange(request, placeholder, log_ctx))
        token.bind(task)
        try:
            await task
        except asyncio.CancelledError:
            if not token.tripped:
                # 调用方取消了 send 本身
                self.status = SessionStatus.ABORTED
                raise
            self._log(
                logging.INFO,
                "Chat call aborted",
                log_ctx,
                reason=token.reason,
                chars=len(placeholder.content),
            )
            return
        except BusinessError as exc:
            placeholder.is_error = True
            await self._report(exc, log_ctx)
            return
        finally:
            token.unbind()

        if token.tripped:
            return
        self.status = SessionStatus.COMPLETE
        self._log(logging.INFO, "Chat call completed", log_ctx, chars=len(placeholder.content))
        await self._emit("on_complete", placeholder.content)

    async def refresh(self) -> None:
        """丢弃最后一条消息（通常是上一次的回答）并重新生成。"""

        if self.busy:
            raise SessionBusyError(
                code="SESSION_BUSY",
                message="A request is already in progress",
                engine=self.adapter.name,
            )
        if self.messages:
            self.messages.pop()
        await self.send()

    def abort(self) -> None:
        self.token.trip("abort")
        if self.busy:
            self.status = SessionStatus.ABORTED

    def clear(self) -> None:
        """清空历史并终止进行中的调用；on_clear 回调恰好一次。

        协程形式的 on_clear：有运行中的事件循环时作为任务调度（会话持有引用），
        否则在此处同步跑完。
        """

        self.token.trip("clear")
        self.messages = []
        self.status = SessionStatus.IDLE
        hook = getattr(self.observer, "on_clear", None)
        if hook is None:
            return
        result = hook()
        if not inspect.isawaitable(result):
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(_await(result))
            return
        task = loop.create_task(_await(result))
        self._hook_tasks.add(task)
        task.add_done_callback(self._hook_done)

    def _hook_done(self, task: "asyncio.Task") -> None:
        self._hook_tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._log(
                logging.ERROR,
                "on_clear hook failed",
                {"engine": self.adapter.name},
                error=f"{exc.__class__.__name__}: {exc}",
            )

    async def _exchange(self, request: HttpRequestSpec, placeholder: Message, log_ctx: Dict[str, Any]) -> None:
        timeout = float(getattr(self._settings, "http_timeout", 30.0))
        try:
            async with httpx.AsyncClient(timeout=timeout, trust_env=False, transport=self._transport) as client:
                async with client.stream(
                    "POST",
                    request.url,
                    json=request.body,
                    headers=request.headers,
                ) as resp:
                    if not resp.is_success:
                        body = await resp.aread()
                        raise TransportError(
                            code="API_ERROR",
                            message=self.adapter.parse_error_body(resp.status_code, body),
                            http_status=resp.status_code,
                            engine=self.adapter.name,
                        )
                    self.status = SessionStatus.STREAMING
                    await self._pump(resp, placeholder, log_ctx)
        except httpx.RequestError as exc:
            raise TransportError(
                code="NETWORK_ERROR",
                message=str(exc) or exc.__class__.__name__,
                http_status=503,
                engine=self.adapter.name,
            ) from exc

    async def _pump(self, resp: httpx.Response, placeholder: Message, log_ctx: Dict[str, Any]) -> None:
        decoder = self.adapter.new_decoder()
        async for chunk in resp.aiter_bytes():
            if await self._apply_frames(decoder.feed(chunk), placeholder):
                return
            if decoder.finished:
                return
        if await self._apply_frames(decoder.close(), placeholder):
            return
        if not self.adapter.terminal_on_eof:
            self._log(logging.WARNING, "Stream ended without terminal signal", log_ctx)

    async def _apply_frames(self, frames: List[Any], placeholder: Message) -> bool:
        """按顺序应用帧；返回 True 表示本次调用应当结束。"""

        for frame in frames:
            if self.token.tripped:
                return True
            result = self.adapter.parse_frame(frame)
            if result.error:
                raise VendorStreamError(
                    code="VENDOR_STREAM_ERROR",
                    message=result.error,
                    engine=self.adapter.name,
                )
            if result.delta:
                placeholder.content += result.delta
                await self._emit("on_generating", placeholder.content)
            if result.terminal:
                return True
        return False

    async def _report(self, exc: BusinessError, log_ctx: Dict[str, Any]) -> None:
        self.status = SessionStatus.ERROR
        self._log(logging.ERROR, "Chat call failed", log_ctx, code=exc.code, error=exc.message)
        self._notify("error", exc.message)
        await self._emit("on_error", exc.message)

    async def _emit(self, hook_name: str, *args: Any) -> None:
        hook = getattr(self.observer, hook_name, None)
        if hook is None:
            return
        result = hook(*args)
        if inspect.isawaitable(result):
            await result

    @staticmethod
    def _log(level: int, message: str, log_ctx: Dict[str, Any], **fields: Any) -> None:
        payload = dict(log_ctx)
        payload.update(fields)
        logger.log(level, message, extra={"extra": payload})
