"""Interceptor chains wrapped around asset-loading functions."""

from __future__ import annotations

import inspect
import logging
import types
from typing import Any, Callable, List, Optional

from ..engine import Interceptor

LOGGER = logging.getLogger(__name__)


class MiddlewareChain:
    """Calls registered interceptors in order, then the original function.

    Each interceptor receives ``(args, next)``. It may call ``next(args)`` with
    the same or transformed arguments, or return without calling it to
    short-circuit the load. Interceptors can only be added, never removed.
    """

    def __init__(self) -> None:
        self.middleware: List[Interceptor] = []
        self.host: Any = None
        self.original: Optional[Callable[..., Any]] = None

    def install(self, host: Any, original: Callable[..., Any]) -> Callable[..., Any]:
        """Return a function with ``original``'s call signature that runs the chain."""

        self.host = host
        self.original = original
        target = _bind(original, host)
        middleware = self.middleware

        def wrapped(*args: Any) -> Any:
            index = 0

            def next_(call_args: list) -> Any:
                nonlocal index
                # Length is read on every hop so late registrations are honoured.
                if index >= len(middleware):
                    return target(*call_args)
                interceptor = middleware[index]
                index += 1
                return interceptor(call_args, next_)

            return next_(list(args))

        return wrapped

    def push(self, interceptor: Interceptor) -> None:
        self.middleware.append(interceptor)
        LOGGER.debug("Registered interceptor %s (%s total)", interceptor, len(self.middleware))


class InterceptedLoader:
    """Loader entry point that exposes ``on_before_load`` for interceptors."""

    def __init__(self, host: Any, original: Callable[..., Any], chain: Optional[MiddlewareChain] = None) -> None:
        self.chain = chain or MiddlewareChain()
        self._call = self.chain.install(host, original)

    def on_before_load(self, interceptor: Interceptor) -> None:
        self.chain.push(interceptor)

    def __call__(self, *args: Any) -> Any:
        return self._call(*args)


async def settle(value: Any) -> Any:
    """Await ``value`` when it is awaitable, otherwise return it unchanged."""

    if inspect.isawaitable(value):
        return await value
    return value


def _bind(original: Callable[..., Any], host: Any) -> Callable[..., Any]:
    """Bind ``original`` to ``host`` only when it is a method of the host's class."""

    if host is None or not isinstance(original, types.FunctionType):
        return original
    if inspect.getattr_static(type(host), original.__name__, None) is original:
        return types.MethodType(original, host)
    return original
