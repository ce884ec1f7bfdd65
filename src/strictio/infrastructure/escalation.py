"""Scoped escalation of warnings and faults into structured errors.

``watch`` runs a callable with a diagnostic handler installed for the calling
thread. A warning emitted while the handler is active is raised, from inside
``warnings.warn``, as the watcher's error class; any other ``Exception``
escaping the callable is rewrapped into the same class.

Handlers live on a per-thread stack. A single process-wide dispatcher takes
the place of ``warnings.showwarning`` while at least one scope is active in
any thread and hands each warning to the innermost handler of the thread that
emitted it. Threads without an active scope fall through to whatever
``showwarning`` was installed before.

Example:
    >>> from strictio.infrastructure.escalation import ErrorEscalator
    >>> from strictio.domain.errors import ReadFailed
    >>> ErrorEscalator(ReadFailed).watch(handle.read, 10)
"""

from __future__ import annotations

import threading
import warnings
from contextlib import contextmanager
from typing import Any, Callable, Iterator, List, Optional, Type, TypeVar

import structlog

from strictio.domain.errors import EscalatedError

logger = structlog.get_logger()

T = TypeVar("T")

_local = threading.local()
_install_lock = threading.Lock()
_active_scopes = 0
_guard: Optional[warnings.catch_warnings] = None
_fallback_showwarning: Callable[..., Any] = warnings.showwarning


class _Handler:
    """One stack frame: raises the owning escalator's error for a diagnostic."""

    __slots__ = ("error_cls",)

    def __init__(self, error_cls: Type[EscalatedError]):
        self.error_cls = error_cls

    def __call__(self, message: Any, category: Type[Warning], filename: str, lineno: int) -> None:
        text = str(message)
        logger.debug(
            "diagnostic_escalated",
            kind=self.error_cls.kind.value,
            category=category.__name__,
            filename=filename,
            lineno=lineno,
        )
        raise self.error_cls.from_diagnostic(text, category, filename, lineno)


def _handler_stack() -> List[_Handler]:
    stack = getattr(_local, "stack", None)
    if stack is None:
        stack = []
        _local.stack = stack
    return stack


def handler_depth() -> int:
    """Number of escalation scopes active on the calling thread."""
    return len(_handler_stack())


def _dispatch(message, category, filename, lineno, file=None, line=None):
    stack = _handler_stack()
    if stack:
        stack[-1](message, category, filename, lineno)
        return
    _fallback_showwarning(message, category, filename, lineno, file, line)


def _acquire_dispatcher(escalate_all: bool) -> None:
    global _active_scopes, _guard, _fallback_showwarning
    with _install_lock:
        if _active_scopes == 0:
            guard = warnings.catch_warnings()
            guard.__enter__()
            if escalate_all:
                warnings.simplefilter("always")
            _fallback_showwarning = warnings.showwarning
            warnings.showwarning = _dispatch
            _guard = guard
        _active_scopes += 1


def _release_dispatcher() -> None:
    global _active_scopes, _guard
    with _install_lock:
        _active_scopes -= 1
        if _active_scopes == 0 and _guard is not None:
            guard = _guard
            _guard = None
            # Restores the filters and showwarning active before the first scope.
            guard.__exit__(None, None, None)


def dispatcher_installed() -> bool:
    with _install_lock:
        return _active_scopes > 0


class ErrorEscalator:
    """Runs callables under a diagnostic handler bound to ``error_cls``."""

    def __init__(
        self,
        error_cls: Type[EscalatedError] = EscalatedError,
        *,
        escalate_all: Optional[bool] = None,
    ):
        if not (isinstance(error_cls, type) and issubclass(error_cls, EscalatedError)):
            raise TypeError("error_cls must be an EscalatedError subclass")
        self.error_cls = error_cls
        self._escalate_all = escalate_all

    @property
    def escalate_all(self) -> bool:
        if self._escalate_all is not None:
            return self._escalate_all
        from strictio.config import settings
        return settings.escalate_all_warnings

    @contextmanager
    def scope(self) -> Iterator[None]:
        """Install a handler for the calling thread; restore the previous one on exit."""
        stack = _handler_stack()
        handler = _Handler(self.error_cls)
        _acquire_dispatcher(self.escalate_all)
        stack.append(handler)
        try:
            yield
        finally:
            stack.pop()
            _release_dispatcher()

    def watch(self, operation: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Call ``operation`` and escalate any diagnostic or fault it raises."""
        with self.scope():
            try:
                return operation(*args, **kwargs)
            except self.error_cls:
                raise
            except Exception as exc:
                escalated = self.error_cls.from_exception(exc)
                if not isinstance(exc, EscalatedError):
                    logger.debug(
                        "fault_escalated",
                        kind=self.error_cls.kind.value,
                        fault=type(exc).__name__,
                        code=escalated.code,
                        location=str(escalated.location),
                    )
                raise escalated from exc


_default = ErrorEscalator()


def watch(operation: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Call ``operation`` under the generic ``EscalatedError`` escalator."""
    return _default.watch(operation, *args, **kwargs)
