"""Tests for scoped warning/fault escalation."""

import errno
import threading
import warnings

import pytest

from strictio.domain.errors import (
    DiagnosticCode,
    ErrorKind,
    EscalatedError,
    ReadFailed,
    WriteFailed,
)
from strictio.infrastructure.escalation import (
    ErrorEscalator,
    dispatcher_installed,
    handler_depth,
    watch,
)


class _Abort(BaseException):
    """Not an Exception; must never be rewrapped."""


class TestWatchBasics:
    """Return values and plain faults."""

    def test_returns_operation_value(self):
        """The operation's return value is passed back."""
        assert watch(lambda a, b=0: a + b, 2, b=3) == 5

    def test_rejects_non_escalated_error_class(self):
        """Only EscalatedError subclasses can be raised."""
        with pytest.raises(TypeError):
            ErrorEscalator(ValueError)

    def test_wraps_hard_faults_with_cause(self):
        """Exceptions are wrapped with their cause and location."""
        fault = RuntimeError("Something went wrong!")

        def boom():
            raise fault

        with pytest.raises(EscalatedError, match="Something went wrong!") as info:
            watch(boom)
        assert info.value.cause is fault
        assert info.value.__cause__ is fault
        assert info.value.kind is ErrorKind.ESCALATED
        assert info.value.location.filename == __file__

    def test_os_error_code_is_errno(self):
        """OS errors carry their errno as the code."""
        def missing():
            raise FileNotFoundError(errno.ENOENT, "No such file or directory", "nowhere")

        with pytest.raises(ReadFailed) as info:
            ErrorEscalator(ReadFailed).watch(missing)
        assert info.value.code == errno.ENOENT
        assert isinstance(info.value.cause, FileNotFoundError)

    def test_base_exceptions_pass_through(self):
        """BaseExceptions that are not Exceptions are never wrapped."""
        def abort():
            raise _Abort()

        with pytest.raises(_Abort):
            watch(abort)
        assert handler_depth() == 0


class TestDiagnostics:
    """Warnings become errors at the point they are emitted."""

    @pytest.mark.parametrize(
        "category,code",
        [
            (DeprecationWarning, DiagnosticCode.DEPRECATED),
            (FutureWarning, DiagnosticCode.DEPRECATED),
            (UserWarning, DiagnosticCode.WARNING),
            (RuntimeWarning, DiagnosticCode.RUNTIME),
            (ResourceWarning, DiagnosticCode.RESOURCE),
        ],
    )
    def test_escalates_each_category(self, category, code):
        """Each warning category maps to its diagnostic code."""
        with pytest.raises(EscalatedError, match="Kaboom!") as info:
            watch(warnings.warn, "Kaboom!", category)
        assert info.value.code == code
        assert info.value.category is category
        assert info.value.cause is None

    def test_operation_stops_at_diagnostic(self):
        """Nothing after the warning runs."""
        reached = []

        def noisy():
            warnings.warn("Warning! Warning!", UserWarning)
            reached.append(True)

        with pytest.raises(EscalatedError):
            watch(noisy)
        assert reached == []

    def test_records_source_location(self):
        """The location is where the warning was emitted."""
        def noisy():
            warnings.warn("located", UserWarning)  # marker

        with pytest.raises(EscalatedError) as info:
            watch(noisy)
        location = info.value.location
        assert location.filename == __file__
        with open(__file__, encoding="utf-8") as handle:
            lines = handle.read().splitlines()
        assert lines[location.lineno - 1].strip().endswith("# marker")

    def test_escalates_despite_ignore_filter(self):
        """Ignore filters cannot hide a diagnostic when escalating all."""
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            with pytest.raises(EscalatedError):
                ErrorEscalator(escalate_all=True).watch(warnings.warn, "hidden?", UserWarning)

    def test_respects_filters_when_not_escalating_all(self):
        """Existing filters apply when not escalating all."""
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            result = ErrorEscalator(escalate_all=False).watch(
                lambda: warnings.warn("ignored", UserWarning) or "done"
            )
        assert result == "done"


class TestScopes:
    """Handler install/restore discipline."""

    def test_restores_showwarning_after_each_exit_path(self):
        """showwarning is restored after success, warning and fault."""
        before = warnings.showwarning
        watch(lambda: None)
        assert warnings.showwarning is before
        with pytest.raises(EscalatedError):
            watch(warnings.warn, "x", UserWarning)
        assert warnings.showwarning is before
        with pytest.raises(EscalatedError):
            watch(int, "not a number")
        assert warnings.showwarning is before
        assert not dispatcher_installed()
        assert handler_depth() == 0

    def test_nested_diagnostic_stays_in_inner_scope(self):
        """A warning goes to the innermost active scope only."""
        outer_saw = []

        def inner():
            assert handler_depth() == 2
            warnings.warn("inner problem", UserWarning)

        def outer():
            assert handler_depth() == 1
            try:
                ErrorEscalator(ReadFailed).watch(inner)
            except ReadFailed as exc:
                outer_saw.append(exc)
            assert handler_depth() == 1
            # The outer handler is active again.
            warnings.warn("outer problem", UserWarning)

        with pytest.raises(WriteFailed, match="outer problem") as info:
            ErrorEscalator(WriteFailed).watch(outer)
        assert len(outer_saw) == 1
        assert outer_saw[0].message == "inner problem"
        assert info.value.cause is None
        assert handler_depth() == 0

    def test_inner_error_is_rekinded_by_outer_scope(self):
        """An outer scope re-kinds an inner error and keeps it as cause."""
        def inner():
            warnings.warn("deep", UserWarning)

        with pytest.raises(WriteFailed) as info:
            ErrorEscalator(WriteFailed).watch(ErrorEscalator(ReadFailed).watch, inner)
        assert isinstance(info.value.cause, ReadFailed)
        assert info.value.message == "deep"
        assert info.value.code == DiagnosticCode.WARNING
        assert info.value.location == info.value.cause.location

    def test_same_kind_passes_through_unchanged(self):
        """An error of the scope's own kind is not wrapped again."""
        def inner():
            raise ValueError("bad")

        escalator = ErrorEscalator(ReadFailed)
        with pytest.raises(ReadFailed) as info:
            escalator.watch(escalator.watch, inner)
        assert isinstance(info.value.cause, ValueError)

    def test_generic_watch_keeps_specific_kinds(self):
        """The generic watch lets specific kinds through."""
        def inner():
            raise OSError(errno.EBADF, "Bad file descriptor")

        with pytest.raises(ReadFailed):
            watch(ErrorEscalator(ReadFailed).watch, inner)


class TestThreads:
    """Handler stacks are per thread."""

    def test_unwatched_thread_is_not_escalated(self):
        """A thread without a scope is not escalated by another thread's scope."""
        entered = threading.Event()
        release = threading.Event()
        errors = []

        def hold():
            entered.set()
            release.wait(5)

        def unwatched():
            try:
                warnings.warn("from another thread", UserWarning)
            except Exception as exc:
                errors.append(exc)

        holder = threading.Thread(target=lambda: watch(hold))
        holder.start()
        assert entered.wait(5)
        other = threading.Thread(target=unwatched)
        other.start()
        other.join(5)
        release.set()
        holder.join(5)

        assert errors == []
        assert not dispatcher_installed()

    def test_each_thread_gets_its_own_kind(self):
        """Each thread's warning is raised with its own scope's kind."""
        ready = threading.Event()
        release = threading.Event()
        outcome = {}

        def waiting():
            ready.set()
            release.wait(5)
            return "finished"

        def holder():
            outcome["holder"] = ErrorEscalator(WriteFailed).watch(waiting)

        def noisy():
            try:
                ErrorEscalator(ReadFailed).watch(warnings.warn, "thread noise", UserWarning)
            except EscalatedError as exc:
                outcome["noisy"] = exc

        first = threading.Thread(target=holder)
        first.start()
        assert ready.wait(5)
        second = threading.Thread(target=noisy)
        second.start()
        second.join(5)
        release.set()
        first.join(5)

        assert outcome["holder"] == "finished"
        assert isinstance(outcome["noisy"], ReadFailed)
        assert not dispatcher_installed()
