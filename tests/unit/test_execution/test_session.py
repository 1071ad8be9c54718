"""
Unit tests for the session lifecycle.

Tests configuration of the engine, running scripts in-process, the
exception policy, and the resume signal for paused sessions.
"""

import signal
import sys
from unittest.mock import Mock

import pytest

from myprof.execution.session import SessionController, SessionState
from myprof.execution.signal_handler import PauseSignalHandler
from myprof.models.enums import MeasureMode
from myprof.models.session import SessionConfig
from myprof.symbols import RootScope, SymbolResolver
from myprof.validation import SessionStateError


class Target:
    def first(self):
        pass

    @classmethod
    def second(cls):
        pass


def _method(result, name):
    for info in result.methods:
        if info.key.name == name:
            return info
    return None


def late_work():
    return sum(range(10))


def _run_to_stop(controller):
    """Run the script, then stop the session the way the exit finalizer does."""
    try:
        controller.run()
    finally:
        controller.stop()


@pytest.mark.unit
class TestConfigure:
    """Test cases for SessionController.configure."""

    def test_builds_profile_from_config(self):
        factory = Mock()
        config = SessionConfig(
            script="s.py",
            allow_exceptions=True,
            exclude_common=True,
            measure_mode=MeasureMode.MEMORY,
            track_allocations=True,
        )
        controller = SessionController(config, profile_factory=factory)

        profile = controller.configure()

        factory.assert_called_once_with(
            allow_exceptions=True,
            exclude_common=True,
            measure_mode=MeasureMode.MEMORY,
            track_allocations=True,
        )
        assert profile is factory.return_value
        assert controller.state is SessionState.CONFIGURED

    def test_registers_exclusions_in_order(self):
        resolver = SymbolResolver(RootScope({"Target": Target}))
        targets = tuple(resolver.parse_exclusion_list("Target.second,Target#first"))
        factory = Mock()
        controller = SessionController(SessionConfig(script="s.py", exclude=targets), profile_factory=factory)

        controller.configure()

        calls = factory.return_value.exclude.call_args_list
        assert [call.args[1] for call in calls] == ["second", "first"]
        assert calls[0].args[0] is targets[0].scope

    def test_configure_twice(self):
        controller = SessionController(SessionConfig(script="s.py"), profile_factory=Mock())
        controller.configure()
        with pytest.raises(SessionStateError):
            controller.configure()

    def test_run_before_configure(self):
        controller = SessionController(SessionConfig(script="s.py"))
        with pytest.raises(SessionStateError):
            controller.run()

    def test_results_before_run(self):
        controller = SessionController(SessionConfig(script="s.py"))
        controller.configure()
        assert not controller.has_results
        with pytest.raises(SessionStateError):
            controller.results()


@pytest.mark.unit
class TestRun:
    """Test cases for running scripts under measurement."""

    def test_runs_script_as_main(self, write_script, script_environment, tmp_path):
        out = tmp_path / "out.txt"
        script = write_script(
            "import sys\n"
            "def work():\n"
            "    return sum(range(10))\n"
            "if __name__ == '__main__':\n"
            "    work()\n"
            "    with open(sys.argv[1], 'w') as f:\n"
            "        f.write(' '.join(sys.argv))\n"
        )
        controller = SessionController(SessionConfig(script=str(script), script_args=(str(out), "--flag")))
        controller.configure()
        _run_to_stop(controller)

        assert controller.state is SessionState.STOPPED
        assert out.read_text() == f"{script} {out} --flag"
        assert _method(controller.results(), "work").called == 1

    def test_measurement_continues_after_script(self, write_script, script_environment):
        """Work done after the script body, such as exit callbacks, is measured until stop."""
        script = write_script("x = 1\n")
        controller = SessionController(SessionConfig(script=str(script)))
        controller.configure()
        try:
            controller.run()
            assert controller.state is SessionState.RUNNING
            assert not controller.has_results
            late_work()
        finally:
            controller.stop()

        assert _method(controller.results(), "late_work").called == 1

    def test_init_globals_are_visible_to_script(self, write_script, script_environment, tmp_path):
        out = tmp_path / "out.txt"
        script = write_script(
            "import sys\n"
            "with open(sys.argv[1], 'w') as f:\n"
            "    f.write(str(helper()))\n"
        )
        controller = SessionController(
            SessionConfig(script=str(script), script_args=(str(out),), allow_exceptions=True),
            init_globals={"helper": lambda: 42},
        )
        controller.configure()
        _run_to_stop(controller)

        assert out.read_text() == "42"

    def test_script_directory_is_importable(self, write_script, script_environment):
        write_script("VALUE = 42\n", name="sibling.py")
        script = write_script("import sibling\nassert sibling.VALUE == 42\n")
        controller = SessionController(SessionConfig(script=str(script), allow_exceptions=True))
        controller.configure()
        _run_to_stop(controller)
        sys.modules.pop("sibling", None)

        assert controller.has_results

    def test_exception_suppressed(self, write_script, script_environment):
        script = write_script("raise ValueError('boom')\n")
        controller = SessionController(SessionConfig(script=str(script)))
        controller.configure()
        _run_to_stop(controller)

        assert controller.has_results
        assert isinstance(controller.profile.exception, ValueError)

    def test_exception_allowed(self, write_script, script_environment):
        script = write_script("raise ValueError('boom')\n")
        controller = SessionController(SessionConfig(script=str(script), allow_exceptions=True))
        controller.configure()

        with pytest.raises(ValueError):
            _run_to_stop(controller)
        assert controller.state is SessionState.STOPPED

    def test_system_exit_propagates(self, write_script, script_environment):
        script = write_script("import sys\nsys.exit(7)\n")
        controller = SessionController(SessionConfig(script=str(script)))
        controller.configure()

        with pytest.raises(SystemExit) as exc_info:
            _run_to_stop(controller)
        assert exc_info.value.code == 7
        assert controller.has_results

    def test_stop_is_idempotent(self, write_script, script_environment):
        script = write_script("x = 1\n")
        controller = SessionController(SessionConfig(script=str(script)))
        controller.configure()
        _run_to_stop(controller)
        controller.stop()
        assert controller.state is SessionState.STOPPED


@pytest.mark.unit
@pytest.mark.skipif(not hasattr(signal, "SIGUSR1"), reason="requires SIGUSR1")
class TestPausedSessions:
    """Test cases for --start-paused sessions."""

    def test_signal_resumes_measurement(self, write_script, script_environment):
        script = write_script(
            "import os, signal\n"
            "def before():\n"
            "    pass\n"
            "def after():\n"
            "    pass\n"
            "before()\n"
            "os.kill(os.getpid(), signal.SIGUSR1)\n"
            "for _ in range(1000):\n"
            "    pass\n"
            "after()\n"
        )
        original = signal.getsignal(signal.SIGUSR1)
        controller = SessionController(SessionConfig(script=str(script), start_paused=True))
        controller.configure()
        _run_to_stop(controller)
        result = controller.results()

        assert _method(result, "before") is None
        assert _method(result, "after").called == 1
        assert signal.getsignal(signal.SIGUSR1) == original

    def test_pause_and_resume_follow_state(self):
        profile = Mock(is_paused=True)
        controller = SessionController(SessionConfig(script="s.py"), profile_factory=lambda **kw: profile)
        controller.configure()
        controller._state = SessionState.PAUSED

        controller.resume()
        profile.resume.assert_called_once_with()
        controller.pause()
        profile.pause.assert_not_called()


@pytest.mark.unit
@pytest.mark.skipif(not hasattr(signal, "SIGUSR2"), reason="requires SIGUSR2")
class TestPauseSignalHandler:
    """Test cases for PauseSignalHandler."""

    def test_install_and_restore(self):
        resume, pause = Mock(), Mock()
        handler = PauseSignalHandler(resume=resume, pause=pause)
        original = signal.getsignal(signal.SIGUSR1)

        handler.setup_signal_handlers()
        try:
            assert handler.is_installed
            handler._handle(signal.SIGUSR1, None)
            handler._handle(signal.SIGUSR2, None)
        finally:
            handler.cleanup_signal_handlers()

        resume.assert_called_once_with()
        pause.assert_called_once_with()
        assert not handler.is_installed
        assert signal.getsignal(signal.SIGUSR1) == original

    def test_replaced_handler_is_left_alone(self):
        handler = PauseSignalHandler(resume=Mock(), pause=Mock())
        original = signal.getsignal(signal.SIGUSR1)
        original_pause = signal.getsignal(signal.SIGUSR2)
        replacement = Mock()

        handler.setup_signal_handlers()
        try:
            signal.signal(signal.SIGUSR1, replacement)
            handler.cleanup_signal_handlers()
            assert signal.getsignal(signal.SIGUSR1) is replacement
        finally:
            signal.signal(signal.SIGUSR1, original)
            signal.signal(signal.SIGUSR2, original_pause)
