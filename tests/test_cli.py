"""Tests for the interactive command-line loop."""

import io
from unittest.mock import MagicMock

import pytest

from app.cli import repl
from app.models.workflow import Completed, Failed, Rejected
from app.workflows.errors import AgentError
from stubs import StubAgents


def _reader(*lines):
    """Fake ``input`` returning ``lines`` then raising EOFError."""
    it = iter(lines)

    def read(prompt):
        try:
            return next(it)
        except StopIteration:
            raise EOFError

    return read


@pytest.fixture
def streams():
    return io.StringIO(), io.StringIO()


@pytest.mark.unit
class TestRepl:
    """Test the prompt loop behavior."""

    def test_exit_stops_loop(self, streams):
        out, err = streams
        orchestrator = MagicMock()

        repl(orchestrator, read=_reader("EXIT", "never read"), out=out, err=err)

        assert "Welcome to the Python CLI Application Generator!" in out.getvalue()
        assert "Exiting..." in out.getvalue()
        orchestrator.run_sync.assert_not_called()

    def test_empty_input_reprompts(self, streams):
        out, err = streams
        orchestrator = MagicMock()

        repl(orchestrator, read=_reader("   ", "exit"), out=out, err=err)

        assert "No input provided." in out.getvalue()
        orchestrator.run_sync.assert_not_called()

    def test_prints_completed_script(self, streams):
        out, err = streams
        orchestrator = MagicMock()
        orchestrator.run_sync.return_value = Completed(script="print('hi')")

        repl(orchestrator, read=_reader("Say hi", "exit"), out=out, err=err)

        text = out.getvalue()
        assert "--- Result ---" in text
        assert "print('hi')" in text
        orchestrator.run_sync.assert_called_once_with("Say hi")

    def test_prints_rejection_message(self, streams):
        out, err = streams
        orchestrator = MagicMock()
        orchestrator.run_sync.return_value = Rejected(message="Invalid requirements: nope")

        repl(orchestrator, read=_reader("???", "exit"), out=out, err=err)

        assert "Invalid requirements: nope" in out.getvalue()

    def test_failure_goes_to_stderr_and_loop_continues(self, streams):
        out, err = streams
        orchestrator = MagicMock()
        orchestrator.run_sync.side_effect = [
            Failed.from_exception(AgentError("generate_script failed: boom")),
            Completed(script="ok"),
        ]

        repl(orchestrator, read=_reader("first", "second"), out=out, err=err)

        assert "An error occurred while processing your request: generate_script failed: boom" in err.getvalue()
        assert "ok" in out.getvalue()
        assert orchestrator.run_sync.call_count == 2

    def test_end_of_input_exits(self, streams):
        out, err = streams

        repl(MagicMock(), read=_reader(), out=out, err=err)

        assert out.getvalue().rstrip().endswith("Exiting...")

    def test_runs_real_workflow(self, streams, make_orchestrator):
        out, err = streams
        orchestrator = make_orchestrator(StubAgents(script_fn=lambda req, n: "# generated"))

        repl(orchestrator, read=_reader("Make a tool", "exit"), out=out, err=err)

        assert "# generated" in out.getvalue()
        assert err.getvalue() == ""
