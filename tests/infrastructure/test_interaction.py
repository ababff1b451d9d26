"""Tests for the operator interaction adapters."""

import io

import pytest
from rich.console import Console

from versionflow.infrastructure.interaction import ConsoleInteraction, ScriptedInteraction


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


def console_interaction(output: io.StringIO, answers: str) -> ConsoleInteraction:
    console = Console(file=output, force_terminal=False, width=200)
    return ConsoleInteraction(console=console, stream=io.StringIO(answers))


class TestConsoleInteraction:
    def test_ask_reads_answer(self, output: io.StringIO) -> None:
        interaction = console_interaction(output, "D/feature\n")

        assert interaction.ask("Version? ") == "D/feature"
        assert "Version? " in output.getvalue()

    def test_ask_with_default_blank_answer(self, output: io.StringIO) -> None:
        interaction = console_interaction(output, "\n")

        assert interaction.ask_with_default("Continue (YES/NO) [YES]? ", "YES") == "YES"

    def test_ask_with_default_given_answer(self, output: io.StringIO) -> None:
        interaction = console_interaction(output, "  no \n")

        assert interaction.ask_with_default("Continue? ", "YES") == "no"

    def test_prompt_markup_is_not_interpreted(self, output: io.StringIO) -> None:
        """Square brackets in prompts are shown literally."""
        interaction = console_interaction(output, "\n")

        interaction.ask_with_default("Version [D/master]? ", "D/master")

        assert "[D/master]" in output.getvalue()

    def test_inform(self, output: io.StringIO) -> None:
        interaction = console_interaction(output, "")

        interaction.inform("Version [S/1.0] is reused.")

        assert "> Version [S/1.0] is reused." in output.getvalue()


class TestScriptedInteraction:
    def test_answers_in_order(self) -> None:
        interaction = ScriptedInteraction(["first", "second"])

        assert interaction.ask("a") == "first"
        assert interaction.ask("b") == "second"
        assert interaction.prompts == ["a", "b"]
        assert interaction.remaining == 0

    def test_empty_answer_means_default(self) -> None:
        interaction = ScriptedInteraction([""])

        assert interaction.ask_with_default("q", "YES") == "YES"

    def test_add_answers(self) -> None:
        interaction = ScriptedInteraction()
        interaction.add_answers("x", "y")

        assert interaction.remaining == 2

    def test_running_out_of_answers(self) -> None:
        interaction = ScriptedInteraction()

        with pytest.raises(RuntimeError, match="No scripted answer left"):
            interaction.ask("Unexpected? ")
        assert interaction.prompts == ["Unexpected? "]

    def test_inform_is_recorded(self) -> None:
        interaction = ScriptedInteraction()

        interaction.inform("hello")

        assert interaction.messages == ["hello"]
