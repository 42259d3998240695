"""Interactive command-line entry point for the script workflow."""

import sys
from typing import Callable, TextIO

from loguru import logger

from .agents import LLMScriptAgents
from .config import AgentSettings, get_settings
from .models.workflow import Completed, Failed
from .workflows.orchestrator import WorkflowOrchestrator, create_orchestrator

WELCOME = """\
Welcome to the Python CLI Application Generator!

Please describe the requirements for the application you need.
Clearly specify the desired functionality in a concise manner,
ensuring it can be implemented in a single Python file.
"""

PROMPT = """\
Enter your requirements below (type 'exit' to close the program):
Example: "Create a Python CLI that converts temperatures between Celsius and Fahrenheit."
"""


def configure_logging(settings: AgentSettings) -> None:
    """Send loguru output to stderr at the configured level."""
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level.upper())


def repl(
    orchestrator: WorkflowOrchestrator,
    read: Callable[[str], str] = input,
    out: TextIO = sys.stdout,
    err: TextIO = sys.stderr,
) -> None:
    """Prompt for requirements until the user types ``exit`` or input ends."""
    print(WELCOME, file=out)

    while True:
        print(PROMPT, file=out)
        try:
            user_input = read("> ").strip()
        except EOFError:
            user_input = "exit"

        if user_input.lower() == "exit":
            print("Exiting...", file=out)
            break

        if not user_input:
            print(
                "No input provided. Please enter your requirements or type 'exit' to close the program.",
                file=out,
            )
            continue

        result = orchestrator.run_sync(user_input)
        if isinstance(result, Failed):
            print(
                f"An error occurred while processing your request: {result.error}",
                file=err,
            )
            continue

        text = result.script if isinstance(result, Completed) else result.message
        print("\n--- Result ---\n", file=out)
        print(text, file=out)
        print("\n----------------\n", file=out)


def main() -> int:
    """Console script entry point."""
    settings = get_settings()
    configure_logging(settings)

    try:
        orchestrator = create_orchestrator(LLMScriptAgents.from_settings(settings), settings)
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    try:
        repl(orchestrator)
    except KeyboardInterrupt:
        print("\nExiting...")
    return 0


if __name__ == "__main__":
    sys.exit(main())
