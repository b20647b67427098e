"""Dynamic UI Agent Command Line Interface.

Generates structured UI responses from the terminal.
"""

import asyncio
import json
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax

from dynui.agent.agent import respond as agent_respond
from dynui.agent.models import AgentConfig, LLMConfig
from dynui.agent.schema import AgentResponse, dump_response
from dynui.core.config import get_settings
from dynui.core.errors import AgentError
from dynui.core.logging import configure_logging

app = typer.Typer(
    name="dynui",
    help="Dynamic UI Agent - structured UI responses from natural language",
    add_completion=False,
)
console = Console()

DEMO_PROMPT = (
    "Create a simple login form with email and password, "
    "and a secondary button to learn more."
)


def _require_api_key() -> None:
    """Exit with an error when no LLM API key is configured."""
    if not get_settings().llm_api_key:
        console.print(
            "[bold red]Error:[/bold red] LLM_API_KEY environment variable is required.",
            style="red",
        )
        console.print("Set it in your .env file or environment.")
        raise typer.Exit(1)


def _print_response(response: AgentResponse) -> None:
    """Print the response title and its JSON wire format."""
    if response.title:
        console.print(Panel(response.description or "", title=response.title, border_style="blue"))
    payload = json.dumps(dump_response(response), indent=2)
    console.print(Syntax(payload, "json", word_wrap=True))


def _run(prompt: str, config: AgentConfig) -> None:
    configure_logging(quiet=True)
    try:
        response = asyncio.run(agent_respond(prompt, config))
    except (AgentError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    _print_response(response)


@app.command()
def respond(
    prompt: str = typer.Argument(..., help="What the UI should do"),
    model: Optional[str] = typer.Option(
        None, "--model", "-m", help="Model name (default: LLM_MODEL)"
    ),
    temperature: Optional[float] = typer.Option(
        None, "--temperature", "-t", help="Sampling temperature"
    ),
    system_prompt: Optional[str] = typer.Option(
        None, "--system-prompt", help="Replace the built-in system prompt"
    ),
    no_ids: bool = typer.Option(
        False, "--no-ids", help="Don't assign ids to UI nodes"
    ),
):
    """Generate a UI response for a prompt.

    Examples:
        dynui respond "Build a pricing table with 3 tiers"
        dynui respond "Signup form" -m gpt-4o -t 0.2
    """
    _require_api_key()
    config = AgentConfig(
        system_prompt=system_prompt,
        llm=LLMConfig(model=model, temperature=temperature),
        auto_assign_ids=not no_ids,
    )
    _run(prompt, config)


@app.command()
def demo():
    """Generate the login form demo."""
    _require_api_key()
    console.print(f"[dim]Prompt: {DEMO_PROMPT}[/dim]\n")
    _run(DEMO_PROMPT, AgentConfig())


if __name__ == "__main__":
    app()
