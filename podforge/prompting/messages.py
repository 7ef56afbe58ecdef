"""Jinja2-rendered console messages for the configurator.

The MessageBank renders the welcome banner and the farewell message from the
``message_templates/`` directory next to this module, and owns the prompt
marker shown before every answer.
"""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from ..templates import TemplateRenderer


_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "message_templates"


class MessageBank:
    """Prints the user-facing messages around a configuration run."""

    prompt_marker = "> "

    def __init__(
        self,
        console: Console | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.console = console or Console()
        self.renderer = renderer or TemplateRenderer(_DEFAULT_TEMPLATE_DIR)

    def welcome_message(self, project_name: str) -> str:
        text = self.renderer.render("welcome.txt.j2", {"project_name": project_name})
        self.console.print(
            Panel(text.rstrip(), title="[bold]podforge[/bold]", border_style="bright_cyan")
        )
        return text

    def farewell_message(
        self,
        project_name: str,
        variant: str,
        warnings: list[str],
        duration: str,
    ) -> str:
        text = self.renderer.render(
            "farewell.txt.j2",
            {
                "project_name": project_name,
                "variant": variant,
                "warnings": [escape(w) for w in warnings],
                "duration": duration,
            },
        )
        style = "yellow" if warnings else "green"
        self.console.print(Panel(text.rstrip(), border_style=style))
        return text
