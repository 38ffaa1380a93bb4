# display.py
# All terminal output for Bug Butler.
#
# This module owns presentation entirely. engine.py and app.py never
# format strings; run.py calls named functions here. Swap this file to
# change the entire UI.
#
# Colour language:
#   magenta — Bug Butler (assistant turns, branding)
#   cyan    — the user's own turns
#   yellow  — settings / API key overlay
#   green   — success / report
#   red     — failures and notices

from rich import box
from rich.align import Align
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Prompt
from rich.rule import Rule
from rich.status import Status
from rich.table import Table
from rich.text import Text

from bug_butler.models import Role, Turn

console = Console()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _label(tag: str, color: str) -> Text:
    t = Text()
    t.append(f" {tag} ", style=f"bold white on {color}")
    return t


# ---------------------------------------------------------------------------
# Landing
# ---------------------------------------------------------------------------


def landing(key_label: str) -> None:
    console.print()
    steps = Table(box=None, show_header=False, padding=(0, 1))
    steps.add_column(justify="right", style="bold magenta", width=3)
    steps.add_column(style="white")
    steps.add_row("1", "Chat with Bug Butler about the issue you found")
    steps.add_row("2", "Answer a few simple questions about what happened")
    steps.add_row("3", "Get a perfectly formatted bug report, ready to share")

    console.print(
        Panel(
            Text.assemble(
                ("Bug Butler\n", "bold magenta"),
                ("Your friendly AI assistant that transforms messy bug descriptions\n", "dim"),
                ("into crystal-clear, structured reports.", "dim"),
                justify="center",
            ),
            border_style="magenta",
            padding=(1, 4),
        )
    )
    console.print(Panel(steps, title="[bold]How it works[/bold]", border_style="dim", padding=(0, 2)))
    console.print(f"  [yellow]🔑 {key_label}[/yellow]   [dim]Commands: start · key · quit[/dim]")


# ---------------------------------------------------------------------------
# Chat
# ---------------------------------------------------------------------------


def chat_header() -> None:
    console.print()
    console.print(Rule("[bold magenta]Bug Butler[/bold magenta]", style="magenta"))
    console.print("[dim]  /report when ready · /back to leave · /key for settings · /quit[/dim]")


def turn(t: Turn) -> None:
    if t.role is Role.USER:
        console.print(
            Align.right(
                Panel(Text(t.content), border_style="cyan", box=box.ROUNDED, expand=False, padding=(0, 2))
            )
        )
    elif t.failed:
        console.print(
            Panel(
                Text(f"❌ {t.content}", style="bold red"),
                border_style="red",
                box=box.ROUNDED,
                expand=False,
                padding=(0, 2),
            )
        )
    else:
        console.print(
            Panel(Text(t.content), border_style="magenta", box=box.ROUNDED, expand=False, padding=(0, 2))
        )


def transcript(turns: tuple[Turn, ...]) -> None:
    for t in turns:
        turn(t)


def typing() -> Status:
    return console.status("[magenta]Bug Butler is typing…[/magenta]", spinner="dots")


def generating() -> Status:
    return console.status("[green]Generating report…[/green]", spinner="dots")


def ready_to_finalize() -> None:
    console.print()
    console.print(
        Panel(
            "[bold green]Great! I have all the information I need.[/bold green]\n"
            "[dim]Type /report to generate your bug report.[/dim]",
            border_style="green",
            padding=(0, 2),
        )
    )


def user_input() -> str:
    return Prompt.ask("[bold cyan]You[/bold cyan]", console=console, default="", show_default=False)


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------


def report(markdown: str) -> None:
    console.print()
    console.print(Rule("[bold green]Your Bug Report is Ready![/bold green]", style="green"))
    console.print(
        Panel(
            Markdown(markdown),
            title=_label("BUG REPORT", "green"),
            border_style="green",
            padding=(1, 2),
        )
    )
    console.print("[dim]  Commands: save <path> · new · quit[/dim]")


def report_saved(path: str) -> None:
    console.print(f"  [bold green]✓ Saved[/bold green] [dim]{path}[/dim]")


# ---------------------------------------------------------------------------
# Settings overlay
# ---------------------------------------------------------------------------


def ask_api_key(message: str) -> str:
    console.print()
    console.print(
        Panel(
            f"[white]{message}[/white]\n[dim]Your key is stored locally on this machine.[/dim]",
            title=_label("OPENAI API KEY", "yellow"),
            border_style="yellow",
            padding=(0, 2),
        )
    )
    return Prompt.ask(
        "[yellow]API key[/yellow] (blank to clear)",
        console=console,
        password=True,
        default="",
        show_default=False,
    )


def api_key_saved(masked: str) -> None:
    console.print(f"  [bold green]✓ API key set[/bold green] [dim]{masked}[/dim]")


def api_key_cleared() -> None:
    console.print("  [yellow]API key cleared.[/yellow]")


# ---------------------------------------------------------------------------
# Notices
# ---------------------------------------------------------------------------


def notice(message: str) -> None:
    console.print()
    console.print(
        Panel(
            f"[bold white]{message}[/bold white]",
            title=_label("NOTICE", "red"),
            border_style="red",
            padding=(0, 2),
        )
    )


def goodbye() -> None:
    console.print()
    console.print("[magenta]Thanks for using Bug Butler. Happy debugging![/magenta]")
    console.print()
