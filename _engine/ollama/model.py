import logging
from typing import List, Optional

from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.console import Console
import requests
from rich.panel import Panel
from rich.table import Table
from _data.ollama import BASE_URL, CONNECT_TIMEOUT, READ_TIMEOUT
from _data.theme import custom_theme

logger = logging.getLogger(__name__)
console = Console(theme=custom_theme)


def get_models(base_url: str = BASE_URL) -> list:
    """Get all available models on the system"""
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]Loading models..."),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task("", total=None)
            response = requests.get(
                f"{base_url.rstrip('/')}/tags", timeout=(CONNECT_TIMEOUT, READ_TIMEOUT)
            )

        if response.status_code == 200:
            return response.json().get("models", [])
        else:
            console.print(f"[bold red]Error: {response.status_code}")
            return []
    except requests.exceptions.ConnectionError:
        console.print("[bold red]Unable to connect to Ollama server")
        console.print(f"[yellow]Please check if Ollama is running at {base_url}")
        return []
    except requests.exceptions.RequestException as e:
        logger.warning("Listing models failed: %s", e)
        return []


def model_names(models: list) -> List[str]:
    return [m.get("name", "") for m in models]


def display_models(models) -> None:
    """Display models in table format"""
    if not models:
        console.print(
            Panel(
                "[italic yellow]No models installed on the system",
                title="[bold red]Warning",
                border_style="red",
            )
        )
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("No.", style="dim", width=6, justify="center")
    table.add_column("Model Name", style="cyan", min_width=20)
    table.add_column("Size", style="green", justify="right")
    table.add_column("Family", style="yellow")

    for i, model in enumerate(models, 1):
        name = model.get("name", "")
        size = f"{model.get('size', 0) / 1_000_000_000:.2f} GB"
        family = model.get("details", {}).get("family", "")
        table.add_row(str(i), name, size, family)

    console.print(
        Panel(table, title="[bold cyan]Installed Models", border_style="cyan")
    )


def select_model(models) -> Optional[str]:
    """Let the user select a model"""
    if not models:
        return None

    while True:
        console.print("\n[bold yellow]Please select a model (enter number or 'q' to quit):")
        choice = console.input("[bold cyan]>>> ")

        if choice.lower() == "q":
            return None

        try:
            index = int(choice) - 1
        except ValueError:
            console.print("[bold red]Please enter a valid number")
            continue

        if 0 <= index < len(models):
            return models[index]["name"]
        console.print("[bold red]Invalid number")
