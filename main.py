# Standard Library Imports
import sys
import argparse
import logging
from functools import partial
from typing import List, Optional

# Third-Party Library Imports
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm
from rich.syntax import Syntax

# Internal Module Imports
from _data.theme import custom_theme
from _engine.errors import ConfigError, GitCommandError
from _engine.git import commit_with_message, get_repository_root, get_staged_changes
from _engine.log_setup import setup_logging
from _engine.ollama import display_models, generate, get_models, model_names, select_model
from _engine.prompt import build_prompt
from _engine.session import CommitMessageField, CommitMessageSession
from _engine.settings import Settings, config_file_path, load_settings, save_default_model
from _types.model import GenerationState
from animation.Processing import StreamingCommitView, show_notification

logger = logging.getLogger(__name__)

# --- Initialize Rich Console ---
console = Console(theme=custom_theme)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate a commit message for the staged git changes with a local Ollama model."
    )
    parser.add_argument(
        "-m",
        "--model",
        help="Ollama model name to use for this run. Overrides the configured default.",
        type=str,
    )
    parser.add_argument(
        "--url",
        help="Ollama API base URL. Default: configured value or http://localhost:11434/api",
        type=str,
    )
    parser.add_argument(
        "--prompt-file",
        help="Prompt template file. Recognized placeholders: ${UnifiedDiff}, ${TotalFileCount}, ${MethodStackSummary}.",
        type=str,
    )
    parser.add_argument(
        "-o",
        "--output",
        help="Write the generated message to this file (e.g. from a prepare-commit-msg hook).",
        type=str,
    )
    parser.add_argument(
        "--commit",
        action="store_true",
        help="Commit the staged changes with the generated message.",
    )
    parser.add_argument(
        "-y",
        "--yes",
        action="store_true",
        help="Do not ask for confirmation before committing.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the prompt that would be sent and exit.",
    )
    parser.add_argument(
        "--only-edited-methods",
        action="store_true",
        help="Limit the method summary to methods whose lines changed, instead of every method of a touched file.",
    )
    parser.add_argument(
        "--set-default-model",
        action="store_true",
        help="Interactively select and save an Ollama model as the default.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser


def read_template(path: Optional[str], settings: Settings) -> str:
    if not path:
        return settings.prompt
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except OSError as e:
        raise ConfigError(f"Cannot read prompt template {path}: {e}") from e


def set_default_model(base_url: str) -> int:
    models = get_models(base_url)
    if not models:
        console.print("[error]No Ollama models found. Please ensure Ollama is running and models are downloaded.[/error]")
        return 1

    console.print(Panel("[bold blue]⚙️ Set Default Ollama Model[/bold blue]", expand=False))
    display_models(models)
    selected = select_model(models)
    if not selected:
        console.print("\n[yellow]No model selected. Default model not changed.[/yellow]")
        return 1
    return 0 if save_default_model(selected) else 1


def resolve_model(args: argparse.Namespace, settings: Settings, base_url: str) -> Optional[str]:
    """
    Determine the model for this run: command line, then config, then ask.
    """
    if args.model:
        return args.model
    if settings.default_ollama_model:
        return settings.default_ollama_model

    models = get_models(base_url)
    if not models:
        return None

    console.print("\n[bold blue]📦 Select an Ollama Model[/bold blue]")
    display_models(models)
    selected = select_model(models)
    if selected and Confirm.ask(
        f"\n[bold cyan]Save '[cyan]{selected}[/cyan]' as the default model for future runs?[/bold cyan]",
        default=True,
        console=console,
    ):
        save_default_model(selected)
    return selected


def write_output(path: str, message: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write(message + "\n")
    console.print(f"[info]Commit message written to [dim]{path}[/dim][/info]")


def run_generation(prompt: str, model: str, settings: Settings, base_url: str) -> Optional[str]:
    """Stream the commit message into a live view. Returns None on failure."""
    field = CommitMessageField()
    view = StreamingCommitView(model)
    generate_fn = partial(
        generate,
        model=model,
        base_url=base_url,
        connect_timeout=settings.connect_timeout,
        read_timeout=settings.read_timeout,
    )
    session = CommitMessageSession(
        lambda text, on_update: generate_fn(text, on_update=on_update),
        field,
        notify=show_notification,
        dispatch=view.dispatch,
    )
    session.start(prompt)
    view.run(session, field)

    if session.state != GenerationState.SUCCEEDED:
        return None
    return field.text.strip()


def main(argv: Optional[List[str]] = None) -> int:
    """
    Parse arguments, collect the staged changes, and generate a commit
    message for them with Ollama.

    Returns:
        int: Process exit code.
    """
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    settings = load_settings()
    base_url = args.url or settings.base_url
    logger.debug("Config file: %s, base URL: %s", config_file_path(), base_url)

    if args.set_default_model:
        return set_default_model(base_url)

    template = read_template(args.prompt_file, settings)

    try:
        repo_root = get_repository_root()
        changes = get_staged_changes(repo_root)
    except GitCommandError as e:
        console.print(f"[error]Could not read the git repository:[/error] {e.stderr}")
        return 1

    if not changes:
        console.print("[warning]No staged changes found. Stage files with `git add` first.[/warning]")
        return 1

    console.print(f"[info]Found [bold]{len(changes)}[/bold] staged file(s).[/info]")
    prompt = build_prompt(changes, template, only_edited=args.only_edited_methods)

    if args.dry_run:
        console.print(Panel(Syntax(prompt, "diff", word_wrap=True), title="[bold cyan]Prompt", border_style="cyan"))
        return 0

    model = resolve_model(args, settings, base_url)
    if not model:
        console.print("[error]No Ollama model could be determined. Use --model or --set-default-model.[/error]")
        return 1
    installed = model_names(get_models(base_url)) if args.model is None and settings.default_ollama_model else []
    # An empty listing means the server could not be asked, not that the model is missing
    if installed and model not in installed:
        console.print(f"[warning]Default model '[yellow]{model}[/yellow]' is not installed; trying it anyway.[/warning]")

    message = run_generation(prompt, model, settings, base_url)
    if message is None:
        return 1
    if not message:
        console.print("[warning]The model returned an empty commit message.[/warning]")
        return 1

    if args.output:
        write_output(args.output, message)

    if args.commit:
        if not args.yes and not Confirm.ask("[bold cyan]Commit with this message?[/bold cyan]", default=True, console=console):
            console.print("[yellow]Commit cancelled.[/yellow]")
            return 0
        try:
            summary = commit_with_message(message, repo_root)
        except GitCommandError as e:
            console.print(f"[error]git commit failed:[/error] {e.stderr}")
            return 1
        console.print(f"[success]✅ {summary}[/success]")

    return 0


def run() -> None:
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        console.print("\n[bold yellow]✋ Operation cancelled by user.[/bold yellow]")
        sys.exit(130)
    except Exception as e:
        logger.debug("Fatal error", exc_info=True)
        console.print(
            Panel(
                f"[bold red]An unexpected error occurred:[/bold red]\n[yellow]{str(e)}[/yellow]",
                title="[bold red]Fatal Error[/bold red]",
                border_style="red",
            )
        )
        sys.exit(1)


# --- Entry Point ---
if __name__ == "__main__":
    run()
