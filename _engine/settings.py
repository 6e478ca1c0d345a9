# Standard Library Imports
import json
import logging
import os
from typing import Any, Dict, Optional

# Third-Party Library Imports
from pydantic import BaseModel, ValidationError
from rich.console import Console

# Build-in Functions And Class Import
from _data.ollama import BASE_URL, CONNECT_TIMEOUT, DEFAULT_PROMPT, READ_TIMEOUT
from _data.theme import custom_theme

logger = logging.getLogger(__name__)
console = Console(theme=custom_theme)

# --- Configuration ---
# Directory holding default.json; overridable for tests and CI
CONFIG_DIR_ENV = "AI_COMMIT_CONFIG_DIR"
DEFAULT_CONFIG_DIR = os.path.join(os.path.expanduser("~"), ".ai-commit")
CONFIG_FILE_NAME = "default.json"


class Settings(BaseModel):
    default_ollama_model: Optional[str] = None
    prompt: str = DEFAULT_PROMPT
    base_url: str = BASE_URL
    connect_timeout: float = CONNECT_TIMEOUT
    read_timeout: float = READ_TIMEOUT


def config_file_path() -> str:
    config_dir = os.environ.get(CONFIG_DIR_ENV) or DEFAULT_CONFIG_DIR
    return os.path.join(config_dir, CONFIG_FILE_NAME)


def _read_config_file(path: str) -> Dict[str, Any]:
    if not os.path.exists(path):
        logger.debug("Config file not found: %s", path)
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError:
        console.print(
            f"[warning]Error decoding JSON from config file: {path}. File might be corrupted.[/warning]"
        )
        return {}
    except OSError as e:
        console.print(f"[warning]Could not read config file {path}: {e}[/warning]")
        return {}

    if not isinstance(data, dict):
        console.print(f"[warning]Config file '{path}' does not contain a JSON object.[/warning]")
        return {}
    return data


def load_settings(path: Optional[str] = None) -> Settings:
    """
    Loads settings from the configuration file.

    Missing keys fall back to the built-in defaults; a missing, unreadable or
    invalid file yields the defaults altogether.

    Args:
        path (Optional[str]): Config file to read. Defaults to config_file_path().

    Returns:
        Settings: The effective settings.
    """
    path = path or config_file_path()
    data = _read_config_file(path)

    try:
        return Settings(**data)
    except ValidationError as e:
        console.print(f"[warning]Ignoring invalid config file '{path}': {e.error_count()} invalid value(s).[/warning]")
        logger.debug("Config validation errors: %s", e)
        return Settings()


def save_default_model(model_name: str, path: Optional[str] = None) -> bool:
    """
    Saves the given model name as the default in the configuration file.

    Other keys already present in the file are preserved.

    Args:
        model_name (str): The Ollama model name to save as default.
        path (Optional[str]): Config file to write. Defaults to config_file_path().

    Returns:
        bool: True if the file was written.
    """
    path = path or config_file_path()
    config_data = _read_config_file(path)
    config_data["default_ollama_model"] = model_name

    try:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(config_data, f, indent=4)
    except OSError as e:
        console.print(f"[error]Error saving default model to config file {path}: {e}[/error]")
        return False

    console.print(
        f"[bold green]✔[/bold green] Default model '[cyan]{model_name}[/cyan]' saved to [dim]{path}[/dim]"
    )
    return True
