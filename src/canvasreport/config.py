import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Callable, Optional

import yaml

from canvasreport.api.client import CanvasAPIError, CanvasClient

logger = logging.getLogger(__name__)

URL_ENV = "CANVAS_API_URL"
TOKEN_ENV = "CANVAS_API_TOKEN"


class ConfigError(ValueError):
    """Raised when the configuration is malformed, incomplete, or cannot be set up."""


@dataclass
class Config:
    base_url: str
    access_token: str


def config_path() -> Path:
    return Path.home() / ".config" / "canvas-report" / "config.yaml"


def _read_file(path: Path) -> dict:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Could not parse {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping")
    return data


def load_config(path: Optional[Path] = None) -> Config:
    """
    Loads the Canvas credentials.

    Values from the ``CANVAS_API_URL`` and ``CANVAS_API_TOKEN`` environment variables take
    precedence over the YAML file.

    Args:
        path (Path, optional): Configuration file. Defaults to ``config_path()``.

    Raises:
        FileNotFoundError: Neither the file nor the environment provides a configuration.
        ConfigError: The file is malformed or a value is missing.

    Returns:
        Config: The loaded configuration.
    """
    path = Path(path) if path is not None else config_path()

    env_url = os.getenv(URL_ENV)
    env_token = os.getenv(TOKEN_ENV)

    if path.exists():
        data = _read_file(path)
    elif env_url and env_token:
        data = {}
    else:
        raise FileNotFoundError(f"No configuration found at {path}")

    base_url = env_url or data.get("base_url")
    access_token = env_token or data.get("access_token")

    if not base_url:
        raise ConfigError(f"base_url is not set in {path} or ${URL_ENV}")
    if not access_token:
        raise ConfigError(f"access_token is not set in {path} or ${TOKEN_ENV}")

    logger.debug("Loaded configuration for %s", base_url)
    return Config(base_url=str(base_url).rstrip("/"), access_token=str(access_token))


def save_config(config: Config, path: Optional[Path] = None) -> Path:
    """Writes the configuration readable only by the current user."""
    path = Path(path) if path is not None else config_path()
    path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)

    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        yaml.safe_dump(asdict(config), f, default_flow_style=False)
    os.chmod(path, 0o600)

    return path


def run_setup(
    input_func: Callable[[str], str] = input,
    path: Optional[Path] = None,
    client_factory: Callable[[str, str], CanvasClient] = CanvasClient,
) -> Config:
    """
    Interactive first-run setup.

    Prompts for the Canvas URL and an access token, checks them by listing the observed
    students and saves the configuration only when at least one student is found.

    Args:
        input_func (Callable, optional): Prompt function. Defaults to ``input``.
        path (Path, optional): Where to save. Defaults to ``config_path()``.
        client_factory (Callable, optional): Builds the client used to test the connection.

    Raises:
        ConfigError: The connection failed or no students are observed.

    Returns:
        Config: The saved configuration.
    """
    print("No configuration found. Let's set it up.")
    print()

    base_url = input_func(
        "Canvas URL (e.g., https://yourschool.instructure.com): "
    ).strip().rstrip("/")
    token = input_func("API Token (from Canvas > Settings > New Access Token): ").strip()

    if not base_url or not token:
        raise ConfigError("Both the Canvas URL and the API token are required")

    config = Config(base_url=base_url, access_token=token)

    print()
    print("Testing connection... ", end="")

    try:
        observees = client_factory(config.base_url, config.access_token).observees()
    except CanvasAPIError as e:
        print("failed!")
        raise ConfigError(f"Could not connect to Canvas: {e}") from e

    if not observees:
        print("connected, but no students found.")
        print("Make sure your parent observer account is linked to your child's account.")
        raise ConfigError("No observed students found")

    names = ", ".join(o.display_name for o in observees)
    print(f"found {len(observees)} student(s): {names}")

    saved = save_config(config, path)
    print(f"\nConfiguration saved to {saved}\n")

    return config
