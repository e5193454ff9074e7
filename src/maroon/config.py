import os
from datetime import timedelta
from pathlib import Path

TOOL_NAME = "maroon"

CONFIG_DIR = Path.home() / ".config" / "maroon"
CONFIG_FILE = CONFIG_DIR / "config.json"
AWS_DIR = Path.home() / ".aws"

# identity provider that hands out the bearer token
TOKEN_FILE = Path.home() / ".config" / "spark" / "config.json"

API_URL = "https://api.maroon.gtech.dev/api/v1"

# refresh once cached credentials are this close to expiring
REFRESH_THRESHOLD = timedelta(minutes=15)
SESSION_DURATION = 3600

CONSOLE_ACCESS_TYPES = ("ReadOnly", "Administrator")
CONSOLE_MIN_DURATION = 900
CONSOLE_MAX_DURATION = 43200


def _env_path(variable: str, default: Path) -> Path:
    value = os.environ.get(variable)
    if value:
        return Path(value).expanduser()
    return default


def get_config_file() -> Path:
    """path of the JSON profile store."""
    return _env_path("MAROON_CONFIG_FILE", CONFIG_FILE)


def get_aws_credentials_file() -> Path:
    return _env_path("AWS_SHARED_CREDENTIALS_FILE", AWS_DIR / "credentials")


def get_aws_config_file() -> Path:
    return _env_path("AWS_CONFIG_FILE", AWS_DIR / "config")


def get_token_file() -> Path:
    return _env_path("MAROON_TOKEN_FILE", TOKEN_FILE)


def get_api_url() -> str:
    return os.environ.get("MAROON_API_URL") or API_URL


def credential_process_command(profile_name: str) -> str:
    """invocation the AWS SDK runs to obtain credentials for a profile."""
    return f"{TOOL_NAME} credentials print -p {profile_name}"
