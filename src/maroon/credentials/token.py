import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from ..domain.errors import MissingTokenError

logger = logging.getLogger(__name__)

TOKEN_ENV_VAR = "MAROON_TOKEN"


class TokenProvider(ABC):
    @abstractmethod
    def __call__(self) -> str:
        """Return the bearer token sent to the Maroon API."""
        pass


class StaticTokenProvider(TokenProvider):
    def __init__(self, token: str):
        self.token = token

    def __call__(self) -> str:
        if not self.token:
            raise MissingTokenError("Token could not be found")
        return self.token


class EnvTokenProvider(TokenProvider):
    """
    look for a token in, in order: an explicit value, the MAROON_TOKEN
    environment variable, and the IdToken field of the identity
    provider's JSON config file.
    """

    def __init__(self, token_file: Path, explicit: Optional[str] = None):
        self.token_file = Path(token_file)
        self.explicit = explicit

    def __call__(self) -> str:
        if self.explicit:
            return self.explicit

        token = os.environ.get(TOKEN_ENV_VAR)
        if token:
            logger.debug(f"using token from ${TOKEN_ENV_VAR}")
            return token

        token = self._read_token_file()
        if token:
            return token

        raise MissingTokenError(
            "Token could not be found. Pass it with --token, set "
            f"{TOKEN_ENV_VAR}, or sign in to populate {self.token_file}"
        )

    def _read_token_file(self) -> Optional[str]:
        try:
            data = json.loads(self.token_file.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            raise MissingTokenError(f"Could not read token from {self.token_file}: {e}") from e

        if not isinstance(data, dict):
            return None
        return data.get("IdToken") or data.get("idToken")
