from pathlib import Path
from typing import Optional

from .. import config
from ..api.client import CredentialIssuer
from ..api.maroon_api import MaroonApiClient
from ..credentials.resolver import CredentialResolver
from ..credentials.token import EnvTokenProvider, TokenProvider
from ..profiles import ProfileManager, ProfileStore
from ..storage.atomic import AtomicReplacer
from ..sync.aws_files import ConfigFileSync, CredentialsFileSync


class AppContext:
    """everything one CLI invocation needs, built once and passed explicitly."""

    def __init__(
        self,
        config_file: Path,
        aws_credentials_file: Path,
        aws_config_file: Path,
        issuer: CredentialIssuer,
        token_provider: TokenProvider,
        replacer: Optional[AtomicReplacer] = None,
    ):
        self.replacer = replacer or AtomicReplacer()
        self.store = ProfileStore(config_file, self.replacer)
        self.issuer = issuer
        self.token_provider = token_provider
        self.credentials_file = CredentialsFileSync(aws_credentials_file, self.replacer)
        self.aws_config = ConfigFileSync(aws_config_file, self.replacer)
        self.profiles = ProfileManager(self.store, self.aws_config)
        self.resolver = CredentialResolver(self.store, self.issuer, self.token_provider)

    def close(self) -> None:
        close = getattr(self.issuer, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> "AppContext":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def build_context(token: Optional[str] = None) -> AppContext:
    """get app context for the current environment."""
    return AppContext(
        config_file=config.get_config_file(),
        aws_credentials_file=config.get_aws_credentials_file(),
        aws_config_file=config.get_aws_config_file(),
        issuer=MaroonApiClient(config.get_api_url()),
        token_provider=EnvTokenProvider(config.get_token_file(), explicit=token),
    )
