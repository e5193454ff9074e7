"""
keeps ~/.aws/credentials and ~/.aws/config in step with maroon profiles.

both files belong to the AWS CLI and the user, so they are edited in
place: only the keys maroon owns are touched and the rest of each file
is preserved byte for byte.
"""
import logging
import os
from pathlib import Path
from typing import Dict, Optional

from ..config import credential_process_command
from ..domain.errors import FileIOError, ParseError
from ..domain.models import Credentials
from ..storage.atomic import DIR_MODE, FILE_MODE, AtomicReplacer
from ..storage.ini import IniDocument

logger = logging.getLogger(__name__)


class AwsFileSync:
    def __init__(self, path: Path, replacer: Optional[AtomicReplacer] = None):
        self.path = Path(path)
        self.replacer = replacer or AtomicReplacer()

    def open_or_create(self) -> IniDocument:
        """read the file, creating it (owner read/write only) if it does not exist."""
        try:
            self.path.parent.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
            fd = os.open(self.path, os.O_RDONLY | os.O_CREAT, FILE_MODE)
            with os.fdopen(fd, "r", encoding="utf-8", newline="") as f:
                text = f.read()
        except OSError as e:
            raise FileIOError(self.path, f"Unable to open {self.path.name}: {e}") from e
        except UnicodeDecodeError as e:
            raise ParseError(f"{self.path.name} is not valid UTF-8: {e}", self.path) from e
        return IniDocument.parse(text, self.path)

    def _write_section(self, section: str, values: Dict[str, str]) -> None:
        document = self.open_or_create()
        for key, value in values.items():
            document.set(section, key, value)
        self.replacer.replace(self.path, document.render())
        logger.debug(f"updated [{section}] in {self.path}")


class CredentialsFileSync(AwsFileSync):
    """writes resolved credentials into the [default] section of ~/.aws/credentials."""

    SECTION = "default"

    def sync_default(self, credentials: Credentials) -> None:
        self._write_section(self.SECTION, {
            "aws_access_key_id": credentials.access_key_id,
            "aws_secret_access_key": credentials.secret_access_key,
            "aws_session_token": credentials.session_token,
        })


class ConfigFileSync(AwsFileSync):
    """points a [profile <name>] section of ~/.aws/config at `maroon credentials print`."""

    def sync_profile_invocation(self, profile_name: str, region: str) -> None:
        self._write_section(f"profile {profile_name}", {
            "credential_process": credential_process_command(profile_name),
            "region": region,
        })
