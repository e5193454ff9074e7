import logging
from pathlib import Path
from typing import Dict, Optional

from pydantic import ValidationError as SchemaError

from ..domain.errors import AlreadyExistsError, FileIOError, NotFoundError, ParseError
from ..domain.models import Configuration, Credentials, Profile
from ..storage.atomic import AtomicReplacer

logger = logging.getLogger(__name__)


class ProfileStore:
    """
    handles profile persistence to JSON.

    every mutation re-reads the whole file, changes it in memory and
    replaces it atomically. there is no locking, so of two concurrent
    writers the later one wins.
    """

    def __init__(self, config_file: Path, replacer: Optional[AtomicReplacer] = None):
        self.config_file = Path(config_file)
        self.replacer = replacer or AtomicReplacer()

    def load(self) -> Configuration:
        """load profiles from JSON file. a missing or empty file is an empty configuration."""
        try:
            text = self.config_file.read_text(encoding="utf-8")
        except FileNotFoundError:
            return Configuration.empty()
        except OSError as e:
            raise FileIOError(self.config_file, f"Could not read Maroon config: {e}") from e
        except UnicodeDecodeError as e:
            raise ParseError(f"Maroon config is not valid UTF-8: {e}", self.config_file) from e

        if not text.strip():
            return Configuration.empty()

        try:
            return Configuration.from_json(text)
        except SchemaError as e:
            raise ParseError(f"Failed to parse Maroon config: {e}", self.config_file) from e

    def save(self, configuration: Configuration) -> None:
        """save profiles to JSON file."""
        self.replacer.replace(self.config_file, configuration.to_json())
        logger.debug(f"wrote {len(configuration.profiles)} profile(s) to {self.config_file}")

    def list(self) -> Dict[str, Profile]:
        return {name: p.model_copy(deep=True) for name, p in self.load().profiles.items()}

    def add(self, name: str, profile: Profile) -> None:
        """
        add new profile to store.

        raises:
            AlreadyExistsError: if a profile with this name exists
        """
        configuration = self.load()
        if name in configuration.profiles:
            raise AlreadyExistsError(name)

        configuration.profiles[name] = profile.model_copy(deep=True)
        self.save(configuration)

    def get(self, name: str) -> Profile:
        """
        return a copy of the named profile.

        raises:
            NotFoundError: if the profile does not exist
        """
        configuration = self.load()
        if name not in configuration.profiles:
            raise NotFoundError(name)
        return configuration.profiles[name].model_copy(deep=True)

    def remove(self, name: str) -> bool:
        """remove profile from store. returns False when there was nothing to remove."""
        configuration = self.load()
        if name not in configuration.profiles:
            return False

        del configuration.profiles[name]
        self.save(configuration)
        return True

    def update_credentials(self, name: str, credentials: Credentials) -> None:
        """
        replace the cached credentials of a profile.

        raises:
            NotFoundError: if the profile does not exist
        """
        configuration = self.load()
        if name not in configuration.profiles:
            raise NotFoundError(name)

        profile = configuration.profiles[name]
        configuration.profiles[name] = profile.model_copy(update={"credentials": credentials})
        self.save(configuration)
