import logging
from typing import Dict

from ..domain.models import (
    Profile,
    validate_account_id,
    validate_profile_name,
    validate_region,
    validate_role_name,
)
from ..sync.aws_files import ConfigFileSync
from .store import ProfileStore

logger = logging.getLogger(__name__)


class ProfileManager:
    """manages maroon profiles and their entries in ~/.aws/config."""

    def __init__(self, store: ProfileStore, aws_config: ConfigFileSync):
        self.store = store
        self.aws_config = aws_config

    def create_profile(self, name: str, account_id: str, role_name: str, region: str) -> Profile:
        """
        create new profile and register it with the AWS CLI.

        args:
            name: profile name, alphanumerics and '-' only
            account_id: 12 digit AWS account id
            role_name: role to assume in that account
            region: default region written to ~/.aws/config

        returns:
            created profile

        raises:
            ValidationError: if any argument is malformed
            AlreadyExistsError: if the name is taken
            FileIOError, ParseError: if a file could not be updated
        """
        validate_profile_name(name)
        validate_account_id(account_id)
        validate_role_name(role_name)
        validate_region(region)

        profile = Profile(account_id=account_id, role_to_assume=role_name, region=region)
        self.store.add(name, profile)

        # the store and ~/.aws/config are not updated together; a crash
        # here leaves the profile without a credential_process entry
        self.aws_config.sync_profile_invocation(name, region)

        logger.info(f"added profile '{name}' for {profile.role_arn}")
        return profile

    def remove_profile(self, name: str) -> bool:
        """remove profile. returns False if it did not exist."""
        validate_profile_name(name)
        removed = self.store.remove(name)
        if not removed:
            logger.debug(f"profile '{name}' does not exist, nothing to remove")
        return removed

    def list_profiles(self) -> Dict[str, Profile]:
        """list all profiles."""
        return self.store.list()
