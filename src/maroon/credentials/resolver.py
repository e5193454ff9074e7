import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from ..api.client import CredentialIssuer
from ..config import REFRESH_THRESHOLD, SESSION_DURATION
from ..domain.errors import ApiError, MaroonError, MissingTokenError, RefreshFailedError
from ..domain.models import Credentials
from ..profiles.store import ProfileStore
from .token import TokenProvider

logger = logging.getLogger(__name__)


def needs_refresh(
    credentials: Optional[Credentials],
    now: datetime,
    threshold: timedelta = REFRESH_THRESHOLD,
) -> bool:
    """true when credentials are absent or expire within threshold of now."""
    if credentials is None or credentials.is_zero:
        return True
    return credentials.expiration - now <= threshold


class CredentialResolver:
    """decides per profile whether cached credentials can be reused or must be fetched."""

    def __init__(self, store: ProfileStore, issuer: CredentialIssuer, token_provider: TokenProvider):
        self.store = store
        self.issuer = issuer
        self.token_provider = token_provider

    def resolve(self, profile_name: str, now: Optional[datetime] = None, force: bool = False) -> Credentials:
        """
        return usable credentials for a profile, refreshing them if needed.

        args:
            profile_name: profile to resolve
            now: current time, defaults to the system clock (naive values are UTC)
            force: fetch new credentials even if the cached ones are still valid

        returns:
            credentials valid for more than REFRESH_THRESHOLD, or freshly issued ones

        raises:
            NotFoundError: if the profile does not exist
            RefreshFailedError: if new credentials were needed but could not be fetched
        """
        if now is None:
            now = datetime.now(timezone.utc)
        elif now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)

        profile = self.store.get(profile_name)

        if not force and not needs_refresh(profile.credentials, now):
            logger.debug(f"using cached credentials for '{profile_name}' (expire {profile.credentials.expiration})")
            return profile.credentials

        logger.info(f"fetching new credentials for '{profile_name}'")
        try:
            token = self.token_provider()
            credentials = self.issuer.assume_role(profile.role_arn, SESSION_DURATION, token)
        except (ApiError, MissingTokenError) as e:
            raise RefreshFailedError(profile_name, e) from e

        try:
            self.store.update_credentials(profile_name, credentials)
        except MaroonError as e:
            # still hand back the fresh credentials; they just won't be reused next time
            logger.warning(f"could not cache credentials for '{profile_name}': {e}")

        return credentials
