from abc import ABC, abstractmethod

from ..domain.models import Credentials


class CredentialIssuer(ABC):
    @abstractmethod
    def assume_role(self, role_arn: str, duration: int, token: str) -> Credentials:
        """Exchange a bearer token for temporary credentials of role_arn."""
        pass

    @abstractmethod
    def get_console_url(self, account_id: str, access_type: str, duration: int, token: str) -> str:
        """Get a sign-in URL for the AWS console."""
        pass
