import logging
from typing import Optional, Type, TypeVar

import httpx
from pydantic import AliasChoices, BaseModel, Field
from pydantic import ValidationError as SchemaError

from ..domain.errors import InvalidOrExpiredTokenError, RequestFailedError
from ..domain.models import Credentials
from .client import CredentialIssuer

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class ConsoleUrlOutput(BaseModel):
    console_url: str = Field(validation_alias=AliasChoices("consoleUrl", "ConsoleUrl", "console_url"))


class MaroonApiClient(CredentialIssuer):
    """talks to the Maroon API over HTTPS."""

    def __init__(self, base_url: str, client: Optional[httpx.Client] = None):
        self.base_url = base_url.rstrip("/")
        self.client = client or httpx.Client()

    def assume_role(self, role_arn: str, duration: int, token: str) -> Credentials:
        logger.debug(f"assuming {role_arn} for {duration}s")
        return self._get(
            "/assume-role",
            {"roleArn": role_arn, "sessionDuration": duration},
            token,
            Credentials,
            "Unable to assume role",
        )

    def get_console_url(self, account_id: str, access_type: str, duration: int, token: str) -> str:
        output = self._get(
            "/console-url",
            {"accessType": access_type, "accountId": account_id, "duration": duration},
            token,
            ConsoleUrlOutput,
            "Unable to generate console url",
        )
        return output.console_url

    def close(self) -> None:
        self.client.close()

    def _get(self, path: str, params: dict, token: str, model: Type[T], failure: str) -> T:
        url = f"{self.base_url}{path}"
        try:
            response = self.client.get(url, params=params, headers={"Authorization": token})
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise RequestFailedError(f"{failure}: {e}") from e

        if response.status_code == 401:
            raise InvalidOrExpiredTokenError()
        if response.status_code != 200:
            logger.debug(f"GET {path} returned {response.status_code}: {response.text[:200]}")
            raise RequestFailedError(failure, status_code=response.status_code)

        try:
            return model.model_validate_json(response.content)
        except SchemaError as e:
            raise RequestFailedError(f"Error reading response from Maroon API: {e}") from e
