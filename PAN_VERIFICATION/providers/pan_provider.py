import logging
import requests
from typing import Optional, Tuple
from core.config import (
    SANDBOX_BASE_URL, SANDBOX_API_KEY, SANDBOX_API_SECRET,
    SANDBOX_API_VERSION, SANDBOX_TIMEOUT_SECONDS, SANDBOX_PAN_ENTITY,
)

logger = logging.getLogger(__name__)


class SandboxPANProvider:
    """
    Sandbox (api.sandbox.co.in) KYC client. Two calls per verification:
    /authenticate with the API key + secret for an access token, then
    /kyc/pan/verify with that token.

    Both methods hand back (status_code, json_body) untouched; deciding what
    the upstream answer means is not this class's job.
    """

    def __init__(
        self,
        base_url: str = SANDBOX_BASE_URL,
        api_key: str = SANDBOX_API_KEY,
        api_secret: str = SANDBOX_API_SECRET,
        api_version: str = SANDBOX_API_VERSION,
        timeout: float = SANDBOX_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.api_secret = api_secret
        self.api_version = api_version
        self.timeout = timeout
        self.session = session or requests.Session()

    def _check_credentials(self):
        if not self.api_key or not self.api_secret:
            raise ValueError(
                "SANDBOX_API_KEY and SANDBOX_API_SECRET are not set. Add them to .env."
            )

    def _post(self, path: str, headers: dict, payload: Optional[dict] = None) -> Tuple[int, dict]:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.post(url, headers=headers, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Sandbox API error on {path}: {e}")
            raise RuntimeError("PAN verification service temporarily unavailable") from e

        try:
            body = response.json()
        except ValueError as e:
            logger.error(f"Sandbox API returned non-JSON body on {path} (status {response.status_code})")
            raise RuntimeError("PAN verification service returned an invalid response") from e

        logger.info(f"Sandbox {path} -> {response.status_code}")
        return response.status_code, body

    def authenticate(self) -> Tuple[int, dict]:
        self._check_credentials()
        return self._post(
            "/authenticate",
            headers={
                "Content-Type":  "application/json",
                "x-api-key":     self.api_key,
                "x-api-secret":  self.api_secret,
            },
        )

    def verify(self, access_token: str, pan: str, name_as_per_pan: str, date_of_birth: str, reason: str) -> Tuple[int, dict]:
        """date_of_birth must already be DD/MM/YYYY."""
        self._check_credentials()
        headers = {
            "Content-Type":   "application/json",
            "authorization":  access_token,
            "x-api-key":      self.api_key,
            "x-accept-cache": "true",
        }
        if self.api_version:
            headers["x-api-version"] = self.api_version

        return self._post(
            "/kyc/pan/verify",
            headers=headers,
            payload={
                "@entity":         SANDBOX_PAN_ENTITY,
                "pan":             pan,
                "name_as_per_pan": name_as_per_pan,
                "date_of_birth":   date_of_birth,
                "consent":         "Y",
                "reason":          reason,
            },
        )

    @staticmethod
    def extract_token(auth_body: dict) -> Optional[str]:
        data = auth_body.get("data")
        return auth_body.get("access_token") or (data.get("access_token") if isinstance(data, dict) else None)


def get_pan_provider():
    provider = SandboxPANProvider()
    try:
        yield provider
    finally:
        provider.session.close()
