import httpx
import logging
from typing import Optional, Dict, Any
from urllib.parse import quote

from pydantic import ValidationError

from config import Settings, settings as default_settings
from models import ApiResponse, GatewayResult, WebsiteInfo
from session import SessionState

logger = logging.getLogger(__name__)

class AuthGatewayClient:
    """
    Client for the Crafter CMS authentication API.

    Every operation returns a GatewayResult; transport, protocol and parsing
    failures are reported through it and never raised.
    """

    def __init__(
        self,
        session: SessionState,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or default_settings
        self.session = session
        self.api_url = self.settings.api_base_url
        self.secret_key = self.settings.CRAFTER_SECRET_KEY
        self.transport = transport

    @property
    def is_initialized(self) -> bool:
        return self.session.activated

    @property
    def website(self) -> Optional[WebsiteInfo]:
        return self.session.website

    async def sign_in(self, username: str, password: str, ip_address: str) -> GatewayResult:
        return await self._post_auth(
            "signin",
            {"username": username, "password": password},
            ip_address,
            "Sign in"
        )

    async def sign_up(
        self,
        username: str,
        email: str,
        password: str,
        password_confirm: str,
        ip_address: str,
    ) -> GatewayResult:
        # The API receives a placeholder address; the supplied email is not transmitted
        return await self._post_auth(
            "signup",
            {
                "username": username,
                "email": f"{username}@temp.com",
                "password": password,
                "confirm_password": password_confirm
            },
            ip_address,
            "Sign up"
        )

    async def forgot_password(self, username: str, email: str, ip_address: str) -> GatewayResult:
        return await self._post_auth(
            "forgot-password",
            {"username": username, "email": email},
            ip_address,
            "Forgot password"
        )

    async def check_user_exists(self, username: str) -> GatewayResult:
        if not self.is_initialized:
            logger.warning("User check request failed - API client not initialized")
            return GatewayResult.not_initialized()

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.CRAFTER_API_TIMEOUT,
                transport=self.transport
            ) as client:
                response = await client.get(
                    f"{self._website_url()}/users/{quote(username, safe='')}",
                    headers=self._headers()
                )
        except Exception as e:
            logger.error("User check request failed with exception: %s", _describe(e))
            return GatewayResult.failure(f"Request failed: {_describe(e)}")

        if response.status_code == 404:
            logger.debug("User %s not found in Crafter CMS", username)
            return GatewayResult.failure("User not found")

        if response.status_code != 200:
            logger.error("User check request failed - HTTP error status: %s", response.status_code)
            return GatewayResult.failure(f"HTTP {response.status_code}: {response.text}")

        try:
            data = response.json()
        except ValueError as e:
            logger.error("User check request failed - Response parsing exception: %s", e)
            return GatewayResult.failure(f"Response parsing failed: {str(e)}")

        # User lookups return the user document itself, without a success field
        if isinstance(data, dict) and "username" in data and "email" in data:
            return GatewayResult(success=True, message="User found", payload=data)

        logger.error("User check request failed - Response missing user data fields")
        return GatewayResult.failure("User data not found in response")

    async def get_user_info(self, username: str) -> GatewayResult:
        return await self.check_user_exists(username)

    async def _post_auth(
        self,
        operation: str,
        body: Dict[str, Any],
        ip_address: str,
        label: str,
    ) -> GatewayResult:
        if not self.is_initialized:
            logger.warning("%s request failed - API client not initialized", label)
            return GatewayResult.not_initialized()

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.CRAFTER_API_TIMEOUT,
                transport=self.transport
            ) as client:
                response = await client.post(
                    f"{self._website_url()}/auth/{operation}",
                    json=body,
                    headers=self._headers(ip_address)
                )
        except Exception as e:
            logger.error("%s request failed with exception: %s", label, _describe(e))
            return GatewayResult.failure(f"Request failed: {_describe(e)}")

        result = self._parse_response(response)
        if not result.success:
            logger.error("%s request failed - %s", label, result.message)
        return result

    def _parse_response(self, response: httpx.Response) -> GatewayResult:
        if response.status_code != 200:
            return GatewayResult.failure(f"HTTP {response.status_code}: {response.text}")

        try:
            data = response.json()
            if not isinstance(data, dict):
                raise ValueError("body is not a JSON object")
            parsed = ApiResponse.model_validate(data)
        except (ValueError, ValidationError) as e:
            return GatewayResult.failure(f"Response parsing failed: {str(e)}")

        return GatewayResult(success=parsed.success, message=parsed.message)

    def _website_url(self) -> str:
        return f"{self.api_url}/website/v2/{self.session.website.id}"

    def _headers(self, ip_address: Optional[str] = None) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "X-API-Secret": self.secret_key
        }
        if ip_address is not None:
            headers["X-Forwarded-For"] = ip_address
            headers["X-Real-IP"] = ip_address

        origin = self.session.website.url
        if origin:
            headers["Origin"] = origin
        return headers

def _describe(error: Exception) -> str:
    return str(error) or type(error).__name__
