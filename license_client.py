import httpx
import logging
from typing import Optional, Dict, Any

from config import Settings, settings as default_settings
from models import WebsiteInfo
from session import SessionState, SessionAlreadyActivatedError

logger = logging.getLogger(__name__)

class LicenseVerificationError(Exception):
    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason

class LicenseActivator:
    def __init__(
        self,
        session: SessionState,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or default_settings
        self.session = session
        self.api_url = self.settings.api_base_url
        self.transport = transport
        self.last_error: Optional[str] = None

    async def activate(self, license_key: str) -> bool:
        """
        Verify the license key and publish the website to the session.

        Returns False on any failure; the session is left untouched.
        """
        if self.session.activated:
            logger.warning(
                "License already activated for website %s, ignoring repeated activation",
                self.session.website.id
            )
            return True

        website = await self._verify(license_key)
        if website is None:
            return False

        try:
            self.session.publish(website)
        except SessionAlreadyActivatedError:
            # Concurrent activation published first
            logger.warning("License activated concurrently, keeping website %s", self.session.website.id)
            return True

        logger.info("License verified for website %s (%s)", website.name, website.id)
        return True

    async def test_connection(self) -> str:
        """
        Check the configured license against the API without touching the session.
        """
        logger.info("Testing Crafter CMS API connection...")
        website = await self._verify(self.settings.CRAFTER_LICENSE_KEY)
        if website is not None:
            return f"SUCCESS: License verified successfully. Website: {website}"
        return "FAILED: License verification failed. Check logs for details."

    async def _verify(self, license_key: str) -> Optional[WebsiteInfo]:
        try:
            async with httpx.AsyncClient(
                timeout=self.settings.CRAFTER_API_TIMEOUT,
                transport=self.transport
            ) as client:
                response = await client.post(
                    f"{self.api_url}/website/key/verify",
                    json={"key": license_key},
                    headers={"Content-Type": "application/json"}
                )

            website = self._parse_verification(response)

        except LicenseVerificationError as e:
            return self._fail(e.reason)
        except httpx.HTTPError as e:
            return self._fail(f"HTTP error during verification: {str(e) or type(e).__name__}")
        except Exception as e:
            return self._fail(f"Verification raised exception: {str(e) or type(e).__name__}")

        self.last_error = None
        return website

    def _fail(self, reason: str) -> None:
        self.last_error = reason
        logger.error("License verification failed - %s", reason)
        return None

    @staticmethod
    def _parse_verification(response: httpx.Response) -> WebsiteInfo:
        if response.status_code != 200:
            raise LicenseVerificationError(f"HTTP error status: {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise LicenseVerificationError(f"Response parsing exception: {str(e)}")
        if not isinstance(data, dict):
            raise LicenseVerificationError("Response parsing exception: body is not a JSON object")

        if "success" not in data:
            raise LicenseVerificationError("Response missing 'success' field")
        if not isinstance(data["success"], bool):
            raise LicenseVerificationError("Response parsing exception: 'success' is not a boolean")
        if not data["success"]:
            raise LicenseVerificationError("API returned success=false")

        website_data: Dict[str, Any] = data.get("website")
        if not isinstance(website_data, dict):
            raise LicenseVerificationError("Response missing 'website' field")

        website_id = _identifier(website_data.get("id"))
        website_name = _identifier(website_data.get("name"))
        if not website_id or not website_name:
            raise LicenseVerificationError("Website data missing required fields")

        website_url = website_data.get("url")
        if website_url is not None and not isinstance(website_url, str):
            raise LicenseVerificationError("Response parsing exception: 'url' is not a string")

        return WebsiteInfo(id=website_id, name=website_name, url=website_url or "")

def _identifier(value: Any) -> str:
    # Only strings and integers identify a website
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        return ""
    return str(value)
