import logging
from typing import Optional

from gateway_client import AuthGatewayClient
from models import RegisteredPlayer

logger = logging.getLogger(__name__)

class AuthFacade:
    """
    Adapts Crafter CMS gateway results to the login plugin's identity model.

    Callers only ever see booleans or an optional RegisteredPlayer; gateway
    messages go to the log.
    """

    def __init__(self, api_client: AuthGatewayClient):
        self.api_client = api_client

    def is_ready(self) -> bool:
        return self.api_client is not None and self.api_client.is_initialized

    async def check_user_exists(self, username: str) -> Optional[RegisteredPlayer]:
        if not self.is_ready():
            logger.warning("Crafter CMS API not initialized, cannot check user existence")
            return None

        try:
            response = await self.api_client.check_user_exists(username)
        except Exception as e:
            logger.error("Error checking user existence in Crafter CMS: %s", e, exc_info=True)
            return None

        if response.success and response.has_user_data:
            return RegisteredPlayer.from_nickname(username)
        return None

    async def authenticate_user(self, username: str, password: str, ip_address: str) -> bool:
        if not self.is_ready():
            logger.warning("Crafter CMS API not initialized, cannot authenticate user")
            return False

        try:
            response = await self.api_client.sign_in(username, password, ip_address)
        except Exception as e:
            logger.error("Error authenticating user via Crafter CMS: %s", e, exc_info=True)
            return False

        if response.success:
            logger.info("User %s authenticated successfully via Crafter CMS", username)
            return True
        logger.warning("User %s authentication failed via Crafter CMS: %s", username, response.message)
        return False

    async def register_user(
        self,
        username: str,
        email: str,
        password: str,
        password_confirm: str,
        ip_address: str,
    ) -> bool:
        if not self.is_ready():
            logger.warning("Crafter CMS API not initialized, cannot register user")
            return False

        try:
            response = await self.api_client.sign_up(username, email, password, password_confirm, ip_address)
        except Exception as e:
            logger.error("Error registering user via Crafter CMS: %s", e, exc_info=True)
            return False

        if response.success:
            logger.info("User %s registered successfully via Crafter CMS", username)
            return True
        logger.warning("User %s registration failed via Crafter CMS: %s", username, response.message)
        return False

    async def forgot_password(self, username: str, email: str, ip_address: str) -> bool:
        if not self.is_ready():
            logger.warning("Crafter CMS API not initialized, cannot process password reset")
            return False

        try:
            response = await self.api_client.forgot_password(username, email, ip_address)
        except Exception as e:
            logger.error("Error processing password reset via Crafter CMS: %s", e, exc_info=True)
            return False

        if response.success:
            logger.info("Password reset requested successfully for user %s via Crafter CMS", username)
            return True
        logger.warning("Password reset failed for user %s via Crafter CMS: %s", username, response.message)
        return False
