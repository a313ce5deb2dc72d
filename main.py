import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Depends, HTTPException, Request

from auth_handler import AuthFacade
from config import Settings, settings as default_settings
from gateway_client import AuthGatewayClient
from license_client import LicenseActivator
from session import SessionState
from models import (
    Credentials,
    SignUpRequest,
    ForgotPasswordRequest,
    RegisteredPlayer,
    AuthOutcomeResponse,
    ConnectionTestResponse,
    HealthCheckResponse
)

logger = logging.getLogger(__name__)

def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logging.basicConfig(
            level=settings.LOG_LEVEL.upper(),
            format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
        )

        session = SessionState()
        activator = LicenseActivator(session, settings=settings, transport=transport)
        api_client = AuthGatewayClient(session, settings=settings, transport=transport)

        app.state.activator = activator
        app.state.facade = AuthFacade(api_client)

        if await activator.activate(settings.CRAFTER_LICENSE_KEY):
            logger.info("Crafter CMS gateway ready")
        else:
            logger.error("Crafter CMS gateway not activated, authentication requests will be refused")
        yield

    app = FastAPI(
        title="Crafter Auth Gateway",
        description="Delegates login plugin identity operations to the Crafter CMS authentication API",
        version=settings.APP_VERSION,
        lifespan=lifespan
    )

    # API Endpoints
    @app.post("/api/auth/signin", response_model=AuthOutcomeResponse)
    async def sign_in(
        credentials: Credentials,
        request: Request,
        facade: AuthFacade = Depends(get_facade)
    ):
        """
        Authenticate a user against Crafter CMS.
        """
        success = await facade.authenticate_user(
            credentials.username,
            credentials.password,
            client_ip(request)
        )
        return {"success": success}

    @app.post("/api/auth/signup", response_model=AuthOutcomeResponse)
    async def sign_up(
        body: SignUpRequest,
        request: Request,
        facade: AuthFacade = Depends(get_facade)
    ):
        """
        Register a new Crafter CMS account.
        """
        success = await facade.register_user(
            body.username,
            body.email,
            body.password,
            body.password_confirm,
            client_ip(request)
        )
        return {"success": success}

    @app.post("/api/auth/forgot-password", response_model=AuthOutcomeResponse)
    async def forgot_password(
        body: ForgotPasswordRequest,
        request: Request,
        facade: AuthFacade = Depends(get_facade)
    ):
        success = await facade.forgot_password(body.username, body.email, client_ip(request))
        return {"success": success}

    @app.get("/api/users/{username}", response_model=RegisteredPlayer)
    async def get_user(username: str, facade: AuthFacade = Depends(get_facade)):
        """
        Look up a user; 404 when the account does not exist or the lookup failed.
        """
        player = await facade.check_user_exists(username)
        if player is None:
            raise HTTPException(status_code=404, detail="User not found")
        return player

    @app.post("/api/license/test", response_model=ConnectionTestResponse)
    async def test_connection(request: Request):
        """
        Re-verify the configured license without changing the active session.
        """
        result = await request.app.state.activator.test_connection()
        return {"result": result}

    @app.get("/health", response_model=HealthCheckResponse)
    async def health_check(facade: AuthFacade = Depends(get_facade)):
        website = facade.api_client.website
        return {
            "status": "healthy",
            "service": settings.SERVICE_NAME,
            "version": settings.APP_VERSION,
            "ready": facade.is_ready(),
            "website": website.name if website else None
        }

    return app

def get_facade(request: Request) -> AuthFacade:
    return request.app.state.facade

def client_ip(request: Request) -> str:
    return request.client.host if request.client else ""

app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
