from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # Crafter CMS API
    CRAFTER_API_URL: str = "http://localhost:3000/api"
    CRAFTER_LICENSE_KEY: str = ""
    CRAFTER_SECRET_KEY: str = ""
    CRAFTER_API_TIMEOUT: float = 30

    # Service Info
    SERVICE_NAME: str = "crafter-auth-gateway"
    APP_VERSION: str = "1.0.0"

    # Logging
    LOG_LEVEL: str = "INFO"

    @property
    def api_base_url(self) -> str:
        return self.CRAFTER_API_URL.rstrip("/")

    class Config:
        env_file = ".env"

settings = Settings()
