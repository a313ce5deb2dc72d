from pydantic import BaseModel, ConfigDict, StrictBool, field_validator
from typing import Optional, Dict, Any

NOT_INITIALIZED_MESSAGE = "API client not initialized"

class WebsiteInfo(BaseModel):
    """Website identity returned by license verification."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    url: str = ""

    def __str__(self) -> str:
        return f"WebsiteInfo(id={self.id!r}, name={self.name!r}, url={self.url!r})"

class GatewayResult(BaseModel):
    """Outcome of a single call to the Crafter CMS API."""
    model_config = ConfigDict(frozen=True)

    success: bool
    message: str = ""
    payload: Optional[Dict[str, Any]] = None

    @property
    def has_user_data(self) -> bool:
        return self.payload is not None

    @classmethod
    def failure(cls, message: str) -> "GatewayResult":
        return cls(success=False, message=message)

    @classmethod
    def not_initialized(cls) -> "GatewayResult":
        return cls.failure(NOT_INITIALIZED_MESSAGE)

class ApiResponse(BaseModel):
    # Body of signin/signup/forgot-password responses
    success: StrictBool = False
    message: str = ""

    @field_validator("success", mode="before")
    @classmethod
    def _only_json_booleans(cls, value: Any) -> Any:
        # Strings and numbers never count as success
        if isinstance(value, (str, int, float)) and not isinstance(value, bool):
            return False
        return value

    @field_validator("message", mode="before")
    @classmethod
    def _stringify_scalar(cls, value: Any) -> Any:
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return str(value)
        return value

class RegisteredPlayer(BaseModel):
    """Identity record handed to the login plugin."""
    nickname: str
    lowercase_nickname: str
    credential_hash: str = ""
    premium_id: str = ""

    @classmethod
    def from_nickname(cls, nickname: str) -> "RegisteredPlayer":
        # Empty hash marks an externally managed account; premium id is filled in on join
        return cls(nickname=nickname, lowercase_nickname=nickname.lower())

# HTTP adapter models
class Credentials(BaseModel):
    username: str
    password: str
    email: Optional[str] = None
    password_confirm: Optional[str] = None

class SignUpRequest(BaseModel):
    username: str
    email: str
    password: str
    password_confirm: str

class ForgotPasswordRequest(BaseModel):
    username: str
    email: str

class AuthOutcomeResponse(BaseModel):
    success: bool

class ConnectionTestResponse(BaseModel):
    result: str

class HealthCheckResponse(BaseModel):
    status: str
    service: str
    version: str
    ready: bool
    website: Optional[str] = None
