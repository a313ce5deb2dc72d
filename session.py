from typing import Optional

from models import WebsiteInfo

class SessionAlreadyActivatedError(RuntimeError):
    pass

class SessionState:
    """
    Process-lifetime record of license activation.

    The website slot is written exactly once by a successful activation and
    is read-only afterwards.
    """

    def __init__(self):
        self._website: Optional[WebsiteInfo] = None

    @property
    def website(self) -> Optional[WebsiteInfo]:
        return self._website

    @property
    def activated(self) -> bool:
        return self._website is not None

    def publish(self, website: WebsiteInfo) -> None:
        if not website.id or not website.name:
            raise ValueError("Website id and name are required")
        if self._website is not None:
            raise SessionAlreadyActivatedError(
                f"Session already activated for website {self._website.id}"
            )
        self._website = website
