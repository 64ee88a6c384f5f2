"""Admin password gate."""

import logging
import secrets
from typing import Any, Optional

logger = logging.getLogger(__name__)


class AdminGate:
    """Stateless comparison of a supplied password against the configured secret"""

    def __init__(self, secret: Optional[str]):
        self._secret = secret or ""
        if not self._secret:
            logger.warning("ADMIN_PASSWORD is not set; admin verification will always fail")

    def verify(self, password: Any) -> bool:
        if not self._secret or not isinstance(password, str):
            return False
        return secrets.compare_digest(password.encode("utf-8"), self._secret.encode("utf-8"))
