"""Current-user pointer (who is logged in on this profile)."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from guestpost.domain.models import User
from guestpost.repositories.market_repository import MarketRepository

logger = logging.getLogger(__name__)


@dataclass
class SessionService:
    """
    Holds the logged-in user as a copy of the user record.

    The copy is taken at login time and is not refreshed when the record
    changes; there is no expiry or token.
    """

    repository: MarketRepository

    def current_user(self) -> Optional[User]:
        return self.repository.get_current_user()

    def start(self, user: User) -> None:
        self.repository.set_current_user(user)
        logger.info("Session started for %s", user.email)

    def end(self) -> None:
        self.repository.clear_current_user()
