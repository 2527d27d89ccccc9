"""
In-memory user directory.

In production, this would read the identity provider's user table. The
therapist listing is open to every signed-in user: customers pick from
it on the booking form.
"""

import logging
from typing import Iterable, Optional

from massage_booking.schemas.user_schema import Role, User

logger = logging.getLogger(__name__)


class UserDirectory:
    """Users keyed by id."""

    def __init__(self, users: Iterable[User] = ()) -> None:
        self._users: dict[str, User] = {}
        for user in users:
            if user.id in self._users:
                raise ValueError(f"Duplicate user id: {user.id}")
            self._users[user.id] = user

    def __len__(self) -> int:
        return len(self._users)

    def get(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    def all(self) -> list[User]:
        return list(self._users.values())

    def therapists(self) -> list[User]:
        """Every therapist a customer can request, by name."""
        # TODO: filter by distance to the booking address once therapists carry a service area.
        found = sorted(
            (u for u in self._users.values() if u.role == Role.THERAPIST),
            key=lambda u: (u.name.casefold(), u.id),
        )
        logger.debug("Listing %d therapists", len(found))
        return found
