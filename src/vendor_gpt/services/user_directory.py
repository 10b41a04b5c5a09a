"""User profiles: role, photo and saved location."""

import logging
from datetime import datetime, timezone

from vendor_gpt.domain.enums import UserRole
from vendor_gpt.domain.errors import ValidationError
from vendor_gpt.domain.models import User
from vendor_gpt.domain.schemas import UserLocation
from vendor_gpt.infra.document_store import DocumentStore

logger = logging.getLogger(__name__)


class UserDirectory:
    """Reads and writes the ``users`` collection.

    Identity itself comes from the auth provider; this only keeps the
    profile fields the marketplace needs.
    """

    def __init__(self, store: DocumentStore):
        self.store = store

    async def get(self, user_id: str) -> User:
        return await self.store.get_or_raise("users", user_id)

    async def upsert(
        self,
        user_id: str,
        name: str,
        email: str | None = None,
        role: str = UserRole.VENDOR.value,
        photo_url: str | None = None,
    ) -> User:
        """Create the profile on first sign-in, update it afterwards."""
        if not name or not name.strip():
            raise ValidationError("Missing fields: name", ["name"])
        try:
            role = UserRole(role).value
        except ValueError:
            raise ValidationError(f"Unknown role: {role}", ["role"]) from None

        async with self.store.transaction():
            existing = await self.store.get("users", user_id)
            values = {"name": name.strip(), "email": email, "role": role, "photo_url": photo_url}
            if existing is None:
                user = await self.store.insert("users", {"id": user_id, **values})
            else:
                user = await self.store.update("users", user_id, values)
        return user

    async def save_location(self, user_id: str, location: UserLocation) -> User:
        """Store *location* on the profile, stamping ``updatedAt``."""
        location = location.model_copy(update={"updated_at": datetime.now(timezone.utc)})
        payload = location.model_dump(mode="json", by_alias=True)

        async with self.store.transaction():
            user = await self.store.update("users", user_id, {"location": payload})
        logger.info("Saved location for user %s: %s", user_id, location.city)
        return user

    async def wholesalers(self) -> list[User]:
        return await self.store.find("users", where={"role": UserRole.WHOLESALER.value})
