from typing import Optional, Set
import logging
from config.database import Database, store_errors
from schemas.profile import CurrentUser, Profile, Role

logger = logging.getLogger(__name__)


class ProfileStore:
    """Lookups against the identity provider's profile and role collections."""

    def __init__(self, db: Database):
        self.db = db

    async def get_profile(self, user_id: str) -> Optional[Profile]:
        with store_errors("load profile"):
            profile = await self.db.profiles.find_one({"user_id": user_id})
        return Profile(**profile) if profile else None

    async def roles_for(self, user_id: str) -> Set[Role]:
        with store_errors("load roles"):
            rows = await self.db.user_roles.find({"user_id": user_id}).to_list(length=None)

        roles = set()
        for row in rows:
            try:
                roles.add(Role(row["role"]))
            except ValueError:
                logger.warning(f"Ignoring unknown role {row.get('role')!r} for user {user_id}")
        return roles

    async def current_user(self, user_id: str) -> Optional[CurrentUser]:
        profile = await self.get_profile(user_id)
        if not profile:
            return None
        roles = await self.roles_for(user_id)
        return CurrentUser(
            user_id=profile.user_id,
            email=profile.email,
            roles=sorted(roles, key=lambda role: role.value)
        )

