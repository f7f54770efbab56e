"""
Profile Repository - Data access layer for identity accounts and profiles
"""

from typing import Optional
from sqlalchemy import select
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import AuthUser, Profile


class AuthUserRepository(BaseRepository[AuthUser]):
    """Identity-provider account mirror; only usable from a service session"""

    def __init__(self, db: Session):
        super().__init__(db, AuthUser)

    def get_by_email(self, email: str) -> Optional[AuthUser]:
        return self.db.scalars(select(AuthUser).where(AuthUser.email == email)).first()

    def create_account(self, email: str, full_name: Optional[str] = None) -> AuthUser:
        """Create the account and its profile in one transaction"""
        user = AuthUser(email=email)
        user.profile = Profile(full_name=full_name, dietary_preferences=[])
        return self.create(user)


class ProfileRepository(BaseRepository[Profile]):
    """Repository for profile data access"""

    def __init__(self, db: Session):
        super().__init__(db, Profile)
