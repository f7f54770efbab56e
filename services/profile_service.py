from typing import Optional
from uuid import UUID
from sqlalchemy.orm import Session
import logging

from domain.models import Profile
from domain.schemas.profile_schemas import ProfileUpdateRequest
from domain.security.context import SessionContext
from repositories import ProfileRepository
from app.exceptions import NotFoundError, PermissionDeniedError, ServiceValidationError

logger = logging.getLogger("angiday.profile")


class ProfileService:
    """Business logic for profile management"""

    @staticmethod
    def get_profile(db: Session, ctx: SessionContext, user_id: Optional[UUID] = None) -> Profile:
        """Retrieve a profile; defaults to the caller's own.

        Profiles of other identities are hidden by the row policies and
        therefore reported as not found.
        """
        user_id = user_id or ctx.user_id
        if user_id is None:
            raise ServiceValidationError("A profile id is required")

        profile = ProfileRepository(db).get_by_id(user_id)
        if not profile:
            logger.warning(f"profile_not_found user_id={user_id} caller={ctx}")
            raise NotFoundError(f"Profile {user_id} not found")

        logger.info(f"profile_fetched user_id={user_id}")
        return profile

    @staticmethod
    def update_profile(
        db: Session, ctx: SessionContext, data: ProfileUpdateRequest, user_id: Optional[UUID] = None
    ) -> Profile:
        """Apply a partial update to a profile.

        Only the fields present in the payload are written. Updating someone
        else's profile fails with ``PermissionDeniedError`` rather than
        silently doing nothing.
        """
        user_id = user_id or ctx.user_id
        repo = ProfileRepository(db)
        profile = repo.get_by_id(user_id) if user_id else None
        if not profile:
            if user_id and user_id != ctx.user_id:
                raise PermissionDeniedError(
                    "UPDATE on profiles is not permitted for this session",
                    code="POLICY_DENIED",
                    table="profiles",
                    command="UPDATE",
                )
            raise NotFoundError(f"Profile {user_id} not found")

        fields = data.model_dump(exclude_unset=True)
        if "dietary_preferences" in fields:
            fields["dietary_preferences"] = [
                pref.value if hasattr(pref, "value") else pref
                for pref in (fields["dietary_preferences"] or [])
            ]
        if not fields:
            return profile

        profile = repo.update(profile, **fields)
        logger.info(f"profile_updated user_id={user_id} fields={sorted(fields)}")
        return profile

    @staticmethod
    def ensure_profile(service_db: Session, user_id: UUID, full_name: Optional[str] = None) -> Profile:
        """Create the profile row for an identity if it has none yet.

        Profile inserts have no caller policy, so this must run on a service
        session.
        """
        repo = ProfileRepository(service_db)
        profile = repo.get_by_id(user_id)
        if profile:
            return profile

        profile = repo.create(Profile(id=user_id, full_name=full_name, dietary_preferences=[]))
        logger.info(f"profile_provisioned user_id={user_id}")
        return profile
