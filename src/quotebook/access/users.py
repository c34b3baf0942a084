"""User manager: upsert on sign-in, lookups and role changes."""

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..db.models import User, utcnow_iso
from ..db.schemas import UserRole
from ..db.sqlite import Database
from ..errors import NotFoundError
from ..log import get_logger
from .schemas import VerifiedIdentity, normalize_email

LOG = get_logger("users")


class UserManager:
    """Manages user accounts."""

    def __init__(self, db: Database, owner_identity_id: Optional[str] = None):
        """Initialize user manager.

        Args:
            db: Database instance
            owner_identity_id: Identity id that is always granted the admin role
        """
        self.db = db
        self.owner_identity_id = owner_identity_id

    def upsert_user(
        self,
        identity: VerifiedIdentity,
        role: Optional[UserRole] = None,
    ) -> User:
        """Create or refresh the user for a verified identity.

        Args:
            identity: Verified identity from the provider
            role: Explicit role; when omitted, the owner id gets admin and
                  existing users keep their role

        Returns:
            The stored user
        """
        if role is None and identity.identity_id == self.owner_identity_id:
            role = UserRole.ADMIN

        try:
            return self._upsert(identity, role)
        except IntegrityError:
            # A concurrent first sign-in inserted the row after our lookup
            LOG.info("Retrying upsert for identity %s", identity.identity_id)
            return self._upsert(identity, role)

    def _find_by_identity(self, session: Session, identity_id: str) -> Optional[User]:
        stmt = select(User).where(User.identity_id == identity_id)
        return session.execute(stmt).scalar_one_or_none()

    def _upsert(self, identity: VerifiedIdentity, role: Optional[UserRole]) -> User:
        with self.db.get_session() as session:
            user = self._find_by_identity(session, identity.identity_id)

            if user is None:
                user = User(
                    identity_id=identity.identity_id,
                    role=(role or UserRole.USER).value,
                )
                session.add(user)
                LOG.info("Created user for identity %s", identity.identity_id)
            elif role is not None:
                user.role = role.value

            if identity.name is not None:
                user.name = identity.name
            if identity.email is not None:
                user.email = normalize_email(identity.email)
            if identity.login_method is not None:
                user.login_method = identity.login_method
            user.last_signed_in = utcnow_iso()

            session.commit()
            session.refresh(user)
            session.expunge(user)
            return user

    def get_user(self, user_id: str) -> Optional[User]:
        """Get a user by ID."""
        with self.db.get_session() as session:
            user = session.get(User, user_id)
            if user:
                session.expunge(user)
            return user

    def get_by_identity_id(self, identity_id: str) -> Optional[User]:
        """Get a user by identity-provider id."""
        with self.db.get_session() as session:
            user = self._find_by_identity(session, identity_id)
            if user:
                session.expunge(user)
            return user

    def get_by_email(self, email: str) -> Optional[User]:
        """Get the earliest user registered with an email."""
        with self.db.get_session() as session:
            stmt = (
                select(User)
                .where(func.lower(User.email) == normalize_email(email))
                .order_by(User.created_at)
                .limit(1)
            )
            user = session.execute(stmt).scalar_one_or_none()
            if user:
                session.expunge(user)
            return user

    def list_users(self) -> list[User]:
        """List all users, oldest first."""
        with self.db.get_session() as session:
            users = session.execute(select(User).order_by(User.created_at)).scalars().all()
            for user in users:
                session.expunge(user)
            return list(users)

    def set_role(self, user_id: str, role: UserRole) -> User:
        """Explicitly set a user's role.

        Raises:
            NotFoundError: If the user does not exist
        """
        with self.db.get_session() as session:
            user = session.get(User, user_id)
            if user is None:
                raise NotFoundError("User not found")
            user.role = role.value
            session.commit()
            session.refresh(user)
            session.expunge(user)
            return user
