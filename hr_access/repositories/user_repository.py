"""Repository for identity-provider users."""

from sqlalchemy.orm import Session
from hr_access.models.user import User


class UserRepository:
    """Maps JWT subjects to internal user ids"""

    def __init__(self, db: Session):
        self.db = db

    def get_or_create_by_auth_id(self, auth_user_id: str) -> User:
        """
        Resolve the principal of a request.

        Users are never provisioned here ahead of time; the first request
        carrying a new 'sub' claim records the user so memberships and
        overrides can reference an internal id.

        Args:
            auth_user_id: The JWT 'sub' claim

        Returns:
            The existing or newly recorded User
        """
        user = self.db.query(User).filter(User.auth_user_id == auth_user_id).first()
        if user is None:
            user = User(auth_user_id=auth_user_id)
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
        return user

    def get_by_ids(self, user_ids: list[int]) -> list[User]:
        """Users for the given internal ids, ordered by id (unknown ids skipped)"""
        if not user_ids:
            return []
        return self.db.query(User).filter(User.id.in_(user_ids)).order_by(User.id).all()
