# foodprint/repositories/user_repo.py
from sqlmodel import Session, select

from foodprint.models.user import User


class UserRepository:
    """
    Data access layer for User.

    Responsibilities:
      - Pure DB operations (CRUD + queries)
      - No FastAPI, no HTTP, no business logic
    """

    # ----- Queries -----

    def get_by_id(self, session: Session, user_id: int) -> User | None:
        """Return a User by primary key, or None if not found."""
        return session.get(User, user_id)

    def get_by_wallet_address(self, session: Session, address: str) -> User | None:
        """
        Return the User holding `address`, or None.

        Exact match: callers pass the lowercased form that is stored.
        """
        stmt = select(User).where(User.wallet_address == address)
        return session.exec(stmt).first()

    # ----- Writes -----

    def create(self, session: Session, user: User) -> User:
        """Insert a new User and return the persisted row."""
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    def update(self, session: Session, user: User) -> User:
        """Persist changes to an existing User."""
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    def set_roles(self, session: Session, user: User, token: str, label: str) -> User:
        """Write `user_role` and the legacy `role` label in one commit."""
        user.user_role = token
        user.role = label
        return self.update(session, user)

    def clear_wallet(self, session: Session, user: User) -> User:
        user.wallet_address = None
        return self.update(session, user)
