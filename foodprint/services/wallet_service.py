# foodprint/services/wallet_service.py
import logging
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session

from foodprint.core import signatures
from foodprint.core.exceptions import (
    AddressAlreadyLinked,
    InternalError,
    InvalidAddress,
    InvalidSignature,
    SignatureMismatch,
    UserNotFound,
)
from foodprint.core.wallet_utils import (
    UserRole,
    is_valid_address,
    normalize_address,
    parse_role,
    synthesize_email,
    synthesize_phone_number,
)
from foodprint.models.user import User
from foodprint.repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)

WALLET_REGISTRATION_CHANNEL = "wallet"


@dataclass(frozen=True)
class WalletLinkResult:
    user: User
    wallet_address: str
    user_role: UserRole
    created: bool


@dataclass(frozen=True)
class WalletStatus:
    wallet_connected: bool
    wallet_address: str | None
    user_role: str | None


class WalletService:
    """
    Business logic for linking Web3 wallets to user accounts.

    Responsibilities:
      - validate address / role before anything touches the database
      - apply the signature policy (required, or verified only when sent)
      - find-or-create the user owning the wallet and keep role + label
        in sync
      - translate storage failures into domain errors

    Stateless: every call works on the session it is given.
    """

    def __init__(
        self,
        repo: UserRepository,
        require_signature: bool = False,
        email_domain: str = "foodprint",
    ):
        self.repo = repo
        self.require_signature = require_signature
        self.email_domain = email_domain

    # ----- Helpers -----

    def _check_signature(
        self,
        wallet_address: str,
        signature: str | None,
        message: str | None,
    ) -> None:
        """
        Apply the signature policy.

        - require_signature=True: both fields must be present and valid.
        - require_signature=False: verify only when both are present,
          otherwise trust the claimed address.
        """
        if not (signature and message):
            if self.require_signature:
                raise InvalidSignature("Signature and message are required.")
            return

        if not signatures.verify(message, signature, wallet_address):
            raise SignatureMismatch()

    def _new_wallet_user(self, address: str, role: UserRole) -> User:
        return User(
            wallet_address=address,
            role=role.label,
            user_role=role.value,
            phone_number=synthesize_phone_number(address),
            email=synthesize_email(address, self.email_domain),
            first_name=role.label,
            registration_channel=WALLET_REGISTRATION_CHANNEL,
        )

    # ----- Operations -----

    def connect(
        self,
        session: Session,
        wallet_address: str | None,
        role: str | None,
        signature: str | None = None,
        message: str | None = None,
    ) -> WalletLinkResult:
        """
        Link `wallet_address` to an account with the given role.

        Existing wallet => role is (re)assigned; unknown wallet => a new
        wallet-only account is created. Calling again with the same role
        changes nothing.

        Raises:
            InvalidAddress, InvalidRole, InvalidSignature, SignatureMismatch:
                client input problems (400).
            AddressAlreadyLinked: a concurrent request inserted the same
                address first (409).
            InternalError: any other storage failure (500).
        """
        if not is_valid_address(wallet_address):
            raise InvalidAddress()
        user_role = parse_role(role)
        self._check_signature(wallet_address, signature, message)

        address = normalize_address(wallet_address)

        try:
            user = self.repo.get_by_wallet_address(session, address)
            if user is not None:
                user = self.repo.set_roles(
                    session, user, user_role.value, user_role.label
                )
                logger.info(
                    "Wallet %s reconnected with role %s", address, user_role.label
                )
                return WalletLinkResult(user, address, user_role, created=False)

            user = self.repo.create(session, self._new_wallet_user(address, user_role))
            logger.info(
                "New user %s created with wallet %s as %s",
                user.id,
                address,
                user_role.label,
            )
            return WalletLinkResult(user, address, user_role, created=True)
        except IntegrityError as e:
            session.rollback()
            logger.warning("Wallet %s insert hit a unique constraint: %s", address, e)
            # Only the wallet_address index means "someone linked it first".
            # A synthesized phone/email collision (e.g. a wallet-only account
            # that disconnected and reconnects) is a plain failure.
            try:
                winner = self.repo.get_by_wallet_address(session, address)
            except SQLAlchemyError as lookup_error:
                logger.exception("Wallet connect error")
                cause = getattr(lookup_error, "orig", None) or lookup_error
                raise InternalError(
                    f"Error connecting wallet: {cause}"
                ) from lookup_error
            if winner is not None:
                raise AddressAlreadyLinked() from e
            # e.orig is the driver message, without the INSERT statement
            raise InternalError(f"Error connecting wallet: {e.orig}") from e
        except SQLAlchemyError as e:
            session.rollback()
            logger.exception("Wallet connect error")
            raise InternalError(f"Error connecting wallet: {e}") from e

    def disconnect(self, session: Session, current_user: User) -> None:
        """
        Unlink the caller's wallet. Role fields are left untouched so the
        supply-chain role survives a disconnect.
        """
        try:
            self.repo.clear_wallet(session, current_user)
        except SQLAlchemyError as e:
            session.rollback()
            logger.exception("Wallet disconnect error")
            raise InternalError(f"Error disconnecting wallet: {e}") from e
        logger.info("Wallet disconnected from user %s", current_user.email)

    def status(self, session: Session, current_user: User) -> WalletStatus:
        """Read-only view of the caller's wallet link."""
        try:
            user = self.repo.get_by_id(session, current_user.id)
        except SQLAlchemyError as e:
            logger.exception("Wallet status error")
            raise InternalError(f"Error getting wallet status: {e}") from e

        if user is None:
            raise UserNotFound()

        return WalletStatus(
            wallet_connected=bool(user.wallet_address),
            wallet_address=user.wallet_address or None,
            user_role=user.user_role or None,
        )
