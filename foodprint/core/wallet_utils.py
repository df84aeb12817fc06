# foodprint/core/wallet_utils.py
import enum
import re

from foodprint.core.exceptions import InvalidRole

ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


class UserRole(str, enum.Enum):
    """Supply-chain role tokens, stored lowercase in `user.user_role`."""

    FARMER = "farmer"
    WHOLESALER = "wholesaler"
    DISTRIBUTOR = "distributor"
    RETAILER = "retailer"
    ADMIN = "admin"

    @property
    def label(self) -> str:
        """Legacy display form kept in `user.role` (e.g. "Farmer")."""
        return ROLE_LABELS[self]


ROLE_LABELS: dict[UserRole, str] = {
    UserRole.FARMER: "Farmer",
    UserRole.WHOLESALER: "Wholesaler",
    UserRole.DISTRIBUTOR: "Distributor",
    UserRole.RETAILER: "Retailer",
    UserRole.ADMIN: "Admin",
}


def is_valid_address(value: object) -> bool:
    """
    True iff `value` is "0x" followed by exactly 40 hex characters.

    Case-insensitive; no normalization is performed here.
    """
    return isinstance(value, str) and ADDRESS_RE.fullmatch(value) is not None


def normalize_address(address: str) -> str:
    return address.lower()


def parse_role(token: object) -> UserRole:
    """
    Convert a raw token into a UserRole.

    Raises:
        InvalidRole: if the token is missing or not one of the five roles.
            Matching is case-sensitive ("Farmer" is rejected).
    """
    if not isinstance(token, str):
        raise InvalidRole()
    try:
        return UserRole(token)
    except ValueError:
        raise InvalidRole()


def map_role(token: object) -> str:
    """Map a role token to its display label, e.g. "farmer" -> "Farmer"."""
    return parse_role(token).label


def synthesize_phone_number(address: str) -> str:
    """
    Placeholder phone number for wallet-only accounts.

    `phoneNumber` is NOT NULL + UNIQUE, so wallet accounts get
    "wallet_" + the first 10 hex characters after "0x".
    """
    return f"wallet_{address[2:12]}"


def synthesize_email(address: str, domain: str) -> str:
    return f"{address}@wallet.{domain}"
