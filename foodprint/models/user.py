# foodprint/models/user.py
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, LargeBinary, String
from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """
    FoodPrint user account.

    The `user` table predates this service, so attributes are snake_case
    while the columns keep their legacy camelCase names (`phoneNumber`,
    `registrationChannel`, ...).

    Roles:
      - user_role: canonical token (farmer | wholesaler | distributor |
        retailer | admin)
      - role: legacy display label ("Farmer", ...), still read by older
        pages. Always written together with user_role.

    Wallet:
      - wallet_address is unique and stored lowercase. None means no
        wallet is linked.
    """

    __tablename__ = "user"

    id: int | None = Field(
        default=None,
        sa_column=Column("ID", Integer, primary_key=True, autoincrement=True),
    )

    first_name: str | None = Field(
        default=None,
        sa_column=Column("firstName", String(255), nullable=True),
    )
    middle_name: str | None = Field(
        default=None,
        sa_column=Column("middleName", String(255), nullable=True),
    )
    last_name: str | None = Field(
        default=None,
        sa_column=Column("lastName", String(255), nullable=True),
    )

    email: str | None = Field(
        default=None,
        sa_column=Column("email", String(255), nullable=True, unique=True),
    )

    # Wallet-only accounts get a synthesized "wallet_<hex>" value
    phone_number: str = Field(
        sa_column=Column("phoneNumber", String(255), nullable=False, unique=True),
    )

    role: str | None = Field(
        default=None,
        sa_column=Column("role", String(255), nullable=True),
    )
    user_role: str | None = Field(
        default=None,
        sa_column=Column(
            "user_role",
            String(50),
            nullable=True,
            comment="User role for supply chain: farmer, wholesaler, distributor, retailer, admin",
        ),
    )

    password: str | None = Field(
        default=None,
        sa_column=Column("password", String(255), nullable=True),
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column("createdAt", DateTime(timezone=True), nullable=True),
    )

    # "wallet" for accounts created by the wallet connect flow
    registration_channel: str | None = Field(
        default=None,
        sa_column=Column("registrationChannel", String(255), nullable=True),
    )

    national_id_photo_hash: bytes | None = Field(
        default=None,
        sa_column=Column("nationalIdPhotoHash", LargeBinary, nullable=True),
    )
    user_identifier_image_url: str | None = Field(
        default=None,
        sa_column=Column("user_identifier_image_url", String(255), nullable=True),
    )

    wallet_address: str | None = Field(
        default=None,
        sa_column=Column(
            "wallet_address",
            String(255),
            nullable=True,
            unique=True,
            comment="User's connected Web3 wallet address (MetaMask, WalletConnect, etc.)",
        ),
    )
