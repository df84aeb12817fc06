# foodprint/schemas/user.py
from datetime import datetime

from pydantic import ConfigDict
from sqlmodel import SQLModel


class UserRead(SQLModel):
    """
    Response schema returned to clients.

    Never includes password or the national-ID photo hash.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone_number: str
    role: str | None = None
    user_role: str | None = None
    wallet_address: str | None = None
    user_identifier_image_url: str | None = None
    registration_channel: str | None = None
    created_at: datetime | None = None
