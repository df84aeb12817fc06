# foodprint/routers/users.py
from fastapi import APIRouter, Depends, File, UploadFile
from sqlmodel import Session

from foodprint.core.auth import require_auth
from foodprint.database import get_session
from foodprint.models.user import User
from foodprint.repositories.user_repo import UserRepository
from foodprint.schemas.user import UserRead
from foodprint.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])

repo = UserRepository()
service = UserService(repo)


@router.get("/me", response_model=UserRead)
def read_me(current_user: User = Depends(require_auth)):
    """
    Return the authenticated user's profile.

    Auth:
      - Requires a session (cookie or Bearer token from /wallet/connect).
    """
    return current_user


@router.post(
    "/me/identifier-image",
    response_model=UserRead,
    summary="Upload or replace the user's identifier image",
)
def upload_identifier_image(
    file: UploadFile = File(...),
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Upload an identifier image (JPEG/PNG/WEBP, max 5MB).

    Stored in DigitalOcean Spaces when configured; otherwise the upload is
    skipped and a local /uploads/ URL is recorded.
    """
    file_bytes = file.file.read()
    return service.upload_identifier_image(
        session, current_user, file.content_type, file_bytes
    )
