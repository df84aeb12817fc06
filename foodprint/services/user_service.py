# foodprint/services/user_service.py
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from foodprint.core.exceptions import InternalError, InvalidUpload
from foodprint.core.storage_utils import generate_filename, upload_to_storage
from foodprint.models.user import User
from foodprint.repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)

# --- Image config ---

MAX_IMAGE_BYTES = 5 * 1024 * 1024  # 5MB per image

ALLOWED_IMAGE_CONTENT_TYPES: dict[str, str] = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
}


class UserService:
    """
    Business logic for the user's own profile.

    Responsibilities:
      - validate uploaded identifier images
      - store them in object storage and remember the public URL
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    @staticmethod
    def _validate_and_get_ext(content_type: str | None, file_bytes: bytes) -> str:
        if content_type not in ALLOWED_IMAGE_CONTENT_TYPES:
            raise InvalidUpload("Unsupported image type. Allowed: JPEG, PNG, WEBP.")

        if not file_bytes:
            raise InvalidUpload("Uploaded file is empty.")

        if len(file_bytes) > MAX_IMAGE_BYTES:
            raise InvalidUpload("Image too large (max 5MB).")

        return ALLOWED_IMAGE_CONTENT_TYPES[content_type]

    def upload_identifier_image(
        self,
        session: Session,
        current_user: User,
        content_type: str | None,
        file_bytes: bytes,
    ) -> User:
        """
        Upload the user's identifier image and store its URL.

        Object name pattern:
            user_<id>_<uuid4><ext>   (lowercased)
        """
        ext = self._validate_and_get_ext(content_type, file_bytes)
        filename = f"user_{current_user.id}_{generate_filename()}"
        url = upload_to_storage(filename, ext, file_bytes, content_type)

        current_user.user_identifier_image_url = url
        try:
            return self.repo.update(session, current_user)
        except SQLAlchemyError as e:
            session.rollback()
            logger.exception("Identifier image update error")
            raise InternalError(f"Error saving identifier image: {e}") from e
