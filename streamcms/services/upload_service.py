"""
Upload Service

Validates and stores movie poster images in the local poster directory.
"""

import logging
from io import BytesIO
from pathlib import Path

from fastapi import UploadFile
from PIL import Image, UnidentifiedImageError

from streamcms.config import settings
from streamcms.exceptions import FileTooLargeError, FileUploadError, InvalidFileTypeError
from streamcms.utils.site import clean_domain
from streamcms.utils.slugify import slugify

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192

# Allowed poster types and the extension used when the filename has none
ALLOWED_POSTER_TYPES = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
}
ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp"}


class PosterUploadService:
    """Service for storing poster images as ``{domain}-{slug}{ext}``."""

    def __init__(
        self,
        upload_dir: str | Path | None = None,
        public_path: str | None = None,
        max_file_size: int | None = None,
    ):
        self.upload_dir = Path(upload_dir or settings.poster_upload_dir)
        self.public_path = (public_path or settings.poster_public_path).rstrip("/")
        self.max_file_size = max_file_size or settings.poster_max_file_size

    @staticmethod
    def validate_file(file: UploadFile) -> str:
        """
        Validate the declared type of an uploaded poster.

        Returns:
            The file extension to store the poster under

        Raises:
            FileUploadError: If no file was sent
            InvalidFileTypeError: If the MIME type is not an allowed image type
        """
        if not file or not file.filename:
            raise FileUploadError("No file provided")

        mime_type = file.content_type
        if mime_type not in ALLOWED_POSTER_TYPES:
            raise InvalidFileTypeError(mime_type, sorted(ALLOWED_POSTER_TYPES))

        file_ext = Path(file.filename).suffix.lower()
        if file_ext not in ALLOWED_EXTENSIONS:
            file_ext = ALLOWED_POSTER_TYPES[mime_type]
        return file_ext

    async def read_limited(self, file: UploadFile) -> bytes:
        """Read the upload, failing as soon as it exceeds the size limit."""
        buffer = BytesIO()
        size = 0
        while chunk := await file.read(CHUNK_SIZE):
            size += len(chunk)
            if size > self.max_file_size:
                raise FileTooLargeError(size, self.max_file_size)
            buffer.write(chunk)
        return buffer.getvalue()

    @staticmethod
    def verify_image(data: bytes, filename: str | None = None) -> None:
        try:
            with Image.open(BytesIO(data)) as img:
                img.verify()
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            raise FileUploadError("Uploaded file is not a valid image", filename=filename) from e

    def build_filename(self, slug: str, file_ext: str, host: str | None = None) -> str:
        domain = clean_domain(host or settings.site_domain) or "localhost"
        clean_slug = slugify(slug)
        if not clean_slug:
            raise FileUploadError("Slug is required")
        return f"{domain}-{clean_slug}{file_ext}"

    async def save_poster(self, file: UploadFile, slug: str, host: str | None = None) -> tuple[str, str]:
        """
        Validate and store a poster.

        Args:
            file: Uploaded image
            slug: Movie slug the poster belongs to
            host: Request host, used as the filename prefix

        Returns:
            Tuple of (public URL, stored filename)
        """
        file_ext = self.validate_file(file)
        file_name = self.build_filename(slug, file_ext, host)

        data = await self.read_limited(file)
        self.verify_image(data, file.filename)

        self.upload_dir.mkdir(parents=True, exist_ok=True)
        file_path = self.upload_dir / file_name
        try:
            file_path.write_bytes(data)
        except OSError as e:
            logger.error(f"Failed to write poster {file_path}: {e}")
            raise FileUploadError("Failed to upload file", filename=file_name) from e

        logger.info(f"Poster uploaded: {file_path} ({len(data)} bytes)")
        return f"{self.public_path}/{file_name}", file_name


def get_poster_upload_service() -> PosterUploadService:
    return PosterUploadService()
