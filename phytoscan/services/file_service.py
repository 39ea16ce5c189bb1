"""File handling service for leaf image uploads."""
import logging
import uuid
from datetime import datetime
from pathlib import Path

from fastapi import UploadFile
from PIL import Image

from phytoscan.config import settings

logger = logging.getLogger(__name__)


class FileService:
    """Service for handling file uploads and storage."""

    ALLOWED_TYPES = ["image/jpeg", "image/jpg", "image/png", "image/webp"]

    def __init__(self, upload_dir: str | None = None):
        self.upload_dir = Path(upload_dir or settings.upload_dir)
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    async def save_leaf_image(self, file: UploadFile) -> str:
        """
        Save uploaded leaf image to disk.

        Args:
            file: Uploaded file from FastAPI

        Returns:
            Path to saved file

        Raises:
            ValueError: If file type is invalid
        """
        if file.content_type not in self.ALLOWED_TYPES:
            raise ValueError(
                f"Invalid file type: {file.content_type}. Allowed: {self.ALLOWED_TYPES}"
            )

        timestamp = datetime.utcnow().strftime("%Y%m%d_%H%M%S")
        unique_id = str(uuid.uuid4())[:8]
        extension = Path(file.filename or "").suffix.lower() or ".jpg"
        filename = f"{timestamp}_{unique_id}{extension}"

        file_path = self.upload_dir / filename
        contents = await file.read()

        with open(file_path, "wb") as f:
            f.write(contents)

        self._optimize_image(file_path)

        return str(file_path)

    def _optimize_image(self, file_path: Path, max_width: int = 1920):
        """
        Downscale oversized images while keeping quality.

        Args:
            file_path: Path to image file
            max_width: Maximum width in pixels
        """
        try:
            with Image.open(file_path) as img:
                if img.width <= max_width:
                    return

                if img.mode == "RGBA":
                    rgb_img = Image.new("RGB", img.size, (255, 255, 255))
                    rgb_img.paste(img, mask=img.split()[3])
                    img = rgb_img

                ratio = max_width / img.width
                new_height = int(img.height * ratio)
                img = img.resize((max_width, new_height), Image.Resampling.LANCZOS)
                img.save(file_path, optimize=True, quality=85)

        except Exception as e:
            # If optimization fails, keep original
            logger.warning("Could not optimize image %s: %s", file_path, e)

    def delete_file(self, file_path: str) -> bool:
        """
        Delete a file from disk.

        Returns:
            True if deleted, False if file not found
        """
        try:
            path = Path(file_path)
            if path.exists():
                path.unlink()
                return True
            return False
        except OSError as e:
            logger.warning("Error deleting file %s: %s", file_path, e)
            return False
