"""
portfolio/media.py -- Image upload validation and storage.

MediaStore accepts raw upload bytes plus the client-declared filename and
media type. It never decodes or resizes the image -- it only checks that the
upload claims to be one of the allowed image types and fits the size cap,
then writes it to the upload directory.

Validation happens entirely before anything is written, and routes call
save_image() before any database write, so a rejected upload leaves neither a
file nor a row behind.

Stored names are <nanosecond timestamp><original extension>. The file is
opened with O_EXCL ("xb"); on the rare clash the timestamp is re-read and
the write retried.

Layer rule: no imports from api/ or auth/.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path, PurePath

from core.errors import PayloadTooLarge, UnsupportedMediaType

logger = logging.getLogger("portfolio.media")

ALLOWED_EXTENSIONS = {".jpeg", ".jpg", ".png", ".gif", ".webp"}
ALLOWED_MEDIA_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}

_MAX_NAME_ATTEMPTS = 5


def image_extension(filename: str) -> str:
    """Return the lowercase extension of filename ('' if none). Directory parts are ignored."""
    return PurePath(filename.replace("\\", "/")).suffix.lower()


def validate_image(filename: str, content_type: str | None, size: int, max_bytes: int) -> str:
    """Check an upload against the allow-list and size cap.

    Both the extension AND the declared media type must be allowed. Returns
    the normalized extension on success.

    Raises:
        UnsupportedMediaType: extension or media type not an allowed image type.
        PayloadTooLarge:      size exceeds max_bytes.
    """
    ext = image_extension(filename)
    media_type = (content_type or "").split(";")[0].strip().lower()
    if ext not in ALLOWED_EXTENSIONS or media_type not in ALLOWED_MEDIA_TYPES:
        raise UnsupportedMediaType(
            "Only image files are allowed.",
            detail="Allowed types: " + ", ".join(sorted(e.lstrip(".") for e in ALLOWED_EXTENSIONS)),
        )
    if size > max_bytes:
        raise PayloadTooLarge(f"Upload must be {max_bytes // (1024 * 1024)} MB or smaller.")
    return ext


class MediaStore:
    """Writes validated images to a local directory and hands back their public path.

    Usage:
        media = MediaStore("uploads", url_prefix="/uploads", max_bytes=5 * 1024 * 1024)
        image_url = media.save_image("me.png", "image/png", data)   # "/uploads/1718...png"
    """

    def __init__(self, upload_dir: str | Path, url_prefix: str = "/uploads", max_bytes: int = 5 * 1024 * 1024) -> None:
        self.upload_dir = Path(upload_dir)
        self.url_prefix = "/" + url_prefix.strip("/")
        self.max_bytes = max_bytes
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def save_image(self, filename: str, content_type: str | None, data: bytes) -> str:
        """Validate and store one image. Returns its relative reference path."""
        try:
            ext = validate_image(filename, content_type, len(data), self.max_bytes)
        except (UnsupportedMediaType, PayloadTooLarge) as exc:
            logger.warning("Rejected upload %r (%s, %d bytes): %s", filename, content_type, len(data), exc.code)
            raise

        for _ in range(_MAX_NAME_ATTEMPTS):
            name = f"{time.time_ns()}{ext}"
            try:
                with open(self.upload_dir / name, "xb") as fh:
                    fh.write(data)
            except FileExistsError:
                continue
            logger.info("Stored upload %s (%d bytes)", name, len(data))
            return f"{self.url_prefix}/{name}"
        raise FileExistsError(f"Could not allocate a unique upload name in {self.upload_dir}")

    def discard(self, ref: str) -> None:
        """Delete a file previously returned by save_image(). Missing files are ignored."""
        name = PurePath(ref).name
        if not name:
            return
        (self.upload_dir / name).unlink(missing_ok=True)
        logger.info("Discarded upload %s", name)
