# kickoff_backend/services/storage_service.py
# Binary object store for team avatars, kept on the local filesystem and served under MEDIA_URL_PREFIX.

import io
import os
import secrets
import time
from pathlib import Path
from typing import Optional

from PIL import Image

from kickoff_backend.core.config import (
    AVATAR_FOLDER,
    AVATAR_STORAGE_DIR,
    MAX_AVATAR_BYTES,
    MEDIA_URL_PREFIX,
    TEST_MODE,
)

# Football emoji on a dark background
DEFAULT_AVATAR_URL = (
    "data:image/svg+xml;base64,PHN2ZyB3aWR0aD0iMTAwIiBoZWlnaHQ9IjEwMCIgeG1sbnM9Imh0dHA6Ly93d3cudzMub3JnLzIwMDAvc3ZnIj48cmVjdCB3aWR0aD0iMTAwIiBoZWlnaHQ9IjEwMCIgZmlsbD0iIzM3MzczNyIvPjx0ZXh0IHg9IjUwJSIgeT0iNTAlIiBmb250LXNpemU9IjQwIiBmaWxsPSIjYTNhM2EzIiB0ZXh0LWFuY2hvcj0ibWlkZGxlIiBkeT0iLjNlbSI+8J+RtDwvdGV4dD48L3N2Zz4="
)


def get_default_avatar_url() -> str:
    return DEFAULT_AVATAR_URL


# Accepted upload types and the Pillow format each must decode as
ALLOWED_IMAGE_TYPES = {
    "image/png": "PNG",
    "image/jpeg": "JPEG",
    "image/gif": "GIF",
    "image/webp": "WEBP",
}

# Stored file extension per decoded format
IMAGE_EXTENSIONS = {
    "PNG": "png",
    "JPEG": "jpg",
    "GIF": "gif",
    "WEBP": "webp",
}


def validate_image(content_type: Optional[str], content: bytes) -> str:
    """
    Check an upload before it is stored and return the file extension to store it under.

    - The declared content type must be PNG, JPEG, GIF or WebP (no SVG).
    - At most MAX_AVATAR_BYTES.
    - The bytes must decode (Pillow) as the declared format.

    The extension comes from the decoded format, never from the client's file name.
    Raises ValueError otherwise.
    """
    media_type = (content_type or "").split(";")[0].strip().lower()
    if not media_type.startswith("image/"):
        raise ValueError("Please select an image file")
    if len(content) > MAX_AVATAR_BYTES:
        raise ValueError("Image size should be less than 5MB")
    if media_type not in ALLOWED_IMAGE_TYPES:
        raise ValueError("Only PNG, JPEG, GIF or WebP images are allowed")

    try:
        with Image.open(io.BytesIO(content)) as img:
            img.verify()
            image_format = img.format
    except Exception as e:
        raise ValueError("The file is not a valid image") from e

    if image_format != ALLOWED_IMAGE_TYPES[media_type]:
        raise ValueError("The file does not match its image type")
    return IMAGE_EXTENSIONS[image_format]


def _storage_root() -> Path:
    return Path(AVATAR_STORAGE_DIR)


def upload_image(content: bytes, ext: str, folder: str = AVATAR_FOLDER) -> str:
    """
    Store an image under a unique name and return its public URL.
    ext is the extension returned by validate_image.
    """
    if ext not in IMAGE_EXTENSIONS.values():
        raise ValueError(f"Unsupported image extension: {ext}")
    safe_name = f"{int(time.time() * 1000)}-{secrets.token_hex(4)}.{ext}"

    target_dir = _storage_root() / folder
    target_dir.mkdir(parents=True, exist_ok=True)
    with open(target_dir / safe_name, "wb") as f:
        f.write(content)

    if TEST_MODE:
        print(f"🖼️ Stored avatar {folder}/{safe_name} ({len(content)} bytes)")

    return f"{MEDIA_URL_PREFIX}/{folder}/{safe_name}"


def delete_image(url: Optional[str]) -> bool:
    """
    Delete the stored file a public URL points to.
    Returns False for empty URLs, URLs outside the media store and missing files.
    """
    if not url or not url.startswith(f"{MEDIA_URL_PREFIX}/"):
        return False

    # The last two path segments are "<folder>/<file name>"
    parts = url.rstrip("/").split("/")
    if len(parts) < 2:
        return False
    folder, file_name = parts[-2], parts[-1]
    if folder in ("", ".", "..") or file_name in ("", ".", ".."):
        return False

    path = _storage_root() / folder / file_name
    if not path.is_file():
        return False

    os.remove(path)
    return True
