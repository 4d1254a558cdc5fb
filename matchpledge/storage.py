"""
Local-disk content store for uploaded images.

Files live under <LOCAL_UPLOAD_DIR>/images and are served back through
<UPLOAD_URL_PREFIX>/<file_name>. Every file is owned by exactly one post row.
"""

import os, mimetypes, uuid
from typing import Tuple

from matchpledge.core.settings import settings

IMAGES_SUBDIR = "images"


def images_dir() -> str:
    return os.path.join(settings.LOCAL_UPLOAD_DIR or "uploads", IMAGES_SUBDIR)


def public_url(file_name: str) -> str:
    return f"{settings.UPLOAD_URL_PREFIX.rstrip('/')}/{file_name}"


def ensure_images_dir() -> str:
    folder = images_dir()
    os.makedirs(folder, exist_ok=True)
    return folder


def store_image(data: bytes, ext: str) -> Tuple[str, str]:
    """
    Write `data` under a fresh uuid file name.
    Returns: (file_name, path). Raises OSError on failure.
    """
    folder = ensure_images_dir()
    file_name = f"{uuid.uuid4()}.{ext}"
    path = os.path.join(folder, file_name)
    # "xb": never clobber an existing file
    with open(path, "xb") as f:
        f.write(data)
    return file_name, path


def _resolve(file_name: str) -> str:
    """Map a public file name to a path, forced inside the images folder."""
    base = os.path.abspath(images_dir())
    abspath = os.path.abspath(os.path.join(base, file_name))
    if os.path.dirname(abspath) != base:
        raise FileNotFoundError(file_name)
    return abspath


def read_image(file_name: str) -> Tuple[bytes, str]:
    """Return (bytes, mime). Missing or out-of-folder names raise FileNotFoundError."""
    path = _resolve(file_name)
    with open(path, "rb") as f:
        data = f.read()
    mime = mimetypes.guess_type(file_name)[0] or "application/octet-stream"
    return data, mime


def remove_file(path: str) -> None:
    """Delete a stored file. FileNotFoundError and other OSErrors propagate separately."""
    os.remove(path)
