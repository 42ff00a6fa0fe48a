# blog_server/core/storage.py

import shutil
import time
from pathlib import Path

from fastapi import UploadFile


# Public URL prefix the upload directory is mounted under
PUBLIC_PREFIX = "uploads"


def save_picture(upload: UploadFile, upload_dir: Path) -> str:
    """
    Writes an uploaded picture as <epoch-millis><original extension> and
    returns the path clients fetch it from, e.g. "uploads/1712345678901.png".
    """
    upload_dir.mkdir(parents=True, exist_ok=True)
    suffix = Path(upload.filename or "").suffix
    filename = f"{int(time.time() * 1000)}{suffix}"

    with (upload_dir / filename).open("wb") as buffer:
        shutil.copyfileobj(upload.file, buffer)

    return f"{PUBLIC_PREFIX}/{filename}"


def discard_picture(public_path: str, upload_dir: Path) -> None:
    """Removes a picture written by save_picture() whose row update did not commit."""
    (upload_dir / Path(public_path).name).unlink(missing_ok=True)
