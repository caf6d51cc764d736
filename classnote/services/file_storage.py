import os
import uuid
import logging
from fastapi import UploadFile

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024

class UploadTooLarge(Exception):
    pass

async def save_upload(upload: UploadFile, upload_dir: str, max_size: int) -> str:
    """
    Streams an upload into upload_dir under a generated name and returns the path.
    Raises UploadTooLarge (and leaves nothing behind) past max_size bytes.
    """
    os.makedirs(upload_dir, exist_ok=True)
    ext = os.path.splitext(upload.filename or "")[1]
    path = os.path.join(upload_dir, f"{uuid.uuid4().hex}{ext}")

    written = 0
    with open(path, "wb") as out:
        while True:
            chunk = await upload.read(CHUNK_SIZE)
            if not chunk:
                break
            written += len(chunk)
            if written > max_size:
                out.close()
                remove_file(path)
                raise UploadTooLarge(f"{upload.filename} exceeds {max_size} bytes")
            out.write(chunk)
    return path

def remove_file(path: str):
    """Best effort: a file that is already gone is not an error."""
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Could not remove stored file {path}: {e}")
