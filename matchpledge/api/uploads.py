from fastapi import APIRouter
from fastapi.responses import Response

from matchpledge import storage
from matchpledge.errors import NotFound, StorageError

router = APIRouter(prefix="/api/uploads", tags=["uploads"])


@router.get("/{file_name}")
async def get_upload(file_name: str):
    """Raw image bytes from the content store."""
    try:
        data, mime = storage.read_image(file_name)
    except (FileNotFoundError, IsADirectoryError):
        raise NotFound("File missing")
    except OSError as exc:
        raise StorageError(f"failed to read {file_name}: {exc}") from exc
    return Response(content=data, media_type=mime)
