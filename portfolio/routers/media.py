import mimetypes
from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status

from portfolio.deps import get_storage, require_admin
from portfolio.routers.forms import read_upload
from portfolio.schemas import UploadResponse
from portfolio.storage import MediaNotFoundError, MediaStorage

router = APIRouter(prefix="/api", tags=["media"])


@router.post(
    "/upload",
    response_model=UploadResponse,
    dependencies=[Depends(require_admin)],
)
def upload_file(
    storage: Annotated[MediaStorage, Depends(get_storage)],
    file: Annotated[UploadFile | None, File()] = None,
) -> UploadResponse:
    """
    Store a standalone file and return its locator. No record references it.
    """
    upload = read_upload(file)
    if upload is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded"
        )
    stored = storage.save(upload)
    return UploadResponse(
        message="File uploaded successfully", url=stored.locator, handle=stored.handle
    )


@router.get("/media/{handle:path}")
def get_media(
    handle: str,
    storage: Annotated[MediaStorage, Depends(get_storage)],
) -> Response:
    """
    Serve stored bytes for backends whose locators point back at this API.
    """
    try:
        data = storage.load(handle)
    except MediaNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Media not found"
        ) from exc
    media_type, _ = mimetypes.guess_type(handle)
    return Response(content=data, media_type=media_type or "application/octet-stream")
