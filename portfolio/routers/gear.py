from datetime import date
from typing import Annotated, Any

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from portfolio.dao import GearDAO
from portfolio.deps import get_db, get_storage, require_admin
from portfolio.media import MediaReferenceStore
from portfolio.routers.forms import parse_specs, present, read_upload
from portfolio.schemas import GearMutationResponse, GearResponse, GearType, MessageResponse
from portfolio.storage import MediaStorage

router = APIRouter(prefix="/api/gear", tags=["gear"])

GEAR_NOT_FOUND = "Gear not found"


@router.get("", response_model=list[GearResponse])
def list_gear(
    db: Annotated[Session, Depends(get_db)],
    type: GearType | None = None,  # noqa: A002
) -> list[GearResponse]:
    return [GearResponse.model_validate(item) for item in GearDAO(db).list(type)]


@router.post(
    "",
    response_model=GearMutationResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_gear(
    db: Annotated[Session, Depends(get_db)],
    storage: Annotated[MediaStorage, Depends(get_storage)],
    name: Annotated[str, Form()],
    type: Annotated[GearType, Form()],  # noqa: A002
    image: Annotated[UploadFile | None, File()] = None,
    image_url: Annotated[str | None, Form()] = None,
    brand: Annotated[str | None, Form()] = None,
    model: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    specs: Annotated[str | None, Form()] = None,
    purchase_date: Annotated[date | None, Form()] = None,
    in_use: Annotated[bool, Form()] = True,
) -> GearMutationResponse:
    """
    Add a gear item. The image is either uploaded or given as an external URL.
    """
    upload = read_upload(image)
    fields: dict[str, Any] = {
        **present(
            brand=brand,
            model=model,
            description=description,
            purchase_date=purchase_date,
        ),
        "name": name,
        "type": type,
        "specs": parse_specs(specs) or {},
        "in_use": in_use,
    }
    if upload is None and image_url:
        # External image; nothing for us to delete later
        fields["media_url"] = image_url
    gear = MediaReferenceStore(GearDAO(db), storage).create_with_media(fields, upload)
    return GearMutationResponse(
        message="Gear added successfully", gear=GearResponse.model_validate(gear)
    )


@router.put(
    "/{gear_id}",
    response_model=GearMutationResponse,
    dependencies=[Depends(require_admin)],
)
def update_gear(
    gear_id: int,
    db: Annotated[Session, Depends(get_db)],
    storage: Annotated[MediaStorage, Depends(get_storage)],
    image: Annotated[UploadFile | None, File()] = None,
    image_url: Annotated[str | None, Form()] = None,
    name: Annotated[str | None, Form()] = None,
    type: Annotated[GearType | None, Form()] = None,  # noqa: A002
    brand: Annotated[str | None, Form()] = None,
    model: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    specs: Annotated[str | None, Form()] = None,
    purchase_date: Annotated[date | None, Form()] = None,
    in_use: Annotated[bool | None, Form()] = None,
) -> GearMutationResponse:
    upload = read_upload(image)
    fields = present(
        name=name,
        type=type,
        brand=brand,
        model=model,
        description=description,
        specs=parse_specs(specs),
        purchase_date=purchase_date,
        in_use=in_use,
    )
    gear = MediaReferenceStore(GearDAO(db), storage).update_record(
        gear_id, fields, upload, external_url=image_url
    )
    if gear is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=GEAR_NOT_FOUND)
    return GearMutationResponse(
        message="Gear updated successfully", gear=GearResponse.model_validate(gear)
    )


@router.delete(
    "/{gear_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
def delete_gear(
    gear_id: int,
    db: Annotated[Session, Depends(get_db)],
    storage: Annotated[MediaStorage, Depends(get_storage)],
) -> MessageResponse:
    if not MediaReferenceStore(GearDAO(db), storage).delete_record(gear_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=GEAR_NOT_FOUND)
    return MessageResponse(message="Gear deleted successfully")
