import logging
from typing import List, Optional

from fastapi import (
    APIRouter,
    Body,
    Depends,
    File,
    Form,
    Path,
    Query,
    UploadFile,
    status,
)

from assets_api.adapters.metadata_store import MetadataStore
from assets_api.adapters.object_store import ObjectStore
from assets_api.dependencies import (
    get_app_settings,
    get_metadata_store,
    get_object_store,
)
from assets_api.errors import (
    DependencyError,
    NotFoundError,
    PayloadTooLargeError,
    ValidationError,
)
from assets_api.schemas import (
    Asset,
    DeleteAssetResponse,
    UpdateAssetRequest,
    Visibility,
)
from assets_api.settings import Settings
from assets_api.utils.assets import (
    make_asset_id,
    make_blob_name,
    next_timestamp,
    normalize_title,
    normalize_visibility,
    utc_timestamp,
)

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"

router = APIRouter()


def _require_visibility(*candidates: Optional[str]) -> Visibility:
    """First non-blank candidate, normalized. None of them set is a 400."""
    for candidate in candidates:
        if candidate is not None and candidate.strip():
            return normalize_visibility(candidate)
    raise ValidationError("visibility is required")


def _read_asset(metadata_store: MetadataStore, asset_id: str, visibility: Visibility) -> Asset:
    document = metadata_store.point_read(asset_id, visibility.value)
    if document is None:
        raise NotFoundError(asset_id, visibility.value)
    return Asset.model_validate(document)


@router.post("/files", response_model=Asset, status_code=status.HTTP_201_CREATED)
def create_asset(
    file: Optional[UploadFile] = File(None, description="The file to upload"),
    title: Optional[str] = Form(None, description="Display title, defaults to the file name"),
    visibility: Optional[str] = Form(None, description="public or private, defaults to private"),
    settings: Settings = Depends(get_app_settings),
    object_store: ObjectStore = Depends(get_object_store),
    metadata_store: MetadataStore = Depends(get_metadata_store),
) -> Asset:
    """
    Upload a file and record its metadata.

    The blob is written first, then the metadata document. A failed metadata
    insert leaves the blob behind; nothing is rolled back.
    """
    if file is None or not file.filename:
        raise ValidationError("file is required")

    asset_visibility = normalize_visibility(visibility)
    asset_title = normalize_title(title, file.filename)

    # read one byte past the ceiling so oversize uploads are detected without buffering more
    file_bytes = file.file.read(settings.max_upload_bytes + 1)
    if len(file_bytes) > settings.max_upload_bytes:
        raise PayloadTooLargeError(settings.max_upload_bytes)

    object_store.create_container_if_absent()

    asset_id = make_asset_id()
    blob_name = make_blob_name(asset_id, file.filename)
    content_type = file.content_type or DEFAULT_CONTENT_TYPE
    blob_url = object_store.write_blob(blob_name, file_bytes, content_type)

    now = utc_timestamp()
    asset = Asset(
        id=asset_id,
        visibility=asset_visibility,
        title=asset_title,
        file_name=file.filename,
        mime_type=content_type,
        size=len(file_bytes),
        blob_name=blob_name,
        blob_url=blob_url,
        created_at=now,
        updated_at=now,
    )
    metadata_store.insert(asset.model_dump(by_alias=True))

    logger.info(f"Created asset {asset_id} ({asset.visibility}, {asset.size} bytes)")
    return asset


@router.get("/files", response_model=List[Asset])
def list_assets(
    visibility: Optional[str] = Query(None, description="Only list this partition"),
    metadata_store: MetadataStore = Depends(get_metadata_store),
) -> List[Asset]:
    """List assets newest first, from one partition or from both."""
    partition = None
    if visibility is not None and visibility.strip():
        partition = normalize_visibility(visibility).value

    documents = metadata_store.query_by_partition(partition)
    return [Asset.model_validate(document) for document in documents]


@router.get("/files/{asset_id}", response_model=Asset)
def get_asset(
    asset_id: str = Path(..., description="The asset id"),
    visibility: Optional[str] = Query(None, description="Partition of the asset, defaults to private"),
    metadata_store: MetadataStore = Depends(get_metadata_store),
) -> Asset:
    """
    Point lookup by (id, visibility).

    An asset that exists under the other visibility is not found.
    """
    return _read_asset(metadata_store, asset_id, normalize_visibility(visibility))


@router.put("/files/{asset_id}", response_model=Asset)
def update_asset(
    asset_id: str = Path(..., description="The asset id"),
    payload: Optional[UpdateAssetRequest] = Body(None),
    visibility: Optional[str] = Query(None, description="Partition of the asset, if not in the body"),
    metadata_store: MetadataStore = Depends(get_metadata_store),
) -> Asset:
    """
    Change an asset's title and refresh ``updatedAt``.

    Visibility only locates the record; it cannot be changed here.
    """
    asset_visibility = _require_visibility(payload.visibility if payload else None, visibility)
    asset = _read_asset(metadata_store, asset_id, asset_visibility)

    if payload is not None and payload.title and payload.title.strip():
        asset.title = payload.title.strip()
    asset.updated_at = next_timestamp(asset.updated_at)

    metadata_store.replace(asset_id, asset_visibility.value, asset.model_dump(by_alias=True))
    logger.info(f"Updated asset {asset_id} ({asset_visibility.value})")
    return asset


@router.delete("/files/{asset_id}", response_model=DeleteAssetResponse)
def delete_asset(
    asset_id: str = Path(..., description="The asset id"),
    visibility: Optional[str] = Query(None, description="Partition of the asset"),
    object_store: ObjectStore = Depends(get_object_store),
    metadata_store: MetadataStore = Depends(get_metadata_store),
) -> DeleteAssetResponse:
    """
    Delete the metadata document, then the blob.

    The blob delete is best effort: once the metadata is gone the request
    succeeds, and a failed blob delete is only logged.
    """
    asset_visibility = _require_visibility(visibility)
    asset = _read_asset(metadata_store, asset_id, asset_visibility)

    metadata_store.delete(asset_id, asset_visibility.value)
    logger.info(f"Deleted asset {asset_id} ({asset_visibility.value})")

    if asset.blob_name:
        try:
            object_store.delete_blob_if_exists(asset.blob_name)
        except DependencyError as e:
            logger.warning(f"Blob {asset.blob_name} of deleted asset {asset_id} was left behind: {e.message}")

    return DeleteAssetResponse(deleted=True, id=asset_id)
