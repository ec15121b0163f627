"""
Routes de publication sur Arweave.

- `POST /api/upload-arweave`: upload d'un fichier (multipart) après contrôle de politique
- `POST /api/publish-metadata`: image (data URI) puis JSON de métadonnées NFT
"""

from fastapi import APIRouter, File, Form, UploadFile

from zodiac_backend.api.schemas import (
    PublishMetadataRequest,
    PublishMetadataResponse,
    UploadResponse,
)
from zodiac_backend.core.container import container
from zodiac_backend.domain.entities import NFTMetadata
from zodiac_backend.domain.errors import InvalidInputError, TooLargeError
from zodiac_backend.domain.publisher import MAX_UPLOAD_BYTES

router = APIRouter(prefix="/api", tags=["publish"])
publisher = container.publisher


@router.post("/upload-arweave", response_model=UploadResponse)
async def upload_arweave(
    file: UploadFile | None = File(None),
    content_type: str | None = Form(None, alias="contentType"),
):
    if file is None:
        raise InvalidInputError("File not found")
    # Lecture bornée: on ne charge pas plus que la limite + 1 octet
    data = await file.read(MAX_UPLOAD_BYTES + 1)
    if len(data) > MAX_UPLOAD_BYTES:
        raise TooLargeError(
            "File too large", details={"max": MAX_UPLOAD_BYTES}
        )
    mime = content_type or file.content_type or ""
    url, tx_id = await publisher.upload(data, mime)
    return UploadResponse(url=url, transaction_id=tx_id)


@router.post("/publish-metadata", response_model=PublishMetadataResponse)
async def publish_metadata(payload: PublishMetadataRequest):
    metadata = NFTMetadata(**payload.model_dump())
    uri, image = await publisher.publish_metadata(metadata)
    return PublishMetadataResponse(uri=uri, image=image)
