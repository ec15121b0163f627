"""Publication de contenu sur Arweave avec contrôle de politique.

Les contrôles (type MIME autorisé, taille maximale) sont faits avant tout appel
réseau. Une soumission par appel, sans retry interne.
"""

from __future__ import annotations

import base64
import binascii
import json
import re

import structlog

from zodiac_backend.app.metrics import STORAGE_UPLOAD_BYTES, STORAGE_UPLOADS
from zodiac_backend.domain.entities import NFTMetadata
from zodiac_backend.domain.errors import (
    InvalidInputError,
    PublishError,
    TooLargeError,
    UnsupportedTypeError,
)
from zodiac_backend.infra.storage.base import StorageClient

log = structlog.get_logger(__name__)

ALLOWED_CONTENT_TYPES = frozenset({"image/png", "image/jpeg", "application/json"})
MAX_UPLOAD_BYTES = 5_120_000
APP_NAME_TAG = "ZodiacAvatars"

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<params>(;[^;,]*)*?),(?P<data>.*)$", re.S)


def normalize_mime(content_type: str) -> str:
    return content_type.split(";")[0].strip().lower()


def check_policy(data: bytes, content_type: str) -> str:
    """Retourne le type MIME normalisé, ou lève si la politique est violée."""
    mime = normalize_mime(content_type)
    if mime not in ALLOWED_CONTENT_TYPES:
        raise UnsupportedTypeError(
            f"Unsupported content type: {content_type}",
            details={"allowed": sorted(ALLOWED_CONTENT_TYPES)},
        )
    if len(data) > MAX_UPLOAD_BYTES:
        raise TooLargeError(
            f"File too large: {len(data)} bytes",
            details={"size": len(data), "max": MAX_UPLOAD_BYTES},
        )
    return mime


def decode_data_uri(uri: str) -> tuple[bytes, str]:
    """Décode une data URI (base64 ou texte) en (octets, type MIME)."""
    match = _DATA_URI_RE.match(uri)
    if not match:
        raise InvalidInputError("Malformed data URI")
    mime = match.group("mime") or "text/plain"
    params = match.group("params") or ""
    payload = match.group("data")
    if ";base64" in params:
        try:
            return base64.b64decode(payload, validate=True), mime
        except (binascii.Error, ValueError) as err:
            raise InvalidInputError("Invalid base64 payload in data URI") from err
    return payload.encode("utf-8"), mime


class ContentPublisher:
    """Dépôt d'images et de documents JSON sur le stockage durable."""

    def __init__(self, storage: StorageClient) -> None:
        self.storage = storage

    async def upload(self, data: bytes, content_type: str) -> tuple[str, str]:
        """Téléverse des octets; retourne (url, transaction_id).

        Raises:
            UnsupportedTypeError: type MIME hors liste autorisée.
            TooLargeError: taille supérieure à MAX_UPLOAD_BYTES.
            StorageNetworkError: service de stockage injoignable ou en erreur.
        """
        try:
            mime = check_policy(data, content_type)
        except PublishError as err:
            label = normalize_mime(content_type) if isinstance(err, TooLargeError) else "other"
            STORAGE_UPLOADS.labels(label, "rejected").inc()
            raise

        tags = {"Content-Type": mime, "App-Name": APP_NAME_TAG}
        try:
            tx_id = await self.storage.submit(data, mime, tags)
        except PublishError:
            STORAGE_UPLOADS.labels(mime, "error").inc()
            raise
        STORAGE_UPLOADS.labels(mime, "ok").inc()
        STORAGE_UPLOAD_BYTES.observe(len(data))
        return self.storage.public_url(tx_id), tx_id

    async def publish_metadata(self, metadata: NFTMetadata) -> tuple[str, str]:
        """Publie l'image (si data URI) puis le JSON de métadonnées.

        Returns:
            (uri du document JSON, url de l'image)
        """
        image_url = metadata.image
        if image_url.startswith("data:"):
            data, mime = decode_data_uri(image_url)
            image_url, _ = await self.upload(data, mime)
            log.info("metadata_image_uploaded", url=image_url, size=len(data))

        final = metadata.model_copy(update={"image": image_url})
        document = json.dumps(final.model_dump(exclude_none=True), indent=2).encode("utf-8")
        uri, _ = await self.upload(document, "application/json")
        log.info("metadata_published", uri=uri, name=metadata.name)
        return uri, image_url
