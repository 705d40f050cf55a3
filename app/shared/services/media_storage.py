# app/shared/services/media_storage.py
import logging
import time
from functools import lru_cache
from typing import Any, BinaryIO, Dict, Optional

import cloudinary
import cloudinary.uploader
import cloudinary.utils

from app.config.settings import settings

logger = logging.getLogger(__name__)


class MediaStorage:
    """
    Cliente del almacenamiento externo de fotos (Cloudinary).

    Las fotos se suben con delivery type "authenticated": solo se pueden ver
    con una URL firmada de vigencia limitada.
    """

    DELIVERY_TYPE = "authenticated"

    def __init__(
        self,
        cloud_name: Optional[str],
        api_key: Optional[str],
        api_secret: Optional[str],
        url_ttl_seconds: int = 3600
    ):
        self.url_ttl_seconds = url_ttl_seconds
        self.configured = bool(cloud_name and api_key and api_secret)
        if self.configured:
            cloudinary.config(
                cloud_name=cloud_name,
                api_key=api_key,
                api_secret=api_secret,
                secure=True
            )
        else:
            logger.warning("⚠️ Cloudinary no configurado: la subida de fotos no estará disponible")

    def upload(self, fileobj: BinaryIO, folder: str) -> Dict[str, Any]:
        """Subir una imagen y devolver {public_id, format}"""
        if not self.configured:
            raise RuntimeError("Cloudinary no configurado")

        result = cloudinary.uploader.upload(
            fileobj,
            folder=folder,
            resource_type="image",
            type=self.DELIVERY_TYPE
        )
        logger.info(f"📷 Foto subida a Cloudinary: {result.get('public_id')}")
        return {
            "public_id": result["public_id"],
            "format": result.get("format")
        }

    def delete(self, public_id: str) -> None:
        """
        Borrar una imagen ya subida. Se usa para limpiar cuando no se pudo
        registrar la foto; un fallo aquí se loguea y no reemplaza al error original.
        """
        if not self.configured:
            return

        try:
            cloudinary.uploader.destroy(
                public_id,
                resource_type="image",
                type=self.DELIVERY_TYPE,
                invalidate=True
            )
            logger.info(f"🗑️ Foto eliminada de Cloudinary: {public_id}")
        except Exception as e:
            logger.error(f"❌ No se pudo eliminar la foto {public_id} de Cloudinary: {e}")

    def signed_url(self, public_id: str, file_format: Optional[str]) -> Optional[str]:
        """URL temporal de descarga; None si el almacenamiento no está configurado"""
        if not self.configured:
            return None

        return cloudinary.utils.private_download_url(
            public_id,
            file_format or "jpg",
            resource_type="image",
            type=self.DELIVERY_TYPE,
            expires_at=int(time.time()) + self.url_ttl_seconds
        )


@lru_cache()
def get_media_storage() -> MediaStorage:
    """Dependency de FastAPI; se reemplaza en los tests"""
    return MediaStorage(
        cloud_name=settings.cloudinary_cloud_name,
        api_key=settings.cloudinary_api_key,
        api_secret=settings.cloudinary_api_secret,
        url_ttl_seconds=settings.signed_url_ttl_seconds
    )
