# app/modules/affiliations/service.py
import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from fastapi import UploadFile
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.config.settings import settings
from app.core.auth.permissions import Role, has_global_scope
from app.core.auth.schemas import CurrentUser
from app.core.exceptions import (
    ConflictError, ForbiddenError, InternalError, InvalidStateError,
    NotFoundError, ValidationError
)
from app.shared.database.models import Affiliation
from app.shared.services.media_storage import MediaStorage
from app.shared.services.pdf_renderer import render_affiliation_pdf
from .repository import AffiliationRepository, SORT_COLUMNS
from .schemas import (
    AffiliationCreate, AffiliationUpdate, AffiliationDetail, AffiliationListItem,
    AffiliationListResponse, FotoResponse, GeoLocation, StatusChangeResponse
)
from .workflow import (
    AffiliationStatus, INITIAL_STATUS, REVIEW_OUTCOMES, is_editable, required_source
)

logger = logging.getLogger(__name__)

DEFAULT_SORT = "createdAt"

# Numeric(12, 2)
MAX_TOTAL = Decimal("1e10")


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_total(value: Any) -> Optional[Decimal]:
    """Total de la ficha a partir del valor cargado en el formulario"""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValidationError("El total de la ficha debe ser numérico.")
    try:
        total = Decimal(str(value).strip())
        if not total.is_finite():
            raise ValidationError("El total de la ficha debe ser numérico.")
        if abs(total) >= MAX_TOTAL:
            raise ValidationError("El total de la ficha excede el máximo permitido.")
        return total.quantize(Decimal("0.01"))
    except InvalidOperation:
        raise ValidationError("El total de la ficha debe ser numérico.")


def promote_fields(form_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Campos indexados que se copian de form_data en cada escritura.
    Los faltantes quedan en None.
    """
    apellido = _clean(form_data.get("apellidoTitular"))
    nombre = _clean(form_data.get("nombreTitular"))
    titular_nombre = f"{apellido or ''}, {nombre or ''}" if (apellido or nombre) else None

    return {
        "titular_nombre": titular_nombre,
        "titular_dni": _clean(form_data.get("dniTitular")),
        "plan": _clean(form_data.get("plan")),
        "empresa": _clean(form_data.get("empresa")),
        "total": parse_total(form_data.get("total")),
    }


def _geo_values(payload: GeoLocation) -> Dict[str, Optional[float]]:
    return {
        "latitud": payload.latitud,
        "longitud": payload.longitud,
        "domicilio_latitud": payload.domicilio_latitud,
        "domicilio_longitud": payload.domicilio_longitud,
    }


def _as_float(value: Optional[Decimal]) -> Optional[float]:
    return float(value) if value is not None else None


class AffiliationService:
    """
    Ciclo de vida y consultas de fichas de afiliación
    """

    def __init__(self, db: Session):
        self.db = db
        self.repository = AffiliationRepository(db)

    # ==================== ALTA Y EDICIÓN ====================

    def create_affiliation(self, payload: AffiliationCreate, actor: CurrentUser,
                           numero_solicitud: Any = None) -> Affiliation:
        """
        Crear una ficha en estado Abierta.

        Con `numero_solicitud` la ficha se inserta ya Presentada, en un único
        INSERT; un número en blanco se rechaza antes de escribir.
        """
        form_data = dict(payload.form_data)
        status = INITIAL_STATUS

        if numero_solicitud is not None:
            numero = _clean(numero_solicitud)
            if not numero:
                raise ValidationError("El número de solicitud es obligatorio.")
            form_data["numeroSolicitud"] = numero
            status = AffiliationStatus.PRESENTADO

        promoted = self._promote_and_check(form_data)

        affiliation_data = {
            "user_id": actor.id,
            "form_data": form_data,
            "status": status.value,
            **promoted,
            **_geo_values(payload),
        }

        try:
            affiliation = self.repository.create(affiliation_data)
        except IntegrityError:
            raise ValidationError("La ficha hace referencia a un plan o usuario inexistente.")

        logger.info(f"📝 Ficha {affiliation.id} creada ({status.value}) por usuario {actor.id}")
        return affiliation

    def update_affiliation(self, affiliation_id: int, payload: AffiliationUpdate,
                           actor: CurrentUser) -> None:
        """Reemplazar form_data y geolocalización de una ficha Abierta"""
        affiliation = self._get_for_write(affiliation_id, actor)
        current = AffiliationStatus(affiliation.status)

        if not is_editable(current):
            raise InvalidStateError(
                f"Solo se pueden editar fichas en estado '{AffiliationStatus.ABIERTA.value}'.",
                extra={"currentStatus": current.value}
            )

        promoted = self._promote_and_check(payload.form_data)
        values = {"form_data": payload.form_data, **promoted, **_geo_values(payload)}

        rows = self._conditional_update(affiliation_id, AffiliationStatus.ABIERTA, values)
        if rows == 0:
            self._raise_not_in_status(affiliation_id, AffiliationStatus.ABIERTA)

        logger.info(f"✏️ Ficha {affiliation_id} actualizada por usuario {actor.id}")

    # ==================== TRANSICIONES ====================

    def submit_affiliation(self, affiliation_id: int, numero_solicitud: Any,
                           actor: CurrentUser) -> str:
        """Abierta -> Presentado, registrando el número de solicitud"""
        numero = _clean(numero_solicitud)
        if not numero:
            raise ValidationError("El número de solicitud es obligatorio.")

        affiliation = self._get_for_write(affiliation_id, actor)
        source = required_source(AffiliationStatus.PRESENTADO)

        form_data = dict(affiliation.form_data or {})
        form_data["numeroSolicitud"] = numero

        # form_data se leyó antes: solo se escribe si nadie editó la ficha desde entonces
        rows = self._conditional_update(affiliation_id, source, {
            "form_data": form_data,
            "status": AffiliationStatus.PRESENTADO.value,
        }, expected_version=affiliation.version)
        if rows == 0:
            self._raise_not_in_status(affiliation_id, source)

        logger.info(f"📨 Ficha {affiliation_id} presentada (solicitud {numero}) por usuario {actor.id}")
        return numero

    def change_status(self, affiliation_id: int, new_status: Optional[str],
                      motivo: Optional[str], actor: CurrentUser) -> StatusChangeResponse:
        """Presentado -> Aprobado | Rechazado"""
        try:
            target = AffiliationStatus(new_status)
        except ValueError:
            target = None

        if target not in REVIEW_OUTCOMES:
            raise ValidationError(
                f"El nuevo estado debe ser '{AffiliationStatus.APROBADO.value}' "
                f"o '{AffiliationStatus.RECHAZADO.value}'."
            )

        reason = _clean(motivo) if target == AffiliationStatus.RECHAZADO else None
        if target == AffiliationStatus.RECHAZADO and not reason:
            raise ValidationError("El motivo de rechazo es obligatorio.")

        source = required_source(target)
        timestamp = datetime.now()

        rows = self._conditional_update(affiliation_id, source, {
            "status": target.value,
            "status_change_user_id": actor.id,
            "status_change_timestamp": timestamp,
            "rechazo_motivo": reason,
        })
        if rows == 0:
            self._raise_not_in_status(affiliation_id, source)

        logger.info(f"✅ Ficha {affiliation_id} -> {target.value} por usuario {actor.id}")
        return StatusChangeResponse(new_status=target, timestamp=timestamp, reason=reason)

    # ==================== CONSULTAS ====================

    def get_affiliation(self, affiliation_id: int, viewer: CurrentUser) -> Affiliation:
        affiliation = self.repository.get_by_id(affiliation_id)
        if not affiliation:
            raise NotFoundError("Afiliación no encontrada.")

        if not has_global_scope(viewer.role) and affiliation.user_id != viewer.id:
            raise ForbiddenError("No tienes permiso para ver esta afiliación.")

        return affiliation

    def get_affiliation_detail(self, affiliation_id: int, viewer: CurrentUser,
                               storage: Optional[MediaStorage] = None) -> AffiliationDetail:
        affiliation = self.get_affiliation(affiliation_id, viewer)
        return self._build_detail(affiliation, storage)

    def list_affiliations(
        self,
        viewer: CurrentUser,
        search: Optional[str] = None,
        sort_by: Optional[str] = None,
        descending: Optional[bool] = None,
        page: int = 1,
        rows_per_page: int = 0
    ) -> AffiliationListResponse:
        """
        Listado paginado; rows_per_page = 0 devuelve todas las filas.
        """
        sort_key = sort_by or DEFAULT_SORT
        if sort_key not in SORT_COLUMNS:
            raise ValidationError(
                f"No se puede ordenar por '{sort_by}'. Opciones: {', '.join(SORT_COLUMNS)}."
            )
        if descending is None:
            descending = sort_key == DEFAULT_SORT

        owner_id = None if has_global_scope(viewer.role) else viewer.id
        offset = (page - 1) * rows_per_page if rows_per_page else 0

        rows, total_count = self.repository.list_affiliations(
            user_id=owner_id,
            search=_clean(search),
            sort_key=sort_key,
            descending=descending,
            offset=offset,
            limit=rows_per_page or None
        )

        return AffiliationListResponse(
            rows=[
                AffiliationListItem(
                    id=a.id,
                    user_id=a.user_id,
                    titular_nombre=a.titular_nombre,
                    titular_dni=a.titular_dni,
                    plan=a.plan,
                    total=_as_float(a.total),
                    status=a.status,
                    fecha_creacion=a.fecha_creacion,
                    vendor_name=vendor_name
                ) for a, vendor_name in rows
            ],
            total_count=total_count
        )

    # ==================== DOCUMENTOS Y FOTOS ====================

    def render_pdf(self, affiliation_id: int, viewer: CurrentUser) -> bytes:
        detail = self.get_affiliation_detail(affiliation_id, viewer)

        summary = [
            ("Estado", detail.status.value),
            ("Fecha de creación", detail.fecha_creacion),
            ("Vendedor", detail.vendor_name),
            ("Titular", detail.titular_nombre),
            ("DNI", detail.titular_dni),
            ("Plan", detail.plan_label or detail.plan),
            ("Empresa", detail.empresa_label or detail.empresa),
            ("Total", detail.total),
        ]
        if detail.status == AffiliationStatus.RECHAZADO:
            summary.append(("Motivo de rechazo", detail.rechazo_motivo))

        return render_affiliation_pdf(detail.id, summary, detail.form_data)

    async def upload_foto(
        self,
        affiliation_id: int,
        foto: UploadFile,
        descripcion: Optional[str],
        actor: CurrentUser,
        storage: MediaStorage
    ) -> FotoResponse:
        """Subir una foto al almacenamiento externo y registrar sus metadatos"""
        try:
            self._get_for_write(affiliation_id, actor)

            if foto.content_type not in settings.allowed_image_formats:
                raise ValidationError(
                    f"Formato de imagen no permitido: {foto.content_type}."
                )

            foto.file.seek(0, 2)
            size = foto.file.tell()
            foto.file.seek(0)
            if size == 0:
                raise ValidationError("El archivo está vacío.")
            if size > settings.max_image_size:
                raise ValidationError(
                    f"La imagen supera el tamaño máximo de {settings.max_image_size // (1024 * 1024)}MB."
                )

            try:
                uploaded = storage.upload(
                    foto.file,
                    folder=f"{settings.cloudinary_folder}/affiliations/{affiliation_id}"
                )
            except Exception as e:
                logger.error(f"❌ Error subiendo foto de la ficha {affiliation_id}: {e}")
                raise InternalError(f"Error al subir la foto: {e}")
        finally:
            await foto.close()

        try:
            record = self.repository.add_foto(
                affiliation_id=affiliation_id,
                public_id=uploaded["public_id"],
                formato=uploaded.get("format"),
                descripcion=_clean(descripcion)
            )
        except SQLAlchemyError:
            # Sin fila de metadatos la imagen remota queda inaccesible
            storage.delete(uploaded["public_id"])
            raise

        return FotoResponse(
            id=record.id,
            descripcion=record.descripcion,
            fecha_subida=record.fecha_subida,
            url=storage.signed_url(record.public_id, record.formato)
        )

    # ==================== HELPERS ====================

    def _promote_and_check(self, form_data: Dict[str, Any]) -> Dict[str, Any]:
        promoted = promote_fields(form_data)
        if promoted["plan"] and not self.repository.plan_exists(promoted["plan"]):
            raise ValidationError(f"El plan '{promoted['plan']}' no existe.")
        return promoted

    def _get_for_write(self, affiliation_id: int, actor: CurrentUser) -> Affiliation:
        """Ficha existente sobre la que el actor puede escribir"""
        affiliation = self.repository.get_by_id(affiliation_id)
        if not affiliation:
            raise NotFoundError("Afiliación no encontrada.")

        if actor.role == Role.VENDEDOR and affiliation.user_id != actor.id:
            raise ForbiddenError("Solo puedes modificar tus propias fichas.")

        return affiliation

    def _conditional_update(self, affiliation_id: int, expected: AffiliationStatus,
                            values: Dict[str, Any], expected_version: Optional[int] = None) -> int:
        try:
            return self.repository.update_if_status(
                affiliation_id, expected.value, values, expected_version=expected_version
            )
        except IntegrityError:
            raise ConflictError("La ficha hace referencia a datos inexistentes.")

    def _raise_not_in_status(self, affiliation_id: int, expected: AffiliationStatus):
        """Explicar por qué un UPDATE condicional no afectó filas"""
        current = self.repository.get_status(affiliation_id)
        if current is None:
            raise NotFoundError("Afiliación no encontrada.")
        if current == expected.value:
            raise ConflictError(
                "La ficha fue modificada por otro usuario. Vuelve a intentarlo.",
                extra={"currentStatus": current}
            )
        raise InvalidStateError(
            f"La ficha está en estado '{current}' y la operación requiere '{expected.value}'.",
            extra={"currentStatus": current}
        )

    def _build_detail(self, affiliation: Affiliation,
                      storage: Optional[MediaStorage]) -> AffiliationDetail:
        return AffiliationDetail(
            id=affiliation.id,
            user_id=affiliation.user_id,
            vendor_name=affiliation.vendor.full_name if affiliation.vendor else None,
            form_data=affiliation.form_data or {},
            titular_nombre=affiliation.titular_nombre,
            titular_dni=affiliation.titular_dni,
            plan=affiliation.plan,
            plan_label=self.repository.get_plan_label(affiliation.plan),
            empresa=affiliation.empresa,
            empresa_label=self.repository.get_empresa_label(affiliation.empresa),
            total=_as_float(affiliation.total),
            status=affiliation.status,
            latitud=affiliation.latitud,
            longitud=affiliation.longitud,
            domicilio_latitud=affiliation.domicilio_latitud,
            domicilio_longitud=affiliation.domicilio_longitud,
            fecha_creacion=affiliation.fecha_creacion,
            status_change_user_id=affiliation.status_change_user_id,
            status_change_user_name=(
                affiliation.status_change_user.full_name
                if affiliation.status_change_user else None
            ),
            status_change_timestamp=affiliation.status_change_timestamp,
            rechazo_motivo=affiliation.rechazo_motivo,
            fotos=[
                FotoResponse(
                    id=f.id,
                    descripcion=f.descripcion,
                    fecha_subida=f.fecha_subida,
                    url=storage.signed_url(f.public_id, f.formato) if storage else None
                ) for f in affiliation.fotos
            ]
        )
