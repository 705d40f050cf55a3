# app/modules/affiliations/repository.py
from datetime import datetime
from typing import List, Optional, Dict, Any, Tuple
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import or_, desc, asc
from sqlalchemy.exc import SQLAlchemyError

from app.shared.database.models import Affiliation, AffiliationFoto, User, Plan, Empresa

# Columnas por las que se puede ordenar el listado
SORT_COLUMNS = {
    "name": Affiliation.titular_nombre,
    "plan": Affiliation.plan,
    "total": Affiliation.total,
    "status": Affiliation.status,
    "vendor": User.full_name,
    "createdAt": Affiliation.fecha_creacion,
}


def _escape_like(text: str) -> str:
    """La búsqueda es literal: % y _ no actúan como comodines"""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")

class AffiliationRepository:
    """
    Repositorio de fichas de afiliación
    """

    def __init__(self, db: Session):
        self.db = db

    # ==================== ESCRITURA ====================

    def create(self, affiliation_data: dict) -> Affiliation:
        """Insertar una ficha nueva"""
        try:
            affiliation = Affiliation(**affiliation_data)
            self.db.add(affiliation)
            self.db.commit()
            self.db.refresh(affiliation)
            return affiliation
        except SQLAlchemyError as e:
            self.db.rollback()
            raise e

    def update_if_status(self, affiliation_id: int, expected_status: str, values: Dict[str, Any],
                         expected_version: Optional[int] = None) -> int:
        """
        UPDATE ... WHERE id = ? AND status = ? [AND version = ?]

        Devuelve la cantidad de filas afectadas: 0 significa que la ficha no
        existe, ya no está en `expected_status` o fue modificada desde que se
        leyó `expected_version`.
        """
        query = self.db.query(Affiliation).filter(
            Affiliation.id == affiliation_id,
            Affiliation.status == expected_status
        )
        if expected_version is not None:
            query = query.filter(Affiliation.version == expected_version)

        try:
            rows_updated = query.update(
                {**values, "version": Affiliation.version + 1},
                synchronize_session=False
            )

            self.db.commit()
            return rows_updated
        except SQLAlchemyError as e:
            self.db.rollback()
            raise e

    def add_foto(self, affiliation_id: int, public_id: str, formato: Optional[str],
                 descripcion: Optional[str]) -> AffiliationFoto:
        try:
            foto = AffiliationFoto(
                affiliation_id=affiliation_id,
                public_id=public_id,
                formato=formato,
                descripcion=descripcion
            )
            self.db.add(foto)
            self.db.commit()
            self.db.refresh(foto)
            return foto
        except SQLAlchemyError as e:
            self.db.rollback()
            raise e

    # ==================== LECTURA ====================

    def get_by_id(self, affiliation_id: int) -> Optional[Affiliation]:
        """Obtener ficha con vendedor, revisor y fotos"""
        return self.db.query(Affiliation).options(
            joinedload(Affiliation.vendor),
            joinedload(Affiliation.status_change_user),
            joinedload(Affiliation.fotos)
        ).filter(Affiliation.id == affiliation_id).first()

    def get_status(self, affiliation_id: int) -> Optional[str]:
        return self.db.query(Affiliation.status).filter(
            Affiliation.id == affiliation_id
        ).scalar()

    def list_affiliations(
        self,
        user_id: Optional[int] = None,
        search: Optional[str] = None,
        sort_key: str = "createdAt",
        descending: bool = True,
        offset: int = 0,
        limit: Optional[int] = None
    ) -> Tuple[List[Tuple[Affiliation, str]], int]:
        """
        Listado paginado. `user_id` restringe a las fichas de ese vendedor.
        """
        query = self.db.query(Affiliation, User.full_name).join(
            User, Affiliation.user_id == User.id
        )

        if user_id is not None:
            query = query.filter(Affiliation.user_id == user_id)

        if search:
            pattern = f"%{_escape_like(search)}%"
            query = query.filter(
                or_(
                    Affiliation.titular_nombre.ilike(pattern, escape="\\"),
                    Affiliation.titular_dni.ilike(pattern, escape="\\"),
                    Affiliation.plan.ilike(pattern, escape="\\"),
                    User.full_name.ilike(pattern, escape="\\")
                )
            )

        total_count = query.count()

        order = desc if descending else asc
        query = query.order_by(order(SORT_COLUMNS[sort_key]), order(Affiliation.id))

        if offset:
            query = query.offset(offset)
        if limit:
            query = query.limit(limit)

        return query.all(), total_count

    def get_dashboard_rows(
        self,
        start: datetime,
        end: datetime,
        vendor_name: Optional[str] = None,
        plan: Optional[str] = None,
        medio_pago: Optional[str] = None,
        empresa: Optional[str] = None
    ) -> List[Tuple[Affiliation, str]]:
        """
        Todas las fichas con fecha_creacion en [start, end), sin paginar
        """
        query = self.db.query(Affiliation, User.full_name).join(
            User, Affiliation.user_id == User.id
        ).filter(
            Affiliation.fecha_creacion >= start,
            Affiliation.fecha_creacion < end
        )

        if vendor_name:
            query = query.filter(User.full_name == vendor_name)
        if plan:
            query = query.filter(Affiliation.plan == plan)
        if medio_pago:
            query = query.filter(Affiliation.form_data["medioPago"].as_string() == medio_pago)
        if empresa:
            query = query.filter(Affiliation.empresa == empresa)

        return query.order_by(Affiliation.fecha_creacion, Affiliation.id).all()

    def exists_with_empresa(self, empresa_value: str) -> bool:
        return self.db.query(Affiliation.id).filter(
            Affiliation.empresa == empresa_value
        ).first() is not None

    # ==================== DATOS DE REFERENCIA ====================

    def plan_exists(self, plan_value: str) -> bool:
        return self.db.query(Plan.id).filter(Plan.value == plan_value).first() is not None

    def get_plan_label(self, plan_value: Optional[str]) -> Optional[str]:
        if not plan_value:
            return None
        return self.db.query(Plan.label).filter(Plan.value == plan_value).scalar()

    def get_empresa_label(self, empresa_value: Optional[str]) -> Optional[str]:
        if not empresa_value:
            return None
        return self.db.query(Empresa.label).filter(Empresa.value == empresa_value).scalar()
