# app/modules/dashboard/service.py
import logging
from collections import Counter
from datetime import datetime, time, timedelta
from decimal import Decimal
from typing import Any, Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.exceptions import ValidationError
from app.modules.affiliations.repository import AffiliationRepository
from app.modules.affiliations.workflow import AffiliationStatus, PENDING_STATUSES
from .schemas import (
    DailyCount, DashboardKpis, DashboardLocation, DashboardRequest,
    DashboardResponse, RankingEntry
)

logger = logging.getLogger(__name__)


def _top(counter: Counter) -> Optional[RankingEntry]:
    """Mayor cantidad; empates por orden alfabético"""
    if not counter:
        return None
    nombre, ventas = sorted(counter.items(), key=lambda item: (-item[1], item[0]))[0]
    return RankingEntry(nombre=nombre, ventas=ventas)


def _has_pair(lat: Optional[float], lng: Optional[float]) -> bool:
    return lat is not None and lng is not None


def build_dashboard(rows: Iterable[Tuple[Any, Optional[str]]]) -> DashboardResponse:
    """
    Calcular KPIs y puntos del mapa a partir de pares (ficha, nombre del vendedor)
    """
    status_counts: Counter = Counter()
    approved_by_vendor: Counter = Counter()
    approved_by_plan: Counter = Counter()
    approved_by_day: Counter = Counter()
    revenue = Decimal("0")
    locations: List[DashboardLocation] = []

    for affiliation, vendor_name in rows:
        current = AffiliationStatus(affiliation.status)
        status_counts[current] += 1

        if current == AffiliationStatus.APROBADO:
            revenue += Decimal(affiliation.total or 0)
            if vendor_name:
                approved_by_vendor[vendor_name] += 1
            if affiliation.plan:
                approved_by_plan[affiliation.plan] += 1
            approved_by_day[affiliation.fecha_creacion.date().isoformat()] += 1

        if _has_pair(affiliation.latitud, affiliation.longitud) or \
                _has_pair(affiliation.domicilio_latitud, affiliation.domicilio_longitud):
            locations.append(DashboardLocation(
                id=affiliation.id,
                status=current,
                titular_nombre=affiliation.titular_nombre,
                vendedor=vendor_name,
                latitud=affiliation.latitud,
                longitud=affiliation.longitud,
                domicilio_latitud=affiliation.domicilio_latitud,
                domicilio_longitud=affiliation.domicilio_longitud
            ))

    total = sum(status_counts.values())
    aprobadas = status_counts[AffiliationStatus.APROBADO]
    rechazadas = status_counts[AffiliationStatus.RECHAZADO]
    abiertas = status_counts[AffiliationStatus.ABIERTA]
    presentadas = status_counts[AffiliationStatus.PRESENTADO]

    ticket = revenue / aprobadas if aprobadas else Decimal("0")
    tasa = f"{aprobadas / total * 100:.1f}%" if total else "0%"

    kpis = DashboardKpis(
        total_fichas=total,
        fichas_aprobadas=aprobadas,
        fichas_rechazadas=rechazadas,
        fichas_pendientes=sum(status_counts[s] for s in PENDING_STATUSES),
        fichas_abiertas=abiertas,
        fichas_presentadas=presentadas,
        ventas_totales=round(float(revenue), 2),
        ticket_promedio=round(float(ticket), 2),
        tasa_aprobacion=tasa,
        top_vendedor=_top(approved_by_vendor),
        top_plan=_top(approved_by_plan),
        ventas_por_dia=[
            DailyCount(fecha=day, cantidad=count)
            for day, count in sorted(approved_by_day.items())
        ]
    )

    return DashboardResponse(kpis=kpis, locations=locations)


class DashboardService:
    """
    Tablero de supervisión; lee exclusivamente del repositorio de fichas
    """

    def __init__(self, db: Session):
        self.db = db
        self.repository = AffiliationRepository(db)

    def get_dashboard(self, request: DashboardRequest) -> DashboardResponse:
        if not request.start_date or not request.end_date:
            raise ValidationError("Las fechas de inicio y fin son obligatorias.")
        if request.end_date < request.start_date:
            raise ValidationError("La fecha de fin no puede ser anterior a la de inicio.")

        # El día final se incluye completo
        start = datetime.combine(request.start_date, time.min)
        end = datetime.combine(request.end_date + timedelta(days=1), time.min)

        rows = self.repository.get_dashboard_rows(
            start=start,
            end=end,
            vendor_name=request.selected_vendor,
            plan=request.selected_plan,
            medio_pago=request.selected_medio_pago,
            empresa=request.selected_empresa
        )

        logger.info(
            f"📊 Dashboard {request.start_date} a {request.end_date}: {len(rows)} fichas"
        )
        return build_dashboard(rows)
