from datetime import datetime
from decimal import Decimal
from types import SimpleNamespace

import pytest

from app.modules.dashboard.service import build_dashboard
from conftest import auth_headers, make_affiliation


def _row(status, total=None, plan=None, vendor="Ana", day=1, **geo):
    affiliation = SimpleNamespace(
        id=day,
        status=status,
        total=Decimal(total) if total is not None else None,
        plan=plan,
        titular_nombre="Pérez, Juan",
        fecha_creacion=datetime(2024, 3, day, 10, 0),
        latitud=geo.get("latitud"),
        longitud=geo.get("longitud"),
        domicilio_latitud=geo.get("domicilio_latitud"),
        domicilio_longitud=geo.get("domicilio_longitud"),
    )
    return affiliation, vendor


def test_empty_dashboard():
    kpis = build_dashboard([]).kpis

    assert kpis.total_fichas == 0
    assert kpis.ventas_totales == 0
    assert kpis.ticket_promedio == 0
    assert kpis.tasa_aprobacion == "0%"
    assert kpis.top_vendedor is None
    assert kpis.top_plan is None
    assert kpis.ventas_por_dia == []


def test_counts_add_up_to_total():
    rows = [
        _row("Abierta"), _row("Presentado"), _row("Presentado"),
        _row("Aprobado", "100"), _row("Rechazado"),
    ]
    kpis = build_dashboard(rows).kpis

    assert kpis.total_fichas == 5
    assert kpis.fichas_pendientes == 3
    assert kpis.fichas_abiertas == 1
    assert kpis.fichas_presentadas == 2
    assert kpis.fichas_aprobadas + kpis.fichas_rechazadas + kpis.fichas_pendientes == kpis.total_fichas
    assert kpis.tasa_aprobacion == "20.0%"


def test_revenue_counts_only_approved():
    rows = [
        _row("Aprobado", "100.10"),
        _row("Aprobado", "200.20"),
        _row("Rechazado", "999"),
        _row("Presentado", "999"),
    ]
    kpis = build_dashboard(rows).kpis

    assert kpis.ventas_totales == 300.30
    assert kpis.ticket_promedio == 150.15


def test_rankings_break_ties_alphabetically():
    rows = [
        _row("Aprobado", "1", plan="PLAN_B", vendor="Zoe"),
        _row("Aprobado", "1", plan="PLAN_A", vendor="Ana"),
        _row("Rechazado", plan="PLAN_C", vendor="Carlos"),
    ]
    kpis = build_dashboard(rows).kpis

    assert kpis.top_vendedor.nombre == "Ana"
    assert kpis.top_vendedor.ventas == 1
    assert kpis.top_plan.nombre == "PLAN_A"


def test_daily_series_is_sorted_by_date():
    rows = [_row("Aprobado", "1", day=5), _row("Aprobado", "1", day=2), _row("Aprobado", "1", day=5)]
    series = build_dashboard(rows).kpis.ventas_por_dia

    assert [(d.fecha, d.cantidad) for d in series] == [("2024-03-02", 1), ("2024-03-05", 2)]


def test_locations_need_a_complete_pair():
    rows = [
        _row("Abierta", latitud=-34.6, longitud=-58.4),
        _row("Abierta", domicilio_latitud=-31.4, domicilio_longitud=-64.2),
        _row("Abierta", latitud=-34.6),
        _row("Abierta"),
    ]
    locations = build_dashboard(rows).locations

    assert len(locations) == 2
    assert locations[1].domicilio_latitud == -31.4


# ==================== API ====================

def _dashboard(client, user, **filters):
    body = {"startDate": "2024-03-01", "endDate": "2024-03-31", **filters}
    return client.post("/api/dashboard", json=body, headers=auth_headers(user))


def test_dashboard_totals(client, db_session, vendedor, supervisor):
    for total in (100, 200, 300):
        make_affiliation(db_session, vendedor, status="Aprobado", total=total,
                         fecha_creacion=datetime(2024, 3, 10, 12, 0))
    make_affiliation(db_session, vendedor, status="Presentado", total=50,
                     fecha_creacion=datetime(2024, 3, 11, 12, 0))

    response = _dashboard(client, supervisor)

    assert response.status_code == 200
    kpis = response.json()["kpis"]
    assert kpis["totalFichas"] == 4
    assert kpis["fichasAprobadas"] == 3
    assert kpis["ventasTotales"] == 600
    assert kpis["ticketPromedio"] == 200
    assert kpis["tasaAprobacion"] == "75.0%"
    assert kpis["topVendedor"] == {"nombre": "Ana Vendedora", "ventas": 3}


def test_dashboard_date_range_includes_whole_end_day(client, db_session, vendedor, gerente):
    make_affiliation(db_session, vendedor, fecha_creacion=datetime(2024, 2, 29, 23, 59))
    make_affiliation(db_session, vendedor, fecha_creacion=datetime(2024, 3, 1, 0, 0))
    make_affiliation(db_session, vendedor, fecha_creacion=datetime(2024, 3, 31, 23, 59))
    make_affiliation(db_session, vendedor, fecha_creacion=datetime(2024, 4, 1, 0, 0))

    response = _dashboard(client, gerente)

    assert response.status_code == 200
    assert response.json()["kpis"]["totalFichas"] == 2


def test_dashboard_filters(client, db_session, vendedor, otro_vendedor, supervisor, plan, empresa):
    when = datetime(2024, 3, 15, 9, 0)
    make_affiliation(db_session, vendedor, fecha_creacion=when, plan="PLAN_A",
                     form_data={"medioPago": "Tarjeta"})
    make_affiliation(db_session, vendedor, fecha_creacion=when, empresa="EMP1",
                     form_data={"medioPago": "Efectivo"})
    make_affiliation(db_session, otro_vendedor, fecha_creacion=when,
                     form_data={"medioPago": "Tarjeta"})

    def total(**filters):
        return _dashboard(client, supervisor, **filters).json()["kpis"]["totalFichas"]

    assert total() == 3
    assert total(selectedVendor="Bruno Vendedor") == 1
    assert total(selectedPlan="PLAN_A") == 1
    assert total(selectedMedioPago="Tarjeta") == 2
    assert total(selectedEmpresa="EMP1") == 1
    assert total(selectedVendor="Ana Vendedora", selectedMedioPago="Tarjeta") == 1


def test_dashboard_locations(client, db_session, vendedor, supervisor):
    make_affiliation(db_session, vendedor, fecha_creacion=datetime(2024, 3, 2),
                     latitud=-34.6, longitud=-58.4)
    make_affiliation(db_session, vendedor, fecha_creacion=datetime(2024, 3, 2))

    locations = _dashboard(client, supervisor).json()["locations"]

    assert len(locations) == 1
    assert locations[0]["vendedor"] == "Ana Vendedora"
    assert locations[0]["latitud"] == -34.6


@pytest.mark.parametrize("body", [
    {"endDate": "2024-03-31"},
    {"startDate": "2024-03-01"},
    {},
])
def test_dashboard_requires_both_dates(client, supervisor, body):
    response = client.post("/api/dashboard", json=body, headers=auth_headers(supervisor))
    assert response.status_code == 400
    assert response.json()["message"] == "Las fechas de inicio y fin son obligatorias."


def test_dashboard_rejects_inverted_range(client, supervisor):
    response = _dashboard(client, supervisor, startDate="2024-03-31", endDate="2024-03-01")
    assert response.status_code == 400


def test_vendor_cannot_read_dashboard(client, vendedor):
    assert _dashboard(client, vendedor).status_code == 403


def test_admin_can_read_dashboard(client, admin):
    assert _dashboard(client, admin).status_code == 200
