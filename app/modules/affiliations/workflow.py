# app/modules/affiliations/workflow.py
"""
Ciclo de vida de una ficha.

    Abierta --present--> Presentado --approve--> Aprobado
                                    --reject---> Rechazado

Aprobado y Rechazado son estados finales.
"""
from enum import Enum
from typing import Dict, FrozenSet


class AffiliationStatus(str, Enum):
    ABIERTA = "Abierta"
    PRESENTADO = "Presentado"
    APROBADO = "Aprobado"
    RECHAZADO = "Rechazado"


INITIAL_STATUS = AffiliationStatus.ABIERTA

TRANSITIONS: Dict[AffiliationStatus, FrozenSet[AffiliationStatus]] = {
    AffiliationStatus.ABIERTA: frozenset({AffiliationStatus.PRESENTADO}),
    AffiliationStatus.PRESENTADO: frozenset({AffiliationStatus.APROBADO, AffiliationStatus.RECHAZADO}),
    AffiliationStatus.APROBADO: frozenset(),
    AffiliationStatus.RECHAZADO: frozenset(),
}

# Estados de destino válidos para la revisión de un supervisor
REVIEW_OUTCOMES = TRANSITIONS[AffiliationStatus.PRESENTADO]

PENDING_STATUSES = frozenset({AffiliationStatus.ABIERTA, AffiliationStatus.PRESENTADO})


def can_transition(current: AffiliationStatus, target: AffiliationStatus) -> bool:
    return target in TRANSITIONS.get(current, frozenset())


def is_terminal(status: AffiliationStatus) -> bool:
    return not TRANSITIONS.get(status)


def is_editable(status: AffiliationStatus) -> bool:
    return status == AffiliationStatus.ABIERTA


def required_source(target: AffiliationStatus) -> AffiliationStatus:
    """Único estado desde el que se puede llegar a `target`"""
    sources = [src for src, targets in TRANSITIONS.items() if target in targets]
    if len(sources) != 1:
        raise ValueError(f"El estado {target.value} no tiene un origen único")
    return sources[0]
