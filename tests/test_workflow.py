import pytest

from app.modules.affiliations.workflow import (
    AffiliationStatus, INITIAL_STATUS, REVIEW_OUTCOMES, can_transition,
    is_editable, is_terminal, required_source
)

A = AffiliationStatus


def test_initial_status_is_abierta():
    assert INITIAL_STATUS == A.ABIERTA


@pytest.mark.parametrize("src,dst", [
    (A.ABIERTA, A.PRESENTADO),
    (A.PRESENTADO, A.APROBADO),
    (A.PRESENTADO, A.RECHAZADO),
])
def test_allowed_transitions(src, dst):
    assert can_transition(src, dst)


@pytest.mark.parametrize("src,dst", [
    (A.ABIERTA, A.APROBADO),
    (A.ABIERTA, A.RECHAZADO),
    (A.PRESENTADO, A.ABIERTA),
    (A.APROBADO, A.RECHAZADO),
    (A.RECHAZADO, A.APROBADO),
    (A.APROBADO, A.PRESENTADO),
    (A.RECHAZADO, A.ABIERTA),
])
def test_forbidden_transitions(src, dst):
    assert not can_transition(src, dst)


def test_terminal_states_have_no_exits():
    assert is_terminal(A.APROBADO)
    assert is_terminal(A.RECHAZADO)
    assert not is_terminal(A.ABIERTA)
    assert not is_terminal(A.PRESENTADO)
    for target in A:
        assert not can_transition(A.APROBADO, target)
        assert not can_transition(A.RECHAZADO, target)


def test_only_drafts_are_editable():
    assert is_editable(A.ABIERTA)
    assert not any(is_editable(s) for s in (A.PRESENTADO, A.APROBADO, A.RECHAZADO))


def test_required_source():
    assert required_source(A.PRESENTADO) == A.ABIERTA
    assert required_source(A.APROBADO) == A.PRESENTADO
    assert required_source(A.RECHAZADO) == A.PRESENTADO
    with pytest.raises(ValueError):
        required_source(A.ABIERTA)


def test_review_outcomes():
    assert REVIEW_OUTCOMES == {A.APROBADO, A.RECHAZADO}
