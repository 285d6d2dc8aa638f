from dataclasses import replace
from datetime import date

import pytest

from frontdesk.models import PairTimer, Row, SingleTimer, TimerPair
from frontdesk.validation import ACCEPTED, FailureReason, ValidationFailure, build_persisted_payload, validate

MONDAY = date(2024, 3, 4)


@pytest.fixture
def paired_counts(productos):
    """A preparation screen that also tracks quantities."""
    return replace(productos, items=("helados", "copas"), track_quantities=True)


def _servicio_row(**overrides) -> Row:
    base = dict(
        id="r",
        field_timers={
            "arribo": "10:00:00.000",
            "inicioAtencion": "10:01:00.000",
            "inicioPago": "10:02:00.000",
            "finPago": "10:03:00.000",
            "llamado": "10:04:00.000",
            "ocuparMesa": None,
            "liberacionMesa": None,
        },
        item_quantities={"helados": 1, "copas": 0, "gofres": 0, "bebidas": 0, "crepes": 0},
        item_timers={
            "helados": SingleTimer("10:01:30.000"),
            "copas": SingleTimer(),
            "gofres": SingleTimer(),
            "bebidas": SingleTimer(),
            "crepes": SingleTimer(),
        },
    )
    base.update(overrides)
    return Row(**base)


def test_scenario_counted_and_idle_items_pass(paired_counts):
    row = Row(
        id="r",
        item_quantities={"helados": 2, "copas": 0},
        item_timers={
            "helados": PairTimer(pairs=(TimerPair("10:00:00.000", "10:02:00.000"),)),
            "copas": PairTimer(current=None, pairs=()),
        },
    )

    assert validate(row, paired_counts) is ACCEPTED


def test_scenario_missing_required_timer(arribo):
    screen = replace(arribo, field_timers=("arribo", "startAttention"), required_field_timers=("arribo", "startAttention"))
    row = Row(id="r", field_timers={"arribo": "10:00:00.000", "startAttention": None})

    result = validate(row, screen)

    assert isinstance(result, ValidationFailure)
    assert result.reason is FailureReason.MISSING_REQUIRED_TIMERS


@pytest.mark.parametrize(
    ("quantity", "timer", "expected"),
    [
        (2, PairTimer(), FailureReason.QUANTITY_WITHOUT_TIMER),
        (0, PairTimer(pairs=(TimerPair("a", "b"),)), FailureReason.TIMER_WITHOUT_QUANTITY),
        (0, PairTimer(current="a"), FailureReason.TIMER_WITHOUT_QUANTITY),
        (2, PairTimer(pairs=(TimerPair("a", "b"),)), None),
        (0, PairTimer(), None),
    ],
)
def test_quantity_timer_coherence_is_symmetric(paired_counts, quantity, timer, expected):
    # helados always carries a valid pair so only copas decides the outcome.
    row = Row(
        id="r",
        item_quantities={"helados": 1, "copas": quantity},
        item_timers={"helados": PairTimer(pairs=(TimerPair("x", "y"),)), "copas": timer},
    )

    result = validate(row, paired_counts)

    if expected is None:
        assert result is ACCEPTED
    else:
        assert result.reason is expected
        assert result.item == "copas"
        assert "Copas" in result.message


def test_single_shape_coherence(servicio):
    assert validate(_servicio_row(), servicio) is ACCEPTED

    counted_untimed = _servicio_row(item_quantities={"helados": 1, "copas": 1})
    assert validate(counted_untimed, servicio).reason is FailureReason.QUANTITY_WITHOUT_TIMER

    timed_uncounted = _servicio_row(
        item_quantities={"helados": 1}, item_timers={"helados": SingleTimer("t"), "bebidas": SingleTimer("t")}
    )
    result = validate(timed_uncounted, servicio)
    assert result.reason is FailureReason.TIMER_WITHOUT_QUANTITY
    assert result.item == "bebidas"


def test_requires_at_least_one_item(servicio):
    row = _servicio_row(item_quantities={}, item_timers={})

    assert validate(row, servicio).reason is FailureReason.NO_ITEMS


def test_requires_at_least_one_preparation(productos):
    row = Row(id="r", item_timers={item: PairTimer() for item in productos.items})
    assert validate(row, productos).reason is FailureReason.NO_PREPARATION

    running_only = Row(id="r", item_timers={"helados": PairTimer(current="t")})
    assert validate(running_only, productos).reason is FailureReason.NO_PREPARATION

    done = Row(id="r", item_timers={"gofres": PairTimer(pairs=(TimerPair("a", "b"),))})
    assert validate(done, productos) is ACCEPTED


def test_table_rules(mesas):
    stamped = {"ocuparMesa": "12:00:00.000", "liberacionMesa": "12:40:00.000"}
    half = {"ocuparMesa": "12:00:00.000", "liberacionMesa": None}
    empty = {"ocuparMesa": None, "liberacionMesa": None}

    assert validate(Row(id="r", internal_consumption=True, field_timers=stamped), mesas) is ACCEPTED
    assert validate(Row(id="r", internal_consumption=False, field_timers=empty), mesas) is ACCEPTED
    assert (
        validate(Row(id="r", internal_consumption=True, field_timers=half), mesas).reason
        is FailureReason.TABLE_TIMERS_MISSING
    )
    assert (
        validate(Row(id="r", internal_consumption=False, field_timers=half), mesas).reason
        is FailureReason.TABLE_TIMERS_NOT_ALLOWED
    )


def test_table_timers_not_required_on_general_screen(servicio):
    assert validate(_servicio_row(internal_consumption=False), servicio) is ACCEPTED


def test_rules_run_in_order(servicio):
    row = _servicio_row(
        field_timers={"arribo": None},
        item_quantities={},
        internal_consumption=True,
    )

    assert validate(row, servicio).reason is FailureReason.MISSING_REQUIRED_TIMERS


def test_validate_does_not_touch_row(servicio):
    row = _servicio_row(item_quantities={"copas": 3})
    snapshot = replace(row)

    validate(row, servicio)

    assert row == snapshot


def test_payload_flat_arrival(arribo):
    row = Row(
        id="r",
        description="mesa junto a la ventana",
        field_timers={
            "arribo": "10:00:00.000",
            "inicioAtencionCaja": "10:01:00.000",
            "finPedido": "10:02:00.000",
            "finPago": "10:03:00.000",
        },
        payment_method="bono",
        observation="sin azúcar",
        is_editing=True,
    )

    payload = build_persisted_payload(row, arribo, MONDAY)

    assert payload == {
        "diaSemana": "lunes",
        "arribo": "10:00:00.000",
        "inicioAtencionCaja": "10:01:00.000",
        "finPedido": "10:02:00.000",
        "finPago": "10:03:00.000",
        "metodoPago": "bono",
        "observacion": "sin azúcar",
    }


def test_payload_products_lists_pairs_and_drops_turn(productos):
    row = Row(
        id="r",
        assigned_turn="12",
        item_timers={"helados": PairTimer(current="t", pairs=(TimerPair("a", "b"),))},
        observation="",
    )

    payload = build_persisted_payload(row, productos, date(2024, 3, 9))

    assert payload["diaSemana"] == "sábado"
    assert payload["helados"] == [{"inicio": "a", "fin": "b"}]
    assert payload["crepes"] == []
    assert "turnoAsignado" not in payload
    assert "id" not in payload


def test_payload_tables_blank_stamps(mesas):
    row = Row(id="r", field_timers={"ocuparMesa": None, "liberacionMesa": None})

    payload = build_persisted_payload(row, mesas, MONDAY)

    assert payload == {
        "diaSemana": "lunes",
        "consumoInterno": False,
        "ocuparMesa": "",
        "liberacionMesa": "",
        "observacion": "",
    }


def test_payload_nested_service(servicio):
    payload = build_persisted_payload(_servicio_row(), servicio, MONDAY)

    assert payload["tiempos"]["llamado"] == "10:04:00.000"
    assert payload["tiempos"]["ocuparMesa"] == ""
    assert payload["pedido"]["helados"] == {"cantidad": 1, "tiempo": "10:01:30.000"}
    assert payload["pedido"]["copas"] == {"cantidad": 0, "tiempo": None}
    assert payload["metodoPago"] == "efectivo"
    assert "descripcion" not in payload
