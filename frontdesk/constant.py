"""Editable per-screen capture configuration."""

from __future__ import annotations

PAYMENT_METHODS: dict[str, str] = {
    "efectivo": "Efectivo",
    "Tarjeta": "Tarjeta",
    "bono": "Bono",
    "digital": "Digital",
    "otro": "Otro",
}

DEFAULT_PAYMENT_METHOD = "efectivo"

FIELD_TIMER_LABELS: dict[str, str] = {
    "arribo": "Arribo",
    "inicioAtencion": "Inicio atención",
    "inicioAtencionCaja": "Inicio atención caja",
    "finPedido": "Fin pedido",
    "inicioPago": "Inicio pago",
    "finPago": "Fin pago",
    "llamado": "Llamado",
    "ocuparMesa": "Ocupar mesa",
    "liberacionMesa": "Liberar mesa",
}

# Table-occupancy timers; governed by the internal-consumption flag.
TABLE_TIMERS: tuple[str, str] = ("ocuparMesa", "liberacionMesa")

PRODUCT_ITEMS: list[str] = ["helados", "copas", "gofres", "bebidas", "crepes"]

ITEM_LABELS: dict[str, str] = {
    "helados": "Helados",
    "copas": "Copas",
    "gofres": "Gofres",
    "bebidas": "Bebidas",
    "crepes": "Crepes",
}

# timer_shape: "single" stamps an item once, "pair" captures start/stop intervals.
# layout: "flat" inlines field timers in the persisted record, "nested" keeps them under "tiempos".
SCREENS: dict[str, dict[str, object]] = {
    "arribo": {
        "title": "Registro de Arribo",
        "field_timers": ["arribo", "inicioAtencionCaja", "finPedido", "finPago"],
        "required_field_timers": ["arribo", "inicioAtencionCaja", "finPedido", "finPago"],
        "stamp_on_create": ["arribo"],
        "items": [],
        "timer_shape": "single",
        "track_quantities": False,
        "table_rules_enabled": False,
        "payment_enabled": True,
        "turn_enabled": False,
        "layout": "flat",
    },
    "productos": {
        "title": "Registro de Productos",
        "field_timers": [],
        "required_field_timers": [],
        "stamp_on_create": [],
        "items": PRODUCT_ITEMS,
        "timer_shape": "pair",
        "track_quantities": False,
        "table_rules_enabled": False,
        "payment_enabled": False,
        "turn_enabled": True,
        "layout": "flat",
    },
    "mesas": {
        "title": "Registro de Mesas",
        "field_timers": ["ocuparMesa", "liberacionMesa"],
        "required_field_timers": [],
        "stamp_on_create": [],
        "items": [],
        "timer_shape": "single",
        "track_quantities": False,
        "table_rules_enabled": True,
        "payment_enabled": False,
        "turn_enabled": True,
        "layout": "flat",
    },
    "servicio": {
        "title": "Registro de Servicio",
        "field_timers": [
            "arribo",
            "inicioAtencion",
            "inicioPago",
            "finPago",
            "llamado",
            "ocuparMesa",
            "liberacionMesa",
        ],
        "required_field_timers": ["arribo", "inicioAtencion", "inicioPago", "finPago", "llamado"],
        "stamp_on_create": [],
        "items": PRODUCT_ITEMS,
        "timer_shape": "single",
        "track_quantities": True,
        "table_rules_enabled": True,
        "payment_enabled": True,
        "turn_enabled": True,
        "layout": "nested",
    },
}
