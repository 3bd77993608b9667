"""
Tool catalog
============

Static, JSON-schema shaped descriptions of every tool the server exposes.
Tool and argument names are Spanish because they are the wire contract the
MI PANA clients already speak; ``tools/list`` returns this list verbatim.
"""

from __future__ import annotations

from typing import Any

_POINT = {
    "type": "object",
    "properties": {
        "latitud": {"type": "number"},
        "longitud": {"type": "number"},
    },
    "required": ["latitud", "longitud"],
}

_ADDRESSED_POINT = {
    "type": "object",
    "properties": {
        "latitud": {"type": "number"},
        "longitud": {"type": "number"},
        "direccion": {"type": "string"},
    },
    "required": ["latitud", "longitud", "direccion"],
}


TOOL_CATALOG: list[dict[str, Any]] = [
    {
        "name": "buscar_conductores_disponibles",
        "description": "Busca conductores disponibles en un radio específico alrededor de una ubicación",
        "inputSchema": {
            "type": "object",
            "properties": {
                "latitud": {"type": "number", "description": "Latitud del punto de búsqueda"},
                "longitud": {"type": "number", "description": "Longitud del punto de búsqueda"},
                "radio_km": {
                    "type": "number",
                    "description": "Radio de búsqueda en kilómetros (por defecto: 5)",
                    "default": 5,
                },
            },
            "required": ["latitud", "longitud"],
        },
    },
    {
        "name": "crear_viaje",
        "description": "Crea una nueva solicitud de viaje con origen y destino",
        "inputSchema": {
            "type": "object",
            "properties": {
                "user_id": {"type": "string", "description": "ID del usuario que solicita el viaje"},
                "origen": _ADDRESSED_POINT,
                "destino": _ADDRESSED_POINT,
                "metodo_pago": {
                    "type": "string",
                    "enum": ["efectivo", "transferencia", "pago_movil"],
                    "description": "Método de pago para el viaje",
                },
            },
            "required": ["user_id", "origen", "destino", "metodo_pago"],
        },
    },
    {
        "name": "calcular_tarifa",
        "description": "Calcula la tarifa estimada de un viaje basado en distancia y duración",
        "inputSchema": {
            "type": "object",
            "properties": {
                "distancia_km": {"type": "number", "description": "Distancia del viaje en kilómetros"},
                "duracion_min": {
                    "type": "number",
                    "description": "Duración estimada del viaje en minutos (opcional)",
                },
                "tipo_servicio": {
                    "type": "string",
                    "enum": ["mototaxi", "el_pana", "el_amigo", "full_pana"],
                    "description": "Tipo de servicio solicitado",
                    "default": "el_pana",
                },
                "moneda": {
                    "type": "string",
                    "enum": ["BS", "USD"],
                    "description": "Moneda para el cálculo (BS o USD)",
                    "default": "BS",
                },
                "multiplicador_demanda": {
                    "type": "number",
                    "description": "Multiplicador por alta demanda (1.0 = normal)",
                    "default": 1.0,
                },
            },
            "required": ["distancia_km"],
        },
    },
    {
        "name": "actualizar_ubicacion_conductor",
        "description": "Actualiza la ubicación en tiempo real de un conductor",
        "inputSchema": {
            "type": "object",
            "properties": {
                "conductor_id": {"type": "string", "description": "ID del conductor"},
                "latitud": {"type": "number", "description": "Latitud actual del conductor"},
                "longitud": {"type": "number", "description": "Longitud actual del conductor"},
                "rumbo": {
                    "type": "number",
                    "description": "Rumbo/dirección del conductor en grados (0-360, opcional)",
                },
            },
            "required": ["conductor_id", "latitud", "longitud"],
        },
    },
    {
        "name": "obtener_estadisticas_conductor",
        "description": "Obtiene estadísticas de rendimiento de un conductor",
        "inputSchema": {
            "type": "object",
            "properties": {
                "conductor_id": {"type": "string", "description": "ID del conductor"},
                "periodo": {
                    "type": "string",
                    "enum": ["today", "week", "month", "all_time"],
                    "description": "Período de tiempo para las estadísticas",
                    "default": "today",
                },
            },
            "required": ["conductor_id"],
        },
    },
    {
        "name": "completar_viaje",
        "description": "Marca un viaje como completado y calcula la tarifa final",
        "inputSchema": {
            "type": "object",
            "properties": {
                "viaje_id": {"type": "string", "description": "ID del viaje a completar"},
                "distancia_real_km": {
                    "type": "number",
                    "description": "Distancia real recorrida en kilómetros",
                },
                "duracion_real_min": {
                    "type": "number",
                    "description": "Duración real del viaje en minutos",
                },
                "calificacion": {
                    "type": "number",
                    "description": "Calificación del pasajero (1-5)",
                    "minimum": 1,
                    "maximum": 5,
                },
            },
            "required": ["viaje_id", "distancia_real_km", "duracion_real_min"],
        },
    },
    {
        "name": "calcular_distancia",
        "description": "Calcula la distancia entre dos puntos geográficos",
        "inputSchema": {
            "type": "object",
            "properties": {
                "origen": _POINT,
                "destino": _POINT,
            },
            "required": ["origen", "destino"],
        },
    },
]

TOOL_NAMES: list[str] = [tool["name"] for tool in TOOL_CATALOG]
