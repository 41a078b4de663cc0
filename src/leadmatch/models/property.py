"""
Modelo de Propiedad

Propiedad ingresada por una agencia (manual, import o WhatsApp).
Es de solo lectura para el motor de matching.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from leadmatch.models.base import DocumentModel, as_utc, coerce_timestamp


class PropertyType(str, Enum):
    """Tipo de operación del inmueble."""

    SALE = "sale"
    RENT = "rent"


class PropertyRecord(DocumentModel):
    """
    Fila de propiedad tal como está en el store.

    Todo es opcional: los borradores (ej: WhatsApp) pueden no tener
    dirección, tipo o precio y aun así cuentan para el dedup y para
    la búsqueda de inventario.

    Los amenities son tri-estado: True (tiene), False (no tiene)
    y None (dato desconocido). None nunca equivale a False.
    """

    # Identificadores
    id: Optional[str] = Field(None, description="ID del documento")
    agency_id: Optional[str] = Field(None, description="Agencia (tenant) dueña")

    # Identidad
    address: Optional[str] = Field(None, description="Dirección tal como fue cargada")
    city: Optional[str] = Field(None, description="Ciudad")
    price: Optional[float] = Field(None, description="Precio en la moneda de la agencia")
    type: Optional[PropertyType] = Field(None, description="sale o rent")

    # Atributos opcionales
    rooms: Optional[float] = Field(None, ge=0, description="Ambientes, admite medios")
    seller_phone: Optional[str] = Field(None, description="Teléfono del vendedor")
    status: str = Field("active", description="Estado de publicación")

    # Amenities (tri-estado)
    has_elevator: Optional[bool] = None
    has_parking: Optional[bool] = None
    has_balcony: Optional[bool] = None
    has_safe_room: Optional[bool] = None

    # Metadatos
    created_at: Optional[datetime] = Field(None, description="Fecha de ingreso")

    @field_validator("created_at", mode="before")
    @classmethod
    def _parse_created_at(cls, value):
        return coerce_timestamp(value)

    @field_validator("created_at")
    @classmethod
    def _created_at_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)

    @field_validator("seller_phone", "address", mode="before")
    @classmethod
    def _blank_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("type", mode="before")
    @classmethod
    def _blank_type_is_none(cls, value):
        return value or None

    @field_validator("status", mode="before")
    @classmethod
    def _status_default(cls, value):
        return value or "active"


class Property(PropertyRecord):
    """
    Propiedad candidata a matchear con leads.

    Ciudad y precio son obligatorios: sin ellos no hay matchmaking.
    Dirección y tipo pueden faltar; un tipo desconocido no suma
    puntos de tipo.
    """

    city: str = Field(..., description="Ciudad")
    price: float = Field(..., description="Precio en la moneda de la agencia")
