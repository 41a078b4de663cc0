"""
Modelo de Lead y Requisitos

Define lo que busca un cliente de la agencia. Los requisitos
alimentan tanto el matching propiedad -> leads como el inverso.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from leadmatch.models.base import DocumentModel, as_utc, coerce_timestamp


class LeadRequirements(DocumentModel):
    """
    Requisitos del lead.

    Un campo vacío o None significa "sin preferencia" y no suma
    ni resta puntos en el scoring.
    """

    # Ubicación y tipo
    desired_city: list[str] = Field(
        default_factory=list, description="Ciudades aceptables"
    )
    property_type: list[str] = Field(
        default_factory=list, description="Tipos aceptables: sale, rent"
    )

    # Precio y tamaño
    max_budget: Optional[float] = Field(None, description="Presupuesto máximo")
    min_rooms: Optional[float] = Field(None, description="Mínimo de ambientes")
    max_rooms: Optional[float] = Field(None, description="Máximo de ambientes")

    # Must-have
    must_have_elevator: bool = False
    must_have_parking: bool = False
    must_have_balcony: bool = False
    must_have_safe_room: bool = False

    @field_validator("desired_city", "property_type", mode="before")
    @classmethod
    def _listify(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            return [value] if value.strip() else []
        return value

    @field_validator(
        "must_have_elevator",
        "must_have_parking",
        "must_have_balcony",
        "must_have_safe_room",
        mode="before",
    )
    @classmethod
    def _none_is_false(cls, value):
        return False if value is None else value


class Lead(DocumentModel):
    """Lead de una agencia con su estado y requisitos."""

    # Identificadores
    id: str = Field("", description="ID del documento")
    agency_id: Optional[str] = Field(None, description="Agencia (tenant)")
    assigned_agent_id: Optional[str] = Field(None, description="Agente asignado")

    # Contacto
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None

    # Estado
    status: str = Field("new", description="new, contacted, meeting_set, lost, ...")

    requirements: LeadRequirements = Field(default_factory=LeadRequirements)

    # Metadatos
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("status", mode="before")
    @classmethod
    def _status_default(cls, value):
        return "" if value is None else value

    @field_validator("requirements", mode="before")
    @classmethod
    def _requirements_default(cls, value):
        return {} if value is None else value

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _parse_timestamps(cls, value):
        return coerce_timestamp(value)

    @field_validator("created_at", "updated_at")
    @classmethod
    def _timestamps_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)

    @property
    def last_activity(self) -> Optional[datetime]:
        """updated_at si existe, si no created_at."""
        return self.updated_at or self.created_at
