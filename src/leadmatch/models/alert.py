"""
Modelo de Alerta

Notificación in-app que genera el trigger de matchmaking
cuando una propiedad nueva matchea con un lead.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, Field

ALERT_TYPE_PROPERTY_MATCH = "property_match"
BROADCAST_TARGET = "all"


class Alert(BaseModel):
    """Alerta para un agente (o para toda la agencia)."""

    agency_id: str = Field(..., description="Agencia (tenant)")
    target_agent_id: str = Field(
        BROADCAST_TARGET, description="Agente destinatario o 'all'"
    )
    type: str = Field(ALERT_TYPE_PROPERTY_MATCH, description="Tipo de alerta")
    title: str = Field(..., description="Título visible")
    message: str = Field(..., description="Texto de la alerta")
    link: str = Field(..., description="Ruta del dashboard a abrir")

    # Relaciones
    property_id: str = Field(..., description="FK a la propiedad")
    lead_id: str = Field(..., description="FK al lead")

    # Matching
    match_score: int = Field(..., ge=0, le=100)
    requires_verification: list[str] = Field(default_factory=list)

    is_read: bool = False
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Fecha de creación",
    )

    def to_db_dict(self) -> dict:
        """Convierte a diccionario para inserción en Supabase."""
        return self.model_dump(mode="json")
