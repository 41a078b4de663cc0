"""
Parámetros de negocio del matching.

El motor puro no lee settings: recibe una MatchingPolicy. La capa de
servicio la construye desde la configuración con from_settings().
"""

from pydantic import BaseModel, ConfigDict, Field

from leadmatch.config import CLOSED_LEAD_STATUSES, Settings


class MatchingPolicy(BaseModel):
    """Tolerancias y ventanas de tiempo del motor de matching."""

    model_config = ConfigDict(frozen=True)

    dedup_window_days: int = Field(14, ge=0)
    stale_lead_months: int = Field(6, ge=0)
    price_margin: float = Field(1.07, ge=1.0)
    rooms_tolerance: float = Field(0.5, ge=0.0)
    baseline_score: int = Field(50, ge=0, le=100)
    closed_statuses: frozenset[str] = CLOSED_LEAD_STATUSES

    @classmethod
    def from_settings(cls, settings: Settings) -> "MatchingPolicy":
        return cls(
            dedup_window_days=settings.dedup_window_days,
            stale_lead_months=settings.stale_lead_months,
            price_margin=settings.price_margin,
            rooms_tolerance=settings.rooms_tolerance,
            baseline_score=settings.baseline_score,
        )


DEFAULT_POLICY = MatchingPolicy()
