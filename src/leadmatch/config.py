"""
Configuración centralizada del sistema.
Carga variables de entorno y define settings globales.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# config.py -> leadmatch/ -> src/ -> raíz del proyecto
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Configuración principal de la aplicación."""

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Supabase
    supabase_url: str = Field(..., description="URL del proyecto Supabase")
    supabase_key: str = Field(..., description="Anon key de Supabase")
    supabase_service_key: Optional[str] = Field(
        None, description="Service role key para operaciones admin"
    )

    # Matching
    dedup_window_days: int = Field(
        14, ge=0, description="Ventana para considerar duplicada una propiedad (días)"
    )
    stale_lead_months: int = Field(
        6, ge=0, description="Meses sin actividad tras los cuales un lead se ignora"
    )
    price_margin: float = Field(
        1.07, ge=1.0, description="Margen de negociación sobre el presupuesto máximo"
    )
    rooms_tolerance: float = Field(
        0.5, ge=0.0, description="Tolerancia de ambientes (medios ambientes)"
    )
    baseline_score: int = Field(
        50, ge=0, le=100, description="Score para leads sin requisitos puntuables"
    )

    # Logging
    log_level: str = Field("INFO", description="Nivel de logging")


@lru_cache
def get_settings() -> Settings:
    """Obtiene la configuración cacheada."""
    return Settings()


# Constantes del sistema
CLOSED_LEAD_STATUSES = frozenset({"lost", "won", "not_relevant", "bought"})
