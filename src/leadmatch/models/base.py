"""
Base común para los documentos del store.

Los documentos llegan del dashboard en camelCase (agencyId, maxBudget)
y de Supabase en snake_case; los modelos aceptan ambos.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class DocumentModel(BaseModel):
    """Modelo base tolerante a alias camelCase y campos extra."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normaliza un datetime a UTC. Los naive se asumen en UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def coerce_timestamp(value: Any) -> Any:
    """
    Acepta timestamps exportados como {"_seconds": ..., "_nanoseconds": ...}.

    Cualquier otro valor se deja para que pydantic lo parsee.
    """
    if isinstance(value, dict):
        seconds = value.get("_seconds", value.get("seconds"))
        if seconds is None:
            return None
        nanos = value.get("_nanoseconds", value.get("nanoseconds")) or 0
        return datetime.fromtimestamp(seconds + nanos / 1e9, tz=timezone.utc)
    if value == "":
        return None
    return value
