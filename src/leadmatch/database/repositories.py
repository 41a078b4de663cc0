"""
Repositorios para operaciones en Supabase.

Cada repositorio maneja una tabla/entidad específica. Todas las
consultas quedan acotadas a una agencia (tenant).
"""

from datetime import datetime
from typing import Optional

import structlog
from tenacity import retry, stop_after_attempt, wait_exponential

from leadmatch.database.supabase_client import get_supabase_client, SupabaseClient
from leadmatch.models import Alert

logger = structlog.get_logger()


class BaseRepository:
    """Clase base para repositorios."""

    def __init__(self, client: Optional[SupabaseClient] = None):
        self._client = client or get_supabase_client()

    @property
    def client(self) -> SupabaseClient:
        return self._client


class PropertyRepository(BaseRepository):
    """Repositorio para el inventario de propiedades."""

    TABLE = "properties"

    def get_by_id(self, property_id: str) -> Optional[dict]:
        """Obtiene una propiedad por su ID."""
        response = (
            self.client.table(self.TABLE)
            .select("*")
            .eq("id", property_id)
            .limit(1)
            .execute()
        )
        return response.data[0] if response.data else None

    def find_recent_duplicates(
        self,
        agency_id: str,
        address: Optional[str],
        price: float,
        since: datetime,
        seller_phone: Optional[str] = None,
        exclude_id: Optional[str] = None,
    ) -> list[dict]:
        """
        Candidatas a duplicado ingresadas desde `since` (inclusive).

        Busca por teléfono del vendedor y por dirección + precio, cada
        criterio solo si el dato está. A lo sumo una fila por criterio:
        alcanza con saber que existe.
        """
        found = []

        if seller_phone:
            query = (
                self.client.table(self.TABLE)
                .select("*")
                .eq("agency_id", agency_id)
                .eq("seller_phone", seller_phone)
                .gte("created_at", since.isoformat())
            )
            if exclude_id:
                query = query.neq("id", exclude_id)
            found.extend(query.limit(1).execute().data)

        if address:
            query = (
                self.client.table(self.TABLE)
                .select("*")
                .eq("agency_id", agency_id)
                .eq("address", address)
                .eq("price", price)
                .gte("created_at", since.isoformat())
            )
            if exclude_id:
                query = query.neq("id", exclude_id)
            found.extend(query.limit(1).execute().data)

        return found

    def get_active(self, agency_id: str) -> list[dict]:
        """Obtiene el inventario activo de una agencia."""
        response = (
            self.client.table(self.TABLE)
            .select("*")
            .eq("agency_id", agency_id)
            .eq("status", "active")
            .execute()
        )
        return response.data


class LeadRepository(BaseRepository):
    """Repositorio para leads."""

    TABLE = "leads"

    def get_by_agency(self, agency_id: str) -> list[dict]:
        """
        Obtiene todos los leads de una agencia.

        El filtro de estado y antigüedad lo aplica el motor,
        no la consulta.
        """
        response = (
            self.client.table(self.TABLE)
            .select("*")
            .eq("agency_id", agency_id)
            .execute()
        )
        return response.data


class AlertRepository(BaseRepository):
    """Repositorio para alertas in-app."""

    TABLE = "alerts"

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def create_many(self, alerts: list[Alert]) -> list[dict]:
        """
        Guarda un lote de alertas en una sola operación.

        Upsert por (property_id, lead_id): si un reintento llega después
        de un insert que sí se aplicó, no se duplican alertas.

        Returns:
            Los registros guardados
        """
        if not alerts:
            return []

        data = [alert.to_db_dict() for alert in alerts]
        response = (
            self.client.table(self.TABLE)
            .upsert(data, on_conflict="property_id,lead_id")
            .execute()
        )
        logger.info(
            "Alertas creadas",
            count=len(data),
            property_id=alerts[0].property_id,
        )
        return response.data
