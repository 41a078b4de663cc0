"""
Motor de matching entre propiedades y leads.

Implementa:
- Dedup: descarta propiedades ya ingresadas en la ventana reciente
- Filtro de leads activos: ignora leads cerrados o sin actividad
- Scoring: puntaje 0-100 por lead con descartes hard
- Trigger: genera una alerta por cada match de una propiedad nueva
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional, Union

import structlog
from pydantic import ValidationError

from leadmatch.config import get_settings
from leadmatch.database import (
    AlertRepository,
    LeadRepository,
    PropertyRepository,
)
from leadmatch.matching.dedup import dedup_cutoff, is_duplicate
from leadmatch.matching.filters import is_active_lead
from leadmatch.matching.policy import DEFAULT_POLICY, MatchingPolicy
from leadmatch.matching.reverse import PropertySearchResult, filter_properties_for_lead
from leadmatch.matching.scorer import MatchResult, score_lead
from leadmatch.models import Alert, Lead, LeadRequirements, Property, PropertyRecord
from leadmatch.models.alert import BROADCAST_TARGET

logger = structlog.get_logger()


@dataclass
class MatchRun:
    """Detalle de una corrida de matching para una propiedad."""

    duplicate: bool = False
    leads_total: int = 0
    leads_evaluated: int = 0
    matches: list[MatchResult] = field(default_factory=list)


def _sort_key(match: MatchResult) -> tuple:
    # Score descendente; empates por id ascendente, ids vacíos al final
    return (-match.match_score, match.id == "", match.id)


def run_matching(
    property: Property,
    agency_id: str,
    lead_pool: Iterable[Lead],
    existing_properties: Iterable[PropertyRecord],
    now: datetime,
    policy: MatchingPolicy = DEFAULT_POLICY,
) -> MatchRun:
    """
    Corre el pipeline completo y devuelve también sus contadores.

    dedup -> leads activos -> scoring -> orden por score.
    """
    run = MatchRun()

    if is_duplicate(property, agency_id, existing_properties, now, policy):
        logger.info(
            "Propiedad duplicada, se omite el matching",
            property_id=property.id,
            address=property.address,
        )
        run.duplicate = True
        return run

    leads = list(lead_pool)
    active = [lead for lead in leads if is_active_lead(lead, now, policy)]
    run.leads_total = len(leads)
    run.leads_evaluated = len(active)

    if not active:
        logger.info("No hay leads activos", agency_id=agency_id)
        return run

    matches = []
    for lead in active:
        result = score_lead(property, lead, policy)
        if result is not None:
            matches.append(result)

    matches.sort(key=_sort_key)
    run.matches = matches

    logger.info(
        "Matches encontrados",
        property_id=property.id,
        evaluated=len(active),
        matches=len(matches),
    )
    return run


def find_matches(
    property: Property,
    agency_id: str,
    lead_pool: Iterable[Lead],
    existing_properties: Iterable[PropertyRecord],
    now: datetime,
    policy: MatchingPolicy = DEFAULT_POLICY,
) -> list[MatchResult]:
    """
    Encuentra los leads que matchean con una propiedad.

    Args:
        property: Propiedad recién ingresada
        agency_id: Agencia (tenant) de la propiedad
        lead_pool: Todos los leads de la agencia
        existing_properties: Candidatas a duplicado
        now: Instante de referencia (inyectado)
        policy: Tolerancias y ventanas

    Returns:
        Lista de MatchResult ordenada por score (vacía si es duplicada)
    """
    return run_matching(
        property, agency_id, lead_pool, existing_properties, now, policy
    ).matches


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _first(data: dict, *keys: str):
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


class MatchingEngine:
    """
    Servicio de matching con acceso al store.

    Los repositorios y el reloj se inyectan; por defecto se usan
    los repositorios de Supabase y la hora UTC actual.
    """

    def __init__(
        self,
        property_repo: Optional[PropertyRepository] = None,
        lead_repo: Optional[LeadRepository] = None,
        alert_repo: Optional[AlertRepository] = None,
        policy: Optional[MatchingPolicy] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.policy = policy or MatchingPolicy.from_settings(get_settings())
        self.property_repo = property_repo or PropertyRepository()
        self.lead_repo = lead_repo or LeadRepository()
        self.alert_repo = alert_repo or AlertRepository()
        self.clock = clock or utcnow

    def find_matching_leads(
        self,
        property: Property,
        agency_id: str,
        now: Optional[datetime] = None,
    ) -> list[MatchResult]:
        """
        Leads de la agencia que matchean con la propiedad.

        Returns:
            Lista de MatchResult ordenada por score (vacía si es duplicada)
        """
        return self._run(property, agency_id, now or self.clock()).matches

    def on_property_created(
        self,
        property_id: str,
        data: dict,
        now: Optional[datetime] = None,
    ) -> dict:
        """
        Trigger de creación de propiedad: matchea y genera alertas.

        Args:
            property_id: ID del documento creado
            data: Documento tal como quedó en el store

        Returns:
            Estadísticas del procesamiento
        """
        stats = {
            "property_id": property_id,
            "skipped": False,
            "duplicate": False,
            "leads_evaluated": 0,
            "matches_found": 0,
            "alerts_created": 0,
        }

        agency_id = _first(data, "agency_id", "agencyId")
        city = _first(data, "city")
        price = _first(data, "price")

        # Borradores (ej: WhatsApp) todavía sin ciudad o precio
        if not agency_id or not city or price is None:
            logger.info(
                "Matchmaking omitido: falta ciudad, precio o agencia",
                property_id=property_id,
            )
            stats["skipped"] = True
            return stats

        try:
            property = Property.model_validate({**data, "id": property_id})
        except ValidationError as e:
            logger.warning(
                "Matchmaking omitido: documento de propiedad inválido",
                property_id=property_id,
                error=str(e),
            )
            stats["skipped"] = True
            return stats

        now = now or self.clock()

        try:
            run = self._run(property, agency_id, now)

            stats["duplicate"] = run.duplicate
            stats["leads_evaluated"] = run.leads_evaluated
            stats["matches_found"] = len(run.matches)

            alerts = [
                self.build_alert(property, match, agency_id, now)
                for match in run.matches
            ]
            if alerts:
                self.alert_repo.create_many(alerts)
                stats["alerts_created"] = len(alerts)

        except Exception as e:
            logger.error(
                "Error en matchmaking de propiedad",
                property_id=property_id,
                error=str(e),
            )
            raise

        logger.info("Matchmaking completado", **stats)
        return stats

    def match_properties_for_lead(
        self,
        agency_id: str,
        requirements: Union[LeadRequirements, dict, None],
    ) -> PropertySearchResult:
        """Busca en el inventario activo las propiedades que cumplen los requisitos."""
        if not isinstance(requirements, LeadRequirements):
            requirements = LeadRequirements.model_validate(requirements or {})

        rows = self.property_repo.get_active(agency_id)
        result = filter_properties_for_lead(requirements, self._parse_properties(rows))
        # Las filas que no se pudieron leer también fueron revisadas
        result.total_scanned = len(rows)

        logger.info(
            "Búsqueda de propiedades para lead",
            agency_id=agency_id,
            scanned=result.total_scanned,
            matches=len(result.matches),
        )
        return result

    @staticmethod
    def build_alert(
        property: Property, match: MatchResult, agency_id: str, now: datetime
    ) -> Alert:
        """Arma la alerta in-app para el agente del lead, fechada en `now`."""
        return Alert(
            agency_id=agency_id,
            target_agent_id=match.assigned_agent_id or BROADCAST_TARGET,
            title="¡Nueva propiedad compatible!",
            message=(
                f"La propiedad nueva en {property.city} coincide con "
                f"el cliente {match.name} ({match.match_score}%)"
            ),
            link=f"/dashboard/leads/{match.id}",
            property_id=property.id,
            lead_id=match.id,
            match_score=match.match_score,
            requires_verification=match.requires_verification,
            created_at=now,
        )

    def _run(self, property: Property, agency_id: str, now: datetime) -> MatchRun:
        candidates = self.property_repo.find_recent_duplicates(
            agency_id=agency_id,
            address=property.address,
            price=property.price,
            since=dedup_cutoff(now, self.policy),
            seller_phone=property.seller_phone,
            exclude_id=property.id,
        )
        existing = self._parse_properties(candidates)
        leads = self._parse_leads(self.lead_repo.get_by_agency(agency_id))

        return run_matching(property, agency_id, leads, existing, now, self.policy)

    def _parse_leads(self, rows: list[dict]) -> list[Lead]:
        leads = []
        for row in rows:
            try:
                leads.append(Lead.model_validate(row))
            except ValidationError as e:
                logger.warning("Lead inválido, se omite", lead_id=row.get("id"), error=str(e))
        return leads

    def _parse_properties(self, rows: list[dict]) -> list[PropertyRecord]:
        # Lectura laxa: los borradores sin tipo o precio también cuentan
        properties = []
        for row in rows:
            try:
                properties.append(PropertyRecord.model_validate(row))
            except ValidationError as e:
                logger.warning(
                    "Propiedad inválida, se omite", property_id=row.get("id"), error=str(e)
                )
        return properties
