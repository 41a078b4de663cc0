"""
Scoring de un lead contra una propiedad.

Cinco criterios independientes. Cada uno suma a `points` (puntos
obtenidos) y a `possible` (puntos disponibles) solo si el lead expresa
una preferencia sobre él. Cualquier criterio puede descartar el lead.

| Criterio  | Peso  | Descarte                        |
|-----------|-------|---------------------------------|
| Ciudad    | 25    | ciudad fuera del set            |
| Tipo      | 10    | nunca (preferencia soft)        |
| Precio    | 30    | precio > presupuesto * margen   |
| Ambientes | 20    | fuera de [min - tol, max + tol] |
| Amenities | 4 c/u | la propiedad explícitamente no  |
"""

import math
from dataclasses import asdict, dataclass, field
from typing import Callable, NamedTuple, Optional

import structlog

from leadmatch.matching.policy import DEFAULT_POLICY, MatchingPolicy
from leadmatch.models import Lead, LeadRequirements, Property

logger = structlog.get_logger()

CITY_WEIGHT = 25
TYPE_WEIGHT = 10
PRICE_WEIGHT = 30
ROOMS_WEIGHT = 20
ROOMS_TOLERANCE_POINTS = 10
AMENITY_WEIGHT = 4
AMENITY_UNKNOWN_POINTS = 2


class AmenityCheck(NamedTuple):
    """Requisito must-have del lead y el dato correspondiente de la propiedad."""

    label: str
    required: Callable[[LeadRequirements], bool]
    present: Callable[[Property], Optional[bool]]


AMENITY_CHECKS: tuple[AmenityCheck, ...] = (
    AmenityCheck("hasElevator", lambda r: r.must_have_elevator, lambda p: p.has_elevator),
    AmenityCheck("hasParking", lambda r: r.must_have_parking, lambda p: p.has_parking),
    AmenityCheck("hasBalcony", lambda r: r.must_have_balcony, lambda p: p.has_balcony),
    AmenityCheck("hasSafeRoom", lambda r: r.must_have_safe_room, lambda p: p.has_safe_room),
)


@dataclass
class MatchResult:
    """Lead que pasó todos los descartes, con su score."""

    id: str
    name: str
    phone: str
    email: Optional[str]
    agency_id: Optional[str]
    assigned_agent_id: Optional[str]
    match_score: int  # 0 a 100
    requires_verification: list[str] = field(default_factory=list)
    requirements: LeadRequirements = field(default_factory=LeadRequirements)

    @classmethod
    def from_lead(
        cls,
        lead: Lead,
        match_score: int,
        requires_verification: list[str],
    ) -> "MatchResult":
        """Arma el resultado aplicando placeholders a los datos de contacto."""
        return cls(
            id=lead.id,
            name=lead.name or "Unknown",
            phone=lead.phone or "",
            email=lead.email or None,
            agency_id=lead.agency_id,
            assigned_agent_id=lead.assigned_agent_id or None,
            match_score=match_score,
            requires_verification=requires_verification,
            requirements=lead.requirements,
        )

    def to_dict(self) -> dict:
        data = asdict(self)
        data["requirements"] = self.requirements.model_dump()
        return data


def round_half_up(value: float) -> int:
    """Redondeo comercial (x.5 hacia arriba), no el bancario de round()."""
    return int(math.floor(value + 0.5))


def _normalize_city(city: str) -> str:
    return (city or "").strip().casefold()


def score_lead(
    property: Property,
    lead: Lead,
    policy: MatchingPolicy = DEFAULT_POLICY,
) -> Optional[MatchResult]:
    """
    Evalúa un lead contra la propiedad.

    Args:
        property: Propiedad candidata
        lead: Lead a evaluar (ya filtrado como activo)
        policy: Tolerancias de precio y ambientes

    Returns:
        MatchResult, o None si algún criterio lo descarta
    """
    req = lead.requirements
    requires_verification: list[str] = []
    points = 0
    possible = 0

    # Ciudad
    desired_cities = {_normalize_city(c) for c in req.desired_city if c and c.strip()}
    if desired_cities:
        possible += CITY_WEIGHT
        if _normalize_city(property.city) not in desired_cities:
            return None
        points += CITY_WEIGHT

    # Tipo de operación (soft)
    wanted_types = {t.strip().lower() for t in req.property_type if t and t.strip()}
    if wanted_types:
        possible += TYPE_WEIGHT
        if property.type is not None and property.type.value in wanted_types:
            points += TYPE_WEIGHT

    # Precio con margen de negociación
    if req.max_budget is not None and req.max_budget > 0:
        possible += PRICE_WEIGHT
        effective_budget = req.max_budget * policy.price_margin
        if property.price > effective_budget:
            return None

        if property.price <= req.max_budget:
            points += PRICE_WEIGHT
        else:
            headroom = (effective_budget - property.price) / effective_budget
            margin_zone = policy.price_margin - 1.0
            points += round_half_up(PRICE_WEIGHT * headroom / margin_zone)

    # Ambientes con tolerancia
    min_rooms = req.min_rooms
    max_rooms = req.max_rooms
    if (min_rooms is not None or max_rooms is not None) and property.rooms is not None:
        possible += ROOMS_WEIGHT
        rooms = property.rooms
        tolerance = policy.rooms_tolerance

        within_tolerance = (min_rooms is None or rooms >= min_rooms - tolerance) and (
            max_rooms is None or rooms <= max_rooms + tolerance
        )
        if not within_tolerance:
            return None

        within_strict = (min_rooms is None or rooms >= min_rooms) and (
            max_rooms is None or rooms <= max_rooms
        )
        points += ROOMS_WEIGHT if within_strict else ROOMS_TOLERANCE_POINTS

    # Amenities: beneficio de la duda si el dato falta
    for check in AMENITY_CHECKS:
        if not check.required(req):
            continue

        possible += AMENITY_WEIGHT
        value = check.present(property)
        if value is False:
            return None
        if value is True:
            points += AMENITY_WEIGHT
        else:
            requires_verification.append(check.label)
            points += AMENITY_UNKNOWN_POINTS

    if possible > 0:
        match_score = min(100, round_half_up(100 * points / possible))
    else:
        match_score = policy.baseline_score

    logger.debug(
        "Lead evaluado",
        lead_id=lead.id,
        points=points,
        possible=possible,
        match_score=match_score,
    )

    return MatchResult.from_lead(lead, match_score, requires_verification)
