"""
Matching inverso: propiedades para un lead.

Filtro determinístico y estricto (sin tolerancias ni scoring) sobre
el inventario activo de la agencia.
"""

from dataclasses import dataclass, field
from typing import Iterable

from leadmatch.models import LeadRequirements, PropertyRecord

ACTIVE_PROPERTY_STATUS = "active"


@dataclass
class PropertySearchResult:
    """Resultado de buscar propiedades para un lead."""

    matches: list[PropertyRecord] = field(default_factory=list)
    total_scanned: int = 0


def property_fits_requirements(
    property: PropertyRecord, requirements: LeadRequirements
) -> bool:
    """
    Todas las condiciones deben cumplirse; las vacías no filtran.

    Un dato faltante en la propiedad (ciudad, precio, tipo) solo la
    excluye si el lead pide algo sobre ese dato.
    """
    if property.status != ACTIVE_PROPERTY_STATUS:
        return False

    desired_cities = [c.strip().casefold() for c in requirements.desired_city]
    if desired_cities and (property.city or "").strip().casefold() not in desired_cities:
        return False

    max_budget = requirements.max_budget
    if max_budget is not None and max_budget > 0:
        if property.price is None or property.price > max_budget:
            return False

    min_rooms = requirements.min_rooms
    if min_rooms is not None and min_rooms > 0 and (property.rooms or 0) < min_rooms:
        return False

    if requirements.property_type:
        if property.type is None or property.type.value not in requirements.property_type:
            return False

    return True


def filter_properties_for_lead(
    requirements: LeadRequirements,
    properties: Iterable[PropertyRecord],
) -> PropertySearchResult:
    """
    Filtra el inventario contra los requisitos de un lead.

    Returns:
        PropertySearchResult con las propiedades que pasan y
        la cantidad total revisada
    """
    scanned = list(properties)
    matches = [p for p in scanned if property_fits_requirements(p, requirements)]
    return PropertySearchResult(matches=matches, total_scanned=len(scanned))
