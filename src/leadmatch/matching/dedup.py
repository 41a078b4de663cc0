"""
Detección de propiedades duplicadas.

Evita volver a matchear una misma publicación ingresada dos veces
(re-scrapeada o re-enviada) dentro de una ventana corta.
"""

from datetime import datetime, timedelta
from typing import Iterable

import structlog

from leadmatch.matching.policy import DEFAULT_POLICY, MatchingPolicy
from leadmatch.models import Property, PropertyRecord
from leadmatch.models.base import as_utc

logger = structlog.get_logger()


def dedup_cutoff(now: datetime, policy: MatchingPolicy = DEFAULT_POLICY) -> datetime:
    """Fecha mínima de ingreso para que una propiedad cuente como reciente."""
    return as_utc(now) - timedelta(days=policy.dedup_window_days)


def is_duplicate(
    property: Property,
    agency_id: str,
    existing_properties: Iterable[PropertyRecord],
    now: datetime,
    policy: MatchingPolicy = DEFAULT_POLICY,
) -> bool:
    """
    Indica si la propiedad ya fue ingresada dentro de la ventana de dedup.

    Reglas (alcanza con una):
    1. Mismo teléfono de vendedor, si la propiedad tiene uno.
    2. Misma dirección y mismo precio, si la propiedad tiene dirección.

    Las candidatas pueden ser borradores (sin tipo, precio o dirección).

    Solo cuentan propiedades de la misma agencia con created_at >= cutoff.
    La propia propiedad (mismo id) se ignora.

    Args:
        property: Propiedad recién ingresada
        agency_id: Agencia en la que se busca
        existing_properties: Candidatas traídas del store
        now: Instante de referencia (inyectado)
        policy: Ventana de dedup

    Returns:
        True si es duplicada y no debe matchearse
    """
    cutoff = dedup_cutoff(now, policy)

    for existing in existing_properties:
        if property.id and existing.id == property.id:
            continue
        if existing.agency_id != agency_id:
            continue
        if existing.created_at is None or existing.created_at < cutoff:
            continue

        if property.seller_phone and existing.seller_phone == property.seller_phone:
            logger.debug(
                "Duplicado por teléfono",
                existing_id=existing.id,
                seller_phone=property.seller_phone,
            )
            return True

        if (
            property.address
            and existing.address == property.address
            and existing.price == property.price
        ):
            logger.debug(
                "Duplicado por dirección y precio",
                existing_id=existing.id,
                address=property.address,
            )
            return True

    return False
