"""
Filtro de leads activos.

Un lead cerrado o sin actividad reciente nunca llega al scorer.
"""

import calendar
from datetime import datetime

from leadmatch.matching.policy import DEFAULT_POLICY, MatchingPolicy
from leadmatch.models import Lead
from leadmatch.models.base import as_utc


def subtract_months(value: datetime, months: int) -> datetime:
    """Resta meses calendario, recortando el día al largo del mes destino."""
    month_index = value.year * 12 + (value.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def stale_cutoff(now: datetime, policy: MatchingPolicy = DEFAULT_POLICY) -> datetime:
    """Actividad mínima para que un lead siga vigente."""
    return subtract_months(as_utc(now), policy.stale_lead_months)


def is_closed_status(status: str, policy: MatchingPolicy = DEFAULT_POLICY) -> bool:
    return (status or "").strip().lower() in policy.closed_statuses


def is_active_lead(
    lead: Lead,
    now: datetime,
    policy: MatchingPolicy = DEFAULT_POLICY,
) -> bool:
    """
    Un lead está activo si no está cerrado y tuvo actividad
    (updated_at o, en su defecto, created_at) dentro de la ventana.

    Sin ningún timestamp se lo considera inactivo.
    """
    if is_closed_status(lead.status, policy):
        return False

    last_activity = lead.last_activity
    if last_activity is None:
        return False

    return last_activity >= stale_cutoff(now, policy)
