"""
Modelos de datos del sistema.

- Property: propiedad ingresada por la agencia
- PropertyRecord: fila de propiedad sin validar identidad (borradores)
- Lead / LeadRequirements: cliente y lo que busca
- Alert: notificación generada por el matchmaking
"""

from leadmatch.models.property import Property, PropertyRecord, PropertyType
from leadmatch.models.lead import Lead, LeadRequirements
from leadmatch.models.alert import Alert

__all__ = [
    # Inventario
    "Property",
    "PropertyRecord",
    "PropertyType",
    # Leads
    "Lead",
    "LeadRequirements",
    # Notificaciones
    "Alert",
]
