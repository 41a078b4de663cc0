"""
Módulo de base de datos.

Provee acceso a Supabase y los repositorios que usa el matching.
"""

from leadmatch.database.supabase_client import get_supabase_client, SupabaseClient
from leadmatch.database.repositories import (
    PropertyRepository,
    LeadRepository,
    AlertRepository,
)

__all__ = [
    "get_supabase_client",
    "SupabaseClient",
    "PropertyRepository",
    "LeadRepository",
    "AlertRepository",
]
