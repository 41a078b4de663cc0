"""
Script para ejecutar el matchmaking de una propiedad.

Busca los leads de la agencia que matchean con una propiedad ya
guardada y genera las alertas correspondientes.

Uso:
    python -m leadmatch.scripts.run_matching --property-id abc123
    python -m leadmatch.scripts.run_matching --property-id abc123 --dry-run
"""

import argparse
import json
import logging
import sys

import structlog

from leadmatch.config import get_settings
from leadmatch.database import PropertyRepository
from leadmatch.matching import MatchingEngine
from leadmatch.models import Property

# Configurar logging
settings = get_settings()
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(message)s",
    force=True,
)

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


def run_matching(property_id: str, dry_run: bool = False) -> dict:
    """
    Ejecuta el matchmaking de una propiedad.

    Args:
        property_id: ID de la propiedad en el store
        dry_run: Solo listar los matches, sin crear alertas

    Returns:
        Estadísticas del procesamiento
    """
    property_repo = PropertyRepository()
    data = property_repo.get_by_id(property_id)
    if not data:
        raise ValueError(f"Propiedad no encontrada: {property_id}")

    engine = MatchingEngine(property_repo=property_repo)

    if not dry_run:
        return engine.on_property_created(property_id, data)

    property = Property.model_validate(data)
    matches = engine.find_matching_leads(property, property.agency_id)
    print(json.dumps([m.to_dict() for m in matches], ensure_ascii=False, indent=2))
    return {"property_id": property_id, "matches_found": len(matches)}


def main():
    """Entry point del script."""
    parser = argparse.ArgumentParser(description="Matchmaking de una propiedad")
    parser.add_argument("--property-id", required=True, help="ID de la propiedad")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Listar matches sin crear alertas",
    )
    args = parser.parse_args()

    logger.info("Iniciando matchmaking...", property_id=args.property_id)

    try:
        stats = run_matching(args.property_id, dry_run=args.dry_run)
        logger.info("Matchmaking finalizado", **stats)
        sys.exit(0)

    except KeyboardInterrupt:
        logger.info("Matchmaking interrumpido por usuario")
        sys.exit(130)
    except Exception as e:
        logger.error("Error fatal en matchmaking", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
