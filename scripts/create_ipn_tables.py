#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
scripts/create_ipn_tables.py

Crea las tablas del listener de IPN (ipn_messages, ipn_transactions) si
no existen. Pensado para ejecutarse en el despliegue, no en cada request.

Uso:
    python scripts/create_ipn_tables.py
    python scripts/create_ipn_tables.py --database-url sqlite+aiosqlite:///./ipn.db

Autor: DoxAI
Fecha: 2026-10-19
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy.ext.asyncio import create_async_engine

from ipn_listener.modules.ipn.install import create_ipn_tables
from ipn_listener.shared.config import get_ipn_settings, setup_logging

logger = logging.getLogger("create_ipn_tables")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Crea las tablas de IPN (if not exists)")
    parser.add_argument(
        "--database-url",
        default=None,
        help="DSN async de SQLAlchemy (default: DATABASE_URL / settings)",
    )
    return parser.parse_args(argv)


async def run(database_url: str) -> int:
    engine = create_async_engine(database_url)
    try:
        tables = await create_ipn_tables(engine)
    except Exception:
        logger.exception("No se pudieron crear las tablas de IPN")
        return 1
    finally:
        await engine.dispose()

    print(f"✅ Tablas listas: {', '.join(tables)}")
    return 0


def main(argv=None) -> int:
    load_dotenv(Path.cwd() / ".env")
    settings = get_ipn_settings()
    setup_logging(settings.log_level, settings.log_format)

    args = parse_args(argv)
    return asyncio.run(run(args.database_url or settings.database_url))


if __name__ == "__main__":
    sys.exit(main())

# Fin del archivo scripts/create_ipn_tables.py
