"""
grohuh command line.

Usage:
    grohuh --environment production server
    grohuh --environment development api --port 8080
    grohuh --environment development setup-db
"""

import argparse
import logging
import os

import uvicorn
from grohuh_core.config.environments import Settings, get_settings

from grohuh_server.adapters.mqtt.server import main as mqtt_main

log = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def run_api_server(args: argparse.Namespace, settings: Settings) -> None:
    """Serve the read-only status API."""
    host = args.host or settings.API_HOST
    port = args.port or settings.API_PORT
    # code reload watches the source tree, never in production
    reload = args.reload and args.environment != "production"
    log.info("Status API on %s:%s (reload=%s)", host, port, reload)
    uvicorn.run(
        "grohuh_server.adapters.api.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=settings.LOG_LEVEL.lower(),
    )


def run_ingest_server(args: argparse.Namespace, settings: Settings) -> None:
    """Run the supervised MQTT ingest loop until SIGINT/SIGTERM."""
    mqtt_main()


def setup_database(args: argparse.Namespace, settings: Settings) -> None:
    """Create the record and trigger-state tables without going through alembic."""
    from grohuh_server.adapters.db.session import get_engine
    from grohuh_server.adapters.db.sqlalchemy_models import Base

    Base.metadata.create_all(bind=get_engine())
    log.info("Created tables %s", ", ".join(sorted(Base.metadata.tables)))


COMMANDS = {
    "server": run_ingest_server,
    "api": run_api_server,
    "setup-db": setup_database,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="grohuh", description="Growatt telemetry ingest with SOC trigger"
    )
    parser.add_argument(
        "--environment",
        choices=["production", "development", "testing"],
        default="development",
    )
    parser.add_argument("command", choices=sorted(COMMANDS))
    parser.add_argument("--host", help="status API bind host (api only)")
    parser.add_argument("--port", type=int, help="status API bind port (api only)")
    parser.add_argument("--reload", action="store_true", help="auto-reload the status API")
    return parser


def main(argv=None) -> None:
    args = build_parser().parse_args(argv)

    # get_settings() picks its environment from GROHUH_ENV
    os.environ["GROHUH_ENV"] = args.environment
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
    log.info("grohuh %s (%s)", args.command, args.environment)

    COMMANDS[args.command](args, settings)


if __name__ == "__main__":
    main()
