import os
import argparse
from pathlib import Path
import logging
from dotenv import load_dotenv
from gateway.config import GatewayConfig
from gateway.server import create_app
from resolver.handlers import build_gateway
from resolver.records import RecordStore


load_dotenv(os.path.join(Path.cwd(), ".env"))


def _split_addresses(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="CCIP-Read Example Resolver")
    parser.add_argument(
        "--host", type=str, default=os.getenv("CCIP_HOST", "127.0.0.1"), help="Bind address"
    )

    parser.add_argument(
        "--port", type=int, default=int(os.getenv("CCIP_PORT", "8080")), help="Bind port"
    )

    parser.add_argument(
        "--path", type=str, default=os.getenv("CCIP_PATH", "/"), help="Endpoint path"
    )

    parser.add_argument(
        "--db_path",
        type=str,
        default=os.getenv("CCIP_DB_PATH", "resolver.db"),
        help="Path to the SQLite record database. ",
    )

    parser.add_argument(
        "--gateway",
        action="append",
        default=None,
        help="Pre-approved sender address (repeatable, replaces CCIP_GATEWAYS)",
    )

    parser.add_argument(
        "--seed", action="store_true", help="Insert the example records on startup"
    )

    parser.add_argument(
        "--hide_handler_errors",
        action="store_true",
        help="Do not echo handler exception text to callers",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=os.getenv("LOG_LEVEL", "INFO"),
        help="Logging level",
    )

    args = parser.parse_args(argv)
    if args.gateway is None:
        args.gateway = _split_addresses(os.getenv("CCIP_GATEWAYS"))
    return args


def main():
    args = parse_args()

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger = logging.getLogger("resolver-main")

    store = RecordStore(db_path=args.db_path)
    logger.info(f"Initialized record store at {args.db_path}")
    if args.seed:
        store.seed_examples()

    config = GatewayConfig(
        gateways=args.gateway,
        expose_handler_errors=not args.hide_handler_errors,
    )
    gateway = build_gateway(store, config)
    for method in gateway.methods:
        logger.info(f"{method.selector_hex} {method.signature}")

    app = create_app(gateway, path=args.path)

    import uvicorn

    logger.info(f"CCIP-Read resolver listening on {args.host}:{args.port}{args.path}")
    try:
        uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())
    finally:
        store.close()


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        pass
