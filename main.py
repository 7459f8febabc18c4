"""
hotel-api - Main Entry Point

Supports serving the API and one-off datastore provisioning.
"""

import argparse
import os
import sys

from fastapi import FastAPI

# Only import essential configuration, avoid import-time side effects
from src.core.config import settings


def run_provision_mode(seed_demo_data: bool) -> None:
    """
    Create the tables, the settings document and (optionally) demo rows.
    """
    from src.core.logger import setup_logging
    from src.models import build_registry
    from src.services.provisioning_service import ProvisioningService
    from src.stores.database import Database

    setup_logging()

    print("🏨 hotel-api - Provision Mode")
    print("=" * 50)

    database = Database()
    try:
        summary = ProvisioningService(database, build_registry()).provision(
            seed_demo_data=seed_demo_data
        )
    finally:
        database.dispose()

    print(f"✅ Tables ready on {database.engine.url.render_as_string()}")
    print(f"⚙️  Settings document seeded: {summary['settings_seeded']}")
    for name, count in summary["records_seeded"].items():
        print(f"🌱 Seeded {count} {name}")


def create_app() -> FastAPI:
    """
    Factory function to create FastAPI application.

    This function is called by uvicorn in factory mode to avoid
    import-time side effects when running other modes.

    Returns:
        FastAPI: Configured application instance
    """
    # Lazy import API components to avoid side effects in provision mode
    from src.api.factory import create_api
    from src.core.logger import setup_logging

    # Setup logging first
    setup_logging()

    return create_api(
        title=settings.api__title,
        description=settings.api__description,
        version=settings.api__version,
        docs_url=settings.api__docs_url,
        redoc_url=settings.api__redoc_url,
        mount_prefix="",  # Mount at root level
    )


def main() -> None:
    """
    Main entry point with CLI argument parsing.
    """
    parser = argparse.ArgumentParser(
        description="hotel-api - Hotel management data API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                     # Run as FastAPI server (default)
  python main.py --mode provision    # Create tables and seed data, then exit
  python main.py --host 127.0.0.1 --port 8000  # Custom host/port
        """,
    )

    parser.add_argument(
        "--mode",
        choices=["api", "provision"],
        default="api",
        help="Run mode: 'api' for the server, 'provision' to set up the datastore (default: api)",
    )

    parser.add_argument(
        "--host",
        default=os.getenv("HOST", "0.0.0.0"),
        help="Host to bind the API server (default: 0.0.0.0)",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=int(os.getenv("PORT", "3000")),
        help="Port to bind the API server (default: 3000)",
    )

    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development (API mode only)",
    )

    parser.add_argument(
        "--no-demo-data",
        action="store_true",
        help="Skip the demo users and rooms (provision mode only)",
    )

    args = parser.parse_args()

    if args.mode == "provision":
        try:
            run_provision_mode(seed_demo_data=not args.no_demo_data)
        except Exception as e:
            print(f"❌ Provisioning failed: {e}")
            sys.exit(1)

    elif args.mode == "api":
        print("🚀 Starting hotel-api Server...")
        print(f"📍 Server will run on {args.host}:{args.port}")
        print(f"🌍 Environment: {settings.environment}")
        print(f"🐛 Debug mode: {settings.debug}")
        print(f"📚 API docs: http://{args.host}:{args.port}{settings.api__docs_url}")
        print(f"📖 ReDoc: http://{args.host}:{args.port}{settings.api__redoc_url}")
        print()

        try:
            # Import uvicorn here to avoid import-time side effects in provision mode
            import uvicorn

            uvicorn.run(
                "main:create_app",  # Use factory function to avoid import-time app creation
                factory=True,  # Enable factory mode
                host=args.host,
                port=args.port,
                reload=args.reload or settings.debug,
                log_level=str(settings.log_level).lower(),
            )
        except Exception as e:
            print(f"❌ Error starting API server: {e}")
            sys.exit(1)


if __name__ == "__main__":
    main()
