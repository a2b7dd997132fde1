#!/usr/bin/env python3
"""
Farm insights management CLI.

Usage:
    python manage.py serve                  Start the API server
    python manage.py migrate                Apply pending database migrations
    python manage.py migrate --status       Show migration status
    python manage.py insights 12            Print ranked insights for farm 12
    python manage.py insights 12 --by-category
"""

import argparse
import asyncio
import json
import subprocess
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent


def cmd_serve(args: argparse.Namespace) -> None:
    """Start uvicorn in the foreground."""
    uvicorn_cmd = [
        sys.executable, "-m", "uvicorn",
        "src.api.main:app",
        "--host", args.host,
        "--port", str(args.port),
    ]
    if args.reload:
        uvicorn_cmd.append("--reload")
    elif args.workers and args.workers > 1:
        uvicorn_cmd += ["--workers", str(args.workers)]

    print(f"Starting server on {args.host}:{args.port}...")
    print(f"  API docs:  http://{args.host}:{args.port}/docs (debug mode only)")
    try:
        sys.exit(subprocess.call(uvicorn_cmd, cwd=str(ROOT_DIR)))
    except KeyboardInterrupt:
        print("\nServer stopped.")


def cmd_migrate(args: argparse.Namespace) -> None:
    """Apply migrations, or report their status."""
    from src.infrastructure.storage.sqlite.migrations import run_migrations
    from src.infrastructure.storage.sqlite.migrations.migrator import get_migration_status

    if args.status:
        status = asyncio.run(get_migration_status())
        print(json.dumps(status, indent=2))
        return

    results = asyncio.run(run_migrations())
    if not results:
        print("Database is up to date.")
        return

    for result in results:
        state = "ok" if result.success else f"FAILED: {result.error}"
        print(f"  {result.version}  {state}  ({result.execution_time_ms:.1f}ms)")

    if not all(r.success for r in results):
        sys.exit(1)


async def _fetch_insights(farm_id: int, limit: int, by_category: bool) -> dict:
    from src.application.dto.responses import InsightResponse
    from src.application.use_cases import GetFarmInsightsUseCase
    from src.infrastructure.storage.sqlite import close_pool

    use_case = GetFarmInsightsUseCase()
    try:
        if by_category:
            grouped = await use_case.get_insights_by_category(farm_id)
            return {
                insight_type.value: [
                    InsightResponse.from_entity(i).model_dump(mode="json") for i in insights
                ]
                for insight_type, insights in grouped.items()
            }

        insights = await use_case.get_insights_for_farm(farm_id, limit=limit)
        return {
            "farm_id": farm_id,
            "total": len(insights),
            "insights": [InsightResponse.from_entity(i).model_dump(mode="json") for i in insights],
        }
    finally:
        await close_pool()


def cmd_insights(args: argparse.Namespace) -> None:
    """Print insights for a farm as JSON."""
    from src.config import configure_logging

    configure_logging(log_level=args.log_level)
    payload = asyncio.run(_fetch_insights(args.farm_id, args.limit, args.by_category))
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Farm insights management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # serve
    p_serve = sub.add_parser("serve", help="Start the API server")
    p_serve.add_argument("--host", default="0.0.0.0", help="Bind host (default: 0.0.0.0)")
    p_serve.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
    p_serve.add_argument("--reload", action="store_true", help="Reload on code changes")
    p_serve.add_argument("--workers", type=int, default=1, help="Number of uvicorn workers")
    p_serve.set_defaults(func=cmd_serve)

    # migrate
    p_migrate = sub.add_parser("migrate", help="Apply database migrations")
    p_migrate.add_argument("--status", action="store_true", help="Show status only")
    p_migrate.set_defaults(func=cmd_migrate)

    # insights
    p_insights = sub.add_parser("insights", help="Print insights for a farm")
    p_insights.add_argument("farm_id", type=int, help="Farm ID")
    p_insights.add_argument("--limit", type=int, default=10, help="Maximum insights (default: 10)")
    p_insights.add_argument("--by-category", action="store_true", help="Group by insight type")
    p_insights.add_argument("--log-level", default="WARNING", help="Log level (default: WARNING)")
    p_insights.set_defaults(func=cmd_insights)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
