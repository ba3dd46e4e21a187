import argparse
import asyncio
import logging
import sys
from pathlib import Path

from contentcore.adapters.sqlite.migrator import SQLiteMigrator
from contentcore.app_shell.config import Settings
from contentcore.app_shell.context import ServiceContext
from contentcore.components.catalog import run_rebuild
from contentcore.rules.loader import load_rules

logger = logging.getLogger("cli")


def get_context(settings: Settings) -> ServiceContext:
    if not settings.rules_path.exists():
        logger.error("Rules file %s not found.", settings.rules_path)
        sys.exit(1)

    rules = load_rules(settings.rules_path)
    return ServiceContext.create(rules, db_path=settings.db_path)


def handle_migrate(settings: Settings, args: argparse.Namespace) -> None:
    Path(settings.db_path).parent.mkdir(parents=True, exist_ok=True)
    migrator = SQLiteMigrator(settings.db_path, str(settings.migrations_dir))
    applied = migrator.run_migrations()
    print(f"Applied {len(applied)} migration(s).")


async def _rebuild(ctx: ServiceContext) -> int:
    async with ctx.unit_of_work() as uow:
        out = await run_rebuild(projector=ctx.catalog, uow=uow)
        await uow.commit()
    return out.rows


def handle_rebuild_catalog(ctx: ServiceContext, args: argparse.Namespace) -> None:
    rows = asyncio.run(_rebuild(ctx))
    print(f"Catalog rebuilt: {rows} row(s).")


async def _history(ctx: ServiceContext, article_number: int) -> list:
    async with ctx.unit_of_work() as uow:
        return await uow.versions.list_versions(article_number)


def handle_history(ctx: ServiceContext, args: argparse.Namespace) -> None:
    versions = asyncio.run(_history(ctx, args.article_number))
    if not versions:
        print(f"No versions for article {args.article_number}.")
        return
    for v in versions:
        published = v.published_at.isoformat() if v.published_at else "-"
        print(f"{v.version_number:>4}  {v.updated_at.isoformat()}  {published}  {v.title}")


def main() -> None:
    logging.basicConfig(level=logging.INFO)

    parser = argparse.ArgumentParser(description="contentcore CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # migrate
    subparsers.add_parser("migrate", help="Apply pending database migrations")

    # rebuild-catalog
    subparsers.add_parser("rebuild-catalog", help="Recompute the catalog from version history")

    # history
    history_parser = subparsers.add_parser("history", help="List versions of an article")
    history_parser.add_argument("article_number", type=int)

    args = parser.parse_args()
    settings = Settings()

    if args.command == "migrate":
        handle_migrate(settings, args)
        return

    ctx = get_context(settings)

    if args.command == "rebuild-catalog":
        handle_rebuild_catalog(ctx, args)
    elif args.command == "history":
        handle_history(ctx, args)


if __name__ == "__main__":
    main()
