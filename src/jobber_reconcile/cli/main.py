"""Main CLI entry point."""

import argparse
import json
import logging
import sys
from pathlib import Path


def main(argv: list[str] | None = None) -> None:
    """Parse args and dispatch to subcommands."""
    parser = argparse.ArgumentParser(
        prog="jobber-reconcile",
        description="Reconcile Jobber residential exports into opportunities",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # import
    import_parser = subparsers.add_parser("import", help="Import Quotes/Jobs/Requests CSV exports")
    import_parser.add_argument(
        "--quotes",
        type=Path,
        required=True,
        help="Quotes export CSV",
    )
    import_parser.add_argument(
        "--jobs",
        type=Path,
        default=None,
        help="Jobs export CSV (optional)",
    )
    import_parser.add_argument(
        "--requests",
        type=Path,
        default=None,
        help="Requests export CSV (optional)",
    )
    target = import_parser.add_mutually_exclusive_group()
    target.add_argument(
        "--store",
        type=Path,
        default=None,
        metavar="DB_PATH",
        help="Persist to SQLite store at given path (default: residential.db)",
    )
    target.add_argument(
        "--rest-url",
        type=str,
        default=None,
        help="Persist to a PostgREST endpoint instead of SQLite",
    )
    import_parser.add_argument(
        "--batch-size",
        type=int,
        default=None,
        help="Rows per upsert batch (default: 500)",
    )
    import_parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to settings YAML",
    )
    import_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the JSON result to file (default: stdout)",
    )
    import_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log progress milestones",
    )

    # store
    store_parser = subparsers.add_parser("store", help="Query the local opportunity store")
    store_parser.add_argument(
        "--db",
        type=Path,
        default=Path("residential.db"),
        help="Path to SQLite database",
    )
    store_parser.add_argument(
        "action",
        choices=["list", "count", "runs"],
        help="List opportunities, show count, or show recent import runs",
    )
    store_parser.add_argument(
        "--status",
        type=str,
        default=None,
        choices=["won", "lost", "pending"],
        help="Filter by opportunity status",
    )

    args = parser.parse_args(argv)

    if args.command == "import":
        _run_import(args)
    elif args.command == "store":
        _run_store(args)
    else:
        parser.print_help()


def _load_settings(args: argparse.Namespace):
    """Settings from --config (or environment), with CLI flags on top."""
    from jobber_reconcile.config import ImportSettings
    from jobber_reconcile.errors import ConfigError

    try:
        settings = ImportSettings.from_yaml(args.config) if args.config else ImportSettings.from_env()
        return settings.with_overrides(
            db_path=args.store,
            rest_url=args.rest_url,
            batch_size=args.batch_size,
        )
    except ConfigError as e:
        raise SystemExit(str(e))


def _run_import(args: argparse.Namespace) -> None:
    """Run import command."""
    from jobber_reconcile.pipeline import run_import
    from jobber_reconcile.progress import LoggingReporter
    from jobber_reconcile.store import RestStore, SQLiteStore

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    for path in (args.quotes, args.jobs, args.requests):
        if path is not None and not path.is_file():
            raise SystemExit(f"File not found: {path}")

    settings = _load_settings(args)

    sqlite_store = None
    run_record = None
    if settings.rest_url and args.store is None:
        datastore = RestStore(settings.rest_url, api_key=settings.rest_api_key)
    else:
        sqlite_store = SQLiteStore(settings.db_path)
        run_record = sqlite_store.start_run(
            str(args.quotes),
            str(args.jobs) if args.jobs else None,
            str(args.requests) if args.requests else None,
        )
        datastore = sqlite_store

    result = run_import(
        args.quotes,
        args.jobs,
        args.requests,
        datastore=datastore,
        reporter=LoggingReporter(),
        settings=settings,
    )

    if sqlite_store and run_record:
        sqlite_store.finish_run(run_record.id, result)

    output = json.dumps(result.model_dump(mode="json"), indent=2, default=str)

    if args.output:
        args.output.write_text(output, encoding="utf-8")
        print(
            f"Imported {result.opportunities.total} opportunities "
            f"({len(result.errors)} errors, wrote to {args.output})"
        )
    else:
        print(output)

    if not result.success:
        raise SystemExit(1)


def _run_store(args: argparse.Namespace) -> None:
    """Run store command."""
    from jobber_reconcile.models.opportunity import OpportunityStatus
    from jobber_reconcile.store import SQLiteStore

    if not args.db.exists():
        print(f"No store at {args.db}. Run import first.", file=sys.stderr)
        raise SystemExit(1)

    store = SQLiteStore(args.db)
    status = OpportunityStatus(args.status) if args.status else None
    if args.action == "list":
        output = json.dumps(store.get_opportunities(status), indent=2, default=str)
        print(output)
    elif args.action == "count":
        print(len(store.get_opportunities(status)))
    elif args.action == "runs":
        for run in store.list_runs():
            finished = run.finished_at.isoformat() if run.finished_at else "-"
            print(
                f"  #{run.id} {run.status} started {run.started_at.isoformat()} finished {finished} "
                f"opportunities={run.opportunities_total} errors={run.error_count}"
            )


if __name__ == "__main__":
    main()
