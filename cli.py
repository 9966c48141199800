# cli.py -- Command-line interface for the Access Log Viewer.
# Implements DESIGN.md Component 3.9: thin CLI wrapper that parses arguments,
# opens access log views, replays lifecycle events and formats output.

import argparse
import sys

import audit
import storage
from access_log import AccessLog, AccessLogError, EventType
from access_log_view import AccessLogView
from config import configure_logging, load_config, resolve_timezone
from log_format import LocalCalendar, LogEntryFormatter, current_time_millis
from templates import TemplateTable, load_templates

LIFECYCLE_EVENTS = ("resume", "back")


def _add_common(p: argparse.ArgumentParser, defaults) -> None:
    p.add_argument("--log-file", default=defaults.log_file)
    p.add_argument("--audit-file", default=defaults.audit_file)


def _add_display(p: argparse.ArgumentParser, defaults) -> None:
    p.add_argument("--timezone", default=defaults.timezone)
    p.add_argument("--templates", default=defaults.templates_file)


def build_parser(defaults=None) -> argparse.ArgumentParser:
    """Build and return the argparse parser with all subcommands.

    Subcommands: show, record, list, audit-log.

    Args:
        defaults: Config supplying default values; read from the
            environment when omitted.

    Returns:
        Configured ArgumentParser instance.
    """
    if defaults is None:
        defaults = load_config()

    parser = argparse.ArgumentParser(
        prog="access-log",
        description="Secret access log viewer",
    )
    parser.add_argument("--log-level", default=defaults.log_level)
    subparsers = parser.add_subparsers(dest="command")

    # -- show --
    p_show = subparsers.add_parser("show", help="Show the access log of a secret")
    p_show.add_argument("secret", help="Secret description")
    p_show.add_argument("--now", type=int, default=0,
                        help="Reference time in epoch milliseconds (default: current time)")
    p_show.add_argument("--events", default="resume",
                        help="Comma-separated lifecycle events to replay: resume, back")
    _add_common(p_show, defaults)
    _add_display(p_show, defaults)

    # -- record --
    p_record = subparsers.add_parser("record", help="Record an event on a secret")
    p_record.add_argument("secret", help="Secret description")
    p_record.add_argument("event", choices=[e.value for e in EventType])
    p_record.add_argument("--time", type=int, default=None,
                          help="Event time in epoch milliseconds (default: current time)")
    _add_common(p_record, defaults)

    # -- list --
    p_list = subparsers.add_parser("list", help="List secrets with an access log")
    _add_common(p_list, defaults)

    # -- audit-log --
    p_audit = subparsers.add_parser("audit-log", help="View recorded view decisions")
    p_audit.add_argument("--audit-file", default=defaults.audit_file)
    p_audit.add_argument("--last", type=int, default=None)

    return parser


def _load_logs(log_file: str) -> dict[str, AccessLog]:
    try:
        return storage.load_access_logs(log_file)
    except FileNotFoundError:
        raise AccessLogError(f"Access log file not found at {log_file}")


def _build_formatter(args) -> LogEntryFormatter:
    templates = load_templates(args.templates) if args.templates else TemplateTable()
    calendar = LocalCalendar(resolve_timezone(args.timezone))
    return LogEntryFormatter(templates, calendar)


def _parse_events(raw: str) -> list[str]:
    events = [e.strip() for e in raw.split(",") if e.strip()]
    for e in events:
        if e not in LIFECYCLE_EVENTS:
            raise AccessLogError(
                f"Invalid lifecycle event '{e}'. Valid events: {', '.join(LIFECYCLE_EVENTS)}"
            )
    return events


def show(args) -> None:
    """Open the view for args.secret and replay the requested lifecycle events."""
    events = _parse_events(args.events)
    logs = _load_logs(args.log_file)
    if args.secret not in logs:
        raise AccessLogError(f"No access log for secret '{args.secret}'")

    view = AccessLogView(
        args.secret,
        logs[args.secret],
        _build_formatter(args),
        on_finish=lambda result: print(f"Result: {result.value}"),
        audit_file=args.audit_file,
    )
    for event in events:
        if event == "back":
            view.on_back()
            break
        if not view.on_resume():
            print("Access log closed. Enter the master password to view it again.")
            break
        print(view.title)
        rows = view.rows(args.now)
        if not rows:
            print("No entries.")
        for row in rows:
            print(f"  {row}")


def main(argv=None) -> None:
    """Entry point. Parse arguments, dispatch to the subcommand, format output."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        configure_logging(args.log_level)

        if args.command == "show":
            show(args)

        elif args.command == "record":
            logs = _load_logs(args.log_file) if storage.log_file_exists(args.log_file) else {}
            log = logs.setdefault(args.secret, AccessLog())
            time = args.time if args.time is not None else current_time_millis()
            if time < 0:
                raise AccessLogError("Event time must not be negative")
            log.record(EventType(args.event), time)
            storage.save_access_logs(logs, args.log_file)
            print(f"Recorded {args.event} on '{args.secret}' ({len(log)} entries)")

        elif args.command == "list":
            secrets = sorted(_load_logs(args.log_file))
            if not secrets:
                print("No secrets found.")
            for description in secrets:
                print(description)

        elif args.command == "audit-log":
            if not args.audit_file:
                raise AccessLogError("No audit file configured")
            try:
                lines = audit.read_log(args.audit_file, args.last)
            except FileNotFoundError:
                raise AccessLogError(f"Audit file not found at {args.audit_file}")
            for line in lines:
                print(line)

    except AccessLogError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
