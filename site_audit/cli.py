"""CLI entrypoints for site-audit commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Dict, List, Optional

from .config import ConfigError, SiteAuditConfig, load_config
from .logging import configure_logging, get_logger, report_context
from .render import HtmlRenderer, dump_json
from .reports import ReportNotFoundError, ReportRegistry, registry_from_config
from .repository import RepositoryUnavailableError

FORMATS = ("html", "json", "markdown")

_logger = get_logger("cli")


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_config_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "--config",
        default=argparse.SUPPRESS if suppress_default else ".",
        help="Path to .site_audit.yml or the directory holding it (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="site-audit",
        description="Audit the structure, content and configuration of a Drupal site snapshot.",
    )
    _add_verbose_option(parser)
    _add_config_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser(
        "list",
        help="List registered reports and whether they are enabled.",
    )
    _add_verbose_option(list_parser, suppress_default=True)
    _add_config_option(list_parser, suppress_default=True)
    list_parser.add_argument(
        "--all",
        action="store_true",
        help="Include disabled reports.",
    )

    show_parser = subparsers.add_parser(
        "show",
        help="Build a report and print it.",
    )
    _add_verbose_option(show_parser, suppress_default=True)
    _add_config_option(show_parser, suppress_default=True)
    show_parser.add_argument("report_id", help="Machine name of the report.")
    show_parser.add_argument(
        "--format",
        choices=FORMATS,
        default="markdown",
        help="Output format (defaults to markdown).",
    )
    show_parser.add_argument(
        "--sort-param",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Sort parameter such as `paragraphs_order=label`; repeatable.",
    )
    show_parser.add_argument(
        "--option",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Report option such as `bundle=article`; repeatable.",
    )
    show_parser.add_argument(
        "--output",
        help="Write the report to this file instead of stdout.",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Serve reports over HTTP.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    _add_config_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", help="Bind address (defaults to the configured host).")
    serve_parser.add_argument("--port", type=int, help="Bind port (defaults to the configured port).")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for site-audit commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(Path(args.config))
    except ConfigError as exc:
        configure_logging(verbose=bool(args.verbose))
        parser.exit(1, f"{exc}\n")
    configure_logging(verbose=bool(args.verbose), log_file=config.log_file)

    try:
        if args.command == "list":
            _list_reports(registry_from_config(config), include_disabled=bool(args.all))
        elif args.command == "show":
            try:
                sort = _parse_pairs(args.sort_param)
                options = _parse_pairs(args.option)
            except ValueError as exc:
                parser.error(str(exc))
            output = _render_report(
                registry_from_config(config), args.report_id, args.format, sort, options
            )
            _write_output(output, args.output)
        elif args.command == "serve":
            _serve(config, args.host, args.port)
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except ReportNotFoundError as exc:
        parser.exit(1, f"{exc}\n")
    except RepositoryUnavailableError as exc:
        parser.exit(1, f"site-audit failed: {exc}\nRun with --verbose for more details.\n")


def _list_reports(registry: ReportRegistry, *, include_disabled: bool = False) -> None:
    descriptors = registry.discover() if include_disabled else registry.enabled()
    if not descriptors:
        print("No reports are enabled.")
        return
    width = max(len(report_id) for report_id in descriptors)
    for report_id, descriptor in descriptors.items():
        marker = "" if descriptor.enabled else " (disabled)"
        print(f"{report_id.ljust(width)}  {descriptor.label}{marker}")


def _render_report(
    registry: ReportRegistry,
    report_id: str,
    output_format: str,
    sort: Dict[str, str],
    options: Dict[str, str],
) -> str:
    with report_context(report_id):
        report = registry.create(report_id, options)
        data = report.build_data()
        _logger.info("Built report (%d top-level keys)", len(data))
        if output_format == "json":
            return dump_json(report.render_json(data))
        if output_format == "html":
            return HtmlRenderer().render_report(report.render_table(data, sort), sort)
        return report.render_markdown(data, sort)


def _write_output(output: str, destination: Optional[str]) -> None:
    if destination is None:
        sys.stdout.write(output)
        return
    path = Path(destination)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(output, encoding="utf-8")
    print(f"Report written to {_relativize(path)}")


def _serve(config: SiteAuditConfig, host: Optional[str], port: Optional[int]) -> None:
    from .service import run_service

    run_service(host or config.service.host, port or config.service.port, config)


def _parse_pairs(values: List[str]) -> Dict[str, str]:
    pairs: Dict[str, str] = {}
    for value in values:
        key, sep, item = value.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Expected KEY=VALUE, got '{value}'")
        pairs[key.strip()] = item.strip()
    return pairs


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
