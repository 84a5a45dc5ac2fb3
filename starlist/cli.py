"""CLI entrypoints for starlist commands."""

from __future__ import annotations

import argparse
from pathlib import Path

from .logging import configure_logging
from .orchestrator import Orchestrator


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Increase log verbosity for troubleshooting.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="starlist",
        description="Render a Markdown catalog of your starred GitHub repositories.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Fetch starred repositories and write the rendered report.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    generate_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the repository root (defaults to current directory).",
    )
    generate_parser.add_argument(
        "--config",
        help="Path to the configuration file (defaults to <path>/.starlist.yml).",
    )
    generate_parser.add_argument(
        "--token",
        help="GitHub token; falls back to STARLIST_TOKEN or GITHUB_TOKEN.",
    )
    generate_parser.add_argument(
        "--local",
        action="store_true",
        default=None,
        help="Write files only; skip every git operation.",
    )
    generate_parser.add_argument(
        "--log-file",
        type=Path,
        help="Also write detailed logs to this file.",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for starlist commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=getattr(args, "log_file", None))

    if args.command == "generate":
        try:
            outcome = Orchestrator().run(
                args.path,
                config_path=args.config,
                token=args.token,
                local=args.local,
            )
        except FileNotFoundError as exc:
            parser.exit(1, f"{exc}\n")
        except RuntimeError as exc:
            parser.exit(1, f"starlist generate failed: {exc}\nRun with --verbose for more details.\n")
        status = "committed" if outcome.committed else "not committed"
        print(
            f"{outcome.output_path.name} written with {outcome.record_count} repositories "
            f"from {outcome.source} ({status})"
        )
    elif args.command == "serve":
        from .service.app import run_service

        run_service(host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


if __name__ == "__main__":  # pragma: no cover
    main()
