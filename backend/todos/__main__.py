"""CLI entry point — ``python -m todos``."""

import argparse

import uvicorn

from todos.config import settings
from todos.main import create_app


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="todos",
        description="Serve the todos REST API.",
    )
    parser.add_argument(
        "--hostname",
        default=settings.backend_host,
        help="Address to bind (default: %(default)s).",
    )
    parser.add_argument(
        "-p", "--port",
        type=int,
        default=settings.backend_port,
        help="Port to listen on (default: %(default)s).",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Logging verbosity (default: %(default)s).",
    )
    parser.add_argument(
        "-m", "--in-memory",
        action="store_true",
        default=settings.use_in_memory,
        help="Keep todos in process memory instead of the database.",
    )

    args = parser.parse_args(argv)

    app_settings = settings.model_copy(
        update={
            "backend_host": args.hostname,
            "backend_port": args.port,
            "log_level": args.log_level,
            "use_in_memory": args.in_memory,
        }
    )
    uvicorn.run(
        create_app(app_settings),
        host=app_settings.backend_host,
        port=app_settings.backend_port,
        log_level=app_settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
