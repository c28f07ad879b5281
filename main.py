"""Command-line entry point for QuestionRAG."""

from __future__ import annotations

import argparse
import subprocess
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from questionrag import Mode, QuestionPipeline, QuestionRagError, WhereFilter
from questionrag.config import config
from questionrag.pipeline import DEFAULT_CONCEPTS, DEFAULT_PROMPT

if TYPE_CHECKING:
    from collections.abc import Sequence
    from logging import Logger

    from questionrag.pipeline import RunResult

PROJECT_ROOT = Path(__file__).resolve().parent
DEFAULT_APP = PROJECT_ROOT / "app.py"
UI_MODE = "ui"


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Build the CLI parser and read command-line arguments."""  # noqa: DOC201
    parser = argparse.ArgumentParser(
        description=(
            "Load questions into Weaviate, search them and ask a chat model "
            "about the results."
        ),
    )
    parser.add_argument(
        "mode",
        nargs="?",
        default=Mode.RUN.value,
        choices=[mode.value for mode in Mode] + [UI_MODE],
        help="What to run (default: run, which queries only).",
    )
    parser.add_argument(
        "--concept",
        dest="concepts",
        action="append",
        help="Near-text concept; repeat for several (default: '2 legs').",
    )
    parser.add_argument(
        "--prompt",
        default=DEFAULT_PROMPT,
        help=f"User prompt sent with the context (default: '{DEFAULT_PROMPT}').",
    )
    parser.add_argument(
        "--category",
        help="Only return questions whose category equals this value.",
    )
    parser.add_argument(
        "--limit",
        type=int,
        help="Maximum number of documents to retrieve.",
    )
    parser.add_argument(
        "--dataset",
        help="Dataset file or URL to ingest (default: bundled questions).",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        help=f"Objects per batch request (default: {config.BATCH_SIZE}).",
    )
    parser.add_argument(
        "--legacy-batch-trigger",
        action="store_true",
        default=None,
        help="Flush batches only once batch size + 1 objects are queued.",
    )
    parser.add_argument(
        "--app",
        type=Path,
        default=DEFAULT_APP,
        help="Path to the Streamlit script for 'ui' (default: app.py).",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8501,
        help="Port for the Streamlit server (default: 8501).",
    )
    parser.add_argument(
        "--address",
        default="localhost",
        help="Bind address for the Streamlit server (default: localhost).",
    )
    parser.add_argument(
        "--show",
        dest="headless",
        action="store_false",
        help="Open Streamlit in a browser window instead of headless mode.",
    )
    parser.set_defaults(headless=True)
    return parser.parse_args(argv)


def build_streamlit_command(
    script_path: Path,
    *,
    port: int,
    headless: bool,
    address: str,
) -> list[str]:
    """Construct the streamlit CLI invocation."""  # noqa: DOC201
    return [
        sys.executable,
        "-m",
        "streamlit",
        "run",
        str(script_path),
        "--server.port",
        str(port),
        "--server.address",
        address,
        "--server.headless",
        "true" if headless else "false",
    ]


def run_streamlit(command: Sequence[str], logger: Logger) -> int:
    """Execute the configured streamlit command and return its exit code."""  # noqa: DOC201
    try:
        result = subprocess.run(
            command,
            check=False,
            cwd=PROJECT_ROOT,
        )
    except KeyboardInterrupt:
        logger.info("QuestionRAG UI stopped by user")
        return 0
    except OSError:
        logger.exception("Unable to launch Streamlit: %s", command[0])
        return 1
    return result.returncode


def launch_ui(args: argparse.Namespace, logger: Logger) -> int:
    """Start the Streamlit interface."""  # noqa: DOC201
    script_path = (
        args.app if args.app.is_absolute() else (PROJECT_ROOT / args.app)
    ).resolve()
    if not script_path.exists():
        logger.error("Streamlit script not found: %s", script_path)
        return 1

    logger.info(
        "Starting QuestionRAG Streamlit app at http://%s:%s (headless=%s)",
        args.address,
        args.port,
        args.headless,
    )
    command = build_streamlit_command(
        script_path,
        port=args.port,
        headless=args.headless,
        address=args.address,
    )
    return_code = run_streamlit(command, logger)
    if return_code != 0:
        logger.error("Streamlit exited with status %s", return_code)
    return return_code


def print_result(result: RunResult) -> None:
    """Write the outputs of a run to standard output."""
    if result.schema is not None:
        print(f"Created class: {result.schema.get('class')}")
    if result.ingestion is not None:
        report = result.ingestion
        print(
            f"Ingested {report.objects_sent} objects in {report.flushes} batches "
            f"({report.failed_objects} failed)"
        )
    if result.answer is not None:
        print(result.answer.message.content)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the selected mode and print its results."""  # noqa: DOC201
    args = parse_args(argv)

    config.setup_logging()
    logger = config.get_logger(__name__)

    if args.mode == UI_MODE:
        return launch_ui(args, logger)

    try:
        config.validate()
    except QuestionRagError as e:
        # Missing credentials surface as authentication failures from the clients
        logger.warning("Configuration incomplete: %s", e)

    where = WhereFilter.equal("category", args.category) if args.category else None
    pipeline = None
    try:
        pipeline = QuestionPipeline.from_config(
            batch_size=args.batch_size,
            legacy_batch_trigger=args.legacy_batch_trigger,
        )
        result = pipeline.execute(
            Mode(args.mode),
            source=args.dataset,
            concepts=args.concepts or list(DEFAULT_CONCEPTS),
            prompt=args.prompt,
            where=where,
            limit=args.limit,
        )
    except (QuestionRagError, ValueError):
        logger.exception("QuestionRAG %s failed", args.mode)
        return 1
    finally:
        if pipeline is not None:
            pipeline.close()

    print_result(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
