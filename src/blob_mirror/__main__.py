# ABOUTME: CLI entry point for blob-mirror.
# ABOUTME: Mirrors an Azure blob container into a local directory.

import argparse
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .config import load_config, load_dotenv_files, ConfigError, MissingSettingError
from .manifest import MirrorResult, save_manifest
from .mirror import ExitStatus, MirrorEngine
from .notifications import send_discord_notification, should_notify
from .storage import AzureBlobStorage

logger = logging.getLogger(__name__)


def setup_logging(log_path: Path | None = None, verbose: bool = False) -> None:
    """Configure logging for the application.

    Args:
        log_path: Optional path for log file. If provided, enables rotating file logging.
        verbose: Log at DEBUG instead of INFO.
    """
    log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    # Console handler (stdout)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(log_format, date_format))
    root_logger.addHandler(console_handler)

    # File handler with rotation (if log_path provided)
    if log_path:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(log_format, date_format))
        root_logger.addHandler(file_handler)

    # Suppress noisy third-party loggers
    logging.getLogger("azure").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blob-mirror",
        description="Mirror all blobs of an Azure storage container into a local directory",
    )
    parser.add_argument(
        "output_dir",
        nargs="?",
        type=Path,
        help="Directory to download the blobs into (created if missing)",
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Optional YAML settings file",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Also write logs to this file (rotated at 10 MB)",
    )
    parser.add_argument(
        "--manifest", "-m",
        type=Path,
        help="Write a JSON summary of the run to this file",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point. Returns the process exit status."""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_file, args.verbose)

    # Load environment variables from .env files in the working directory
    load_dotenv_files()

    if args.output_dir is None:
        logger.error("Please define the output directory!")
        return ExitStatus.MISSING_OUTPUT_DIR

    try:
        config = load_config(args.config)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return ExitStatus.UNEXPECTED_ERROR

    try:
        connection_string = config.get_connection_string()
    except MissingSettingError as e:
        logger.error(str(e))
        return ExitStatus.MISSING_CONNECTION_STRING

    try:
        container_name = config.get_container_name()
    except MissingSettingError as e:
        logger.error(str(e))
        return ExitStatus.MISSING_CONTAINER

    if args.output_dir.is_file():
        logger.error(f"Output path must not be a file: {args.output_dir}")
        return ExitStatus.OUTPUT_IS_FILE

    engine = None
    try:
        storage = AzureBlobStorage(connection_string, container_name)
        engine = MirrorEngine(args.output_dir, storage, storage, container=container_name)
        status = engine.run()
    except Exception as e:
        logger.exception(f"🔥 EXCEPTION: {e}")
        status = ExitStatus.UNEXPECTED_ERROR
        if engine is not None:
            result = engine.result
        else:
            result = MirrorResult(container=container_name, output_root=str(args.output_dir.absolute()))
        # The engine records listing errors itself
        if result.error_type is None:
            result.mark_failed(e)
    else:
        if status != ExitStatus.SUCCESS:
            return status
        result = engine.result
        size_mb = result.bytes_downloaded / (1024 * 1024)
        logger.info(
            f"Mirror complete: {result.downloaded} downloaded ({size_mb:.1f} MB), "
            f"{result.skipped} skipped, {result.failed} failed "
            f"[{result.status}] ({result.duration_seconds:.1f}s total)"
        )

    if args.manifest:
        try:
            save_manifest(result, args.manifest)
        except OSError as e:
            logger.error(f"Failed to write manifest {args.manifest}: {e}")

    webhook_url = config.notifications.discord_webhook_url
    if webhook_url and should_notify(config.notifications.notify_on, result.status):
        send_discord_notification(webhook_url, result)

    return status


if __name__ == "__main__":
    sys.exit(main())
