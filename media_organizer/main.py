import argparse
import logging
import shlex
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from .core import MediaOrganizerApp
from .exceptions import ArgumentError, FileOperationError, GpsPolicyAbort, ProviderUnavailableError
from .models import RunConfig


def setup_logging(verbose: bool, log_file: Optional[Path] = None):
    """Sets up logging to the console and, if requested, to a file."""
    log_level = logging.DEBUG if verbose else logging.INFO

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=handlers
    )
    logging.getLogger().setLevel(log_level)

    # Silence chatty libraries
    logging.getLogger("exifread").setLevel(logging.ERROR)


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        prog="media-organize",
        description="Copy photos (jpg/jpeg) and movies (mov/mp4) from src into dst/<year>/, "
                    "named by capture time."
    )

    p.add_argument("paths", nargs="*", type=Path, metavar="PATH", help="Source directory, then destination root")

    p.add_argument("-v", "--verbose", action=argparse.BooleanOptionalAction, default=False,
                   help="Run verbosely (log every copy and every photo missing GPS data)")
    p.add_argument("--dry-run", action="store_true",
                   help="Run the whole program but do not change any files. Implies --verbose.")
    p.add_argument("--enforce-gps", action=argparse.BooleanOptionalAction, default=True,
                   help="Abort if any photo misses GPS data (default: on). "
                        "With --no-enforce-gps you are asked whether to continue instead.")
    p.add_argument("--continue-on-error", action="store_true",
                   help="Keep copying after a failed copy (default: abort on the first failure)")
    p.add_argument("--workers", type=int, default=1,
                   help="Parallel metadata readers (default: 1)")
    p.add_argument("--log-file", type=Path, default=None, help="Also write the log to this file")

    return p.parse_args(argv)


def ask_yes_no(question: str, default: bool) -> bool:
    hint = "Y/n" if default else "y/N"
    try:
        answer = input(f"{question} ({hint}) ").strip().lower()
    except EOFError:
        return False
    if not answer:
        return default
    return answer in ("y", "yes")


def confirm_continue(question: str) -> bool:
    return ask_yes_no(question, default=False)


def validate_paths(paths: List[Path]) -> Tuple[Path, Path]:
    if len(paths) != 2:
        joined = " ".join(str(p) for p in paths)
        raise ArgumentError(f"Wrong number of arguments, expected 2 (src and dst), got {len(paths)}: {joined}")

    src, dst = paths
    if not src.is_dir():
        raise ArgumentError(f"{src} is not a directory")
    if dst.exists() and not dst.is_dir():
        raise ArgumentError(f"{dst} is not a directory. Aborting")
    return src, dst


def prepare_destination(dst: Path, run_config: RunConfig):
    """
    Offers to create a missing destination root.
    The directory itself is made by the copy step together with the first
    year folder, so a GPS abort leaves nothing behind.
    """
    if dst.is_dir():
        return
    if not ask_yes_no(f"{dst} does not exist. Create it?", default=True):
        raise ArgumentError(f"{dst} does not exist. Aborting")
    if run_config.verbose:
        logging.info(f"Creating directory {shlex.quote(str(dst))}")


def main(argv=None):
    args = parse_args(argv)
    run_config = RunConfig(
        verbose=args.verbose,
        dry_run=args.dry_run,
        enforce_gps=args.enforce_gps,
        continue_on_error=args.continue_on_error,
        workers=max(1, args.workers),
    )

    setup_logging(run_config.verbose, args.log_file)

    try:
        src_root, dest_root = validate_paths(args.paths)
        prepare_destination(dest_root, run_config)
    except ArgumentError as e:
        logging.error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        logging.warning("Operation cancelled by user.")
        sys.exit(1)

    logging.info("=== Media Organizer Started ===")
    logging.info(f"Source: {src_root}")
    logging.info(f"Dest:   {dest_root}")

    app = MediaOrganizerApp(run_config, confirm=confirm_continue)

    try:
        summary = app.organize(src_root, dest_root)
    except GpsPolicyAbort as e:
        logging.error(str(e))
        sys.exit(1)
    except (ProviderUnavailableError, FileOperationError) as e:
        logging.error(str(e))
        logging.error("Aborting. Files copied so far are kept; re-running is safe.")
        sys.exit(1)
    except KeyboardInterrupt:
        logging.warning("Operation cancelled by user.")
        sys.exit(1)
    except Exception:
        logging.exception("Fatal error during organization.")
        sys.exit(1)

    if summary.failures:
        sys.exit(1)


if __name__ == "__main__":
    main()
