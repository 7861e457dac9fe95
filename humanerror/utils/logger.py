"""
Loguru session setup shared by the command-line scripts.

Each run gets a file sink (everything, DEBUG and up) and a console sink on
stderr (INFO by default; the roast CLI raises it to WARNING so the reveal
stays readable).
The file starts with a provenance block recording how the run was invoked.

Context-specific wrappers live in contexts/{context}/logger.py.
"""

import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv
from loguru import logger

from humanerror import __version__

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <7} | {message}"
CONSOLE_FORMAT = "<dim>{time:HH:mm:ss}</dim> | <level>{level: <7}</level> | <level>{message}</level>"

# Console colors per level, applied on top of loguru's defaults
LEVEL_COLORS = {
    "WARNING": "<yellow>",
    "ERROR": "<red>",
    "CRITICAL": "<bold><red>",
}


def session_dir(prefix: str, base: Optional[Path] = None) -> Path:
    """
    Directory for one logging session, e.g. outs/logs/roast_20251114_123456.

    Args:
        prefix: Run kind (usually the script name)
        base: Parent directory (default: LOGS_PATH)
    """
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return (base or LOGS_PATH) / f"{prefix}_{stamp}"


def setup_logger(
    context_name: str,
    log_dir: Optional[Path] = None,
    extra_provenance: Optional[Dict[str, object]] = None,
    level_colors: Optional[Dict[str, str]] = None,
    console_level: str = "INFO",
) -> Path:
    """
    Replace loguru's handlers with a file sink and a console sink.

    Args:
        context_name: Names the log file ("<context_name>.log")
        log_dir: Session directory (default: a fresh session_dir(context_name))
        extra_provenance: Extra key-value pairs for the provenance block
        level_colors: Console color overrides (e.g., {"INFO": "<cyan>"})
        console_level: Minimum level shown on the console

    Returns:
        Path to the log file

    Example:
        log_file = setup_logger("analysis", extra_provenance={"Catalog": "roles.yaml"})
    """
    if log_dir is None:
        log_dir = session_dir(context_name)
    log_dir = Path(log_dir)
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()
    for level_name, color in {**LEVEL_COLORS, **(level_colors or {})}.items():
        logger.level(level_name, color=color)

    logger.add(log_file, format=FILE_FORMAT, level="DEBUG", encoding="utf-8")
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=console_level, colorize=True)

    log_provenance(extra_provenance)
    return log_file


def log_provenance(extra_context: Optional[Dict[str, object]] = None) -> None:
    """Write the provenance block (invocation, environment, extras) at debug level."""
    entries = {
        "Script": sys.argv[0],
        "Command": " ".join(sys.argv),
        "Working directory": Path.cwd(),
        "Python": sys.version.split()[0],
        "humanerror": __version__,
        **(extra_context or {}),
    }

    logger.debug("=" * 80)
    for key, value in entries.items():
        logger.debug(f"{key}: {value}")
    logger.debug("=" * 80)
