import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_APPEARANCE = "system"


def read_appearance(path: Path) -> str:
    try:
        theme = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return DEFAULT_APPEARANCE
    except (OSError, ValueError) as e:
        logger.error("Error reading or parsing theme file %s: %s", path, e)
        return DEFAULT_APPEARANCE
    return theme.get("appearance", DEFAULT_APPEARANCE) if isinstance(theme, dict) else DEFAULT_APPEARANCE


def save_appearance(path: Path, appearance: str) -> bool:
    """Persist the preference into the theme file.

    Best effort: file errors are logged and reported as False. Returns True
    only when the file was rewritten.
    """
    try:
        theme = json.loads(path.read_text(encoding="utf-8")) if path.exists() else {}
        if not isinstance(theme, dict):
            theme = {}
    except (OSError, ValueError) as e:
        logger.error("Error reading or parsing theme file %s: %s", path, e)
        return False

    if theme.get("appearance") == appearance:
        logger.info("Theme already set to: %s, skipping update", appearance)
        return False

    theme["appearance"] = appearance
    try:
        path.write_text(json.dumps(theme, indent=2), encoding="utf-8")
    except OSError as e:
        logger.error("Error writing theme file %s: %s", path, e)
        return False

    logger.info("Theme updated to: %s", appearance)
    return True
