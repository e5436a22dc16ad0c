"""
SmartFormat Configuration Module
Centralized configuration for the formatting engine.

Heuristic thresholds below were tuned empirically against pasted prompts and
notes. Keep them verbatim: changing any of them changes which documents get
headers, lists and paragraphs.
"""

import os
from pathlib import Path

import yaml

# Debug Mode Configuration
DEBUG_MODE = os.environ.get('DEBUG', 'false').lower() == 'true'

# Application Paths
APP_NAME = "SmartFormat"
APPDATA_DIR = Path(os.environ.get('APPDATA', os.path.expanduser('~/.config'))) / APP_NAME

# Logging Configuration
LOG_FORMAT = "[%(levelname)s %(asctime)s] %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"
# Detailed trace file, only written in DEBUG_MODE
DEBUG_LOG_FILE = Path(os.environ.get('SMARTFORMAT_DEBUG_LOG', 'debug_flow.txt'))

# Section Classification
# A block needs a score strictly greater than this to receive a section header.
# A single incidental keyword (e.g. "workflow" in a bio) scores exactly 3.
SECTION_SCORE_THRESHOLD = 3
# Auto-section is skipped once this fraction of blocks already has a header
AUTO_SECTION_HEADER_RATIO = 0.3
# "I" / "my" / "myself" occurrences that mark a block as first-person narrative
FIRST_PERSON_MIN_HITS = 3

# Paragraph Splitting (wall-of-text)
WALL_OF_TEXT_MIN_WORDS = 45         # Paragraphs shorter than this are never split
TRANSITION_SPLIT_MIN_WORDS = 20     # Words needed in a chunk before splitting at a transition
FALLBACK_SPLIT_MIN_WORDS = 80       # Mechanical split only for very long paragraphs...
FALLBACK_SPLIT_MIN_SENTENCES = 4    # ...that also have enough sentences
FALLBACK_SENTENCES_PER_CHUNK = 3

# Short-line header promotion
SHORT_HEADER_MIN_WORDS = 2
SHORT_HEADER_MAX_WORDS = 5
SHORT_HEADER_NEXT_PARAGRAPH_WORDS = 20

# List detection
RUN_ON_LIST_MIN_ITEMS = 3
RUN_ON_LIST_MAX_AVG_ITEM_LEN = 60
UNBULLETED_LIST_MIN_LINES = 3
UNBULLETED_LIST_MAX_WORDS = 15

# Final polish
SENTENCE_ENDING_MIN_CHARS = 30
SENTENCE_ENDING_MIN_WORDS = 6

# Early-exit detection
CODE_LINE_RATIO = 0.5
TABLE_LINE_RATIO = 0.7
LANGUAGE_MIN_INDICATORS = 2

# Format-type label: at most this many distinct labels before "+N more"
FORMAT_TYPE_MAX_LABELS = 3

# Idempotency stabilization
# 2 = run the pipeline once more on its own output and keep the second pass.
# Larger values keep iterating until two passes agree or the cap is hit.
STABILIZATION_MAX_PASSES = 2

# --- Optional settings file ---
SETTINGS_FILE = Path(os.environ.get('SMARTFORMAT_CONFIG', str(APPDATA_DIR / "formatter.yaml")))
SETTINGS = {}


def load_settings(path: Path | None = None) -> dict:
    """
    Loads user overrides from formatter.yaml.

    Only a small set of keys is honoured (see get_setting). A missing file is
    normal; a corrupt one is logged and ignored.

    Args:
        path: Settings file to read. Defaults to SETTINGS_FILE.

    Returns:
        The parsed settings dictionary (empty on any failure).
    """
    global SETTINGS
    settings_path = Path(path) if path else SETTINGS_FILE
    try:
        with open(settings_path, encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
        SETTINGS = data if isinstance(data, dict) else {}
        if DEBUG_MODE and SETTINGS:
            from smartformat.logging_config import debug_log
            debug_log(f"[Config] Loaded {len(SETTINGS)} settings from {settings_path}")
    except FileNotFoundError:
        SETTINGS = {}
    except (OSError, yaml.YAMLError) as e:
        from smartformat.logging_config import debug_log
        debug_log(f"[Config] ERROR: Failed to load or parse settings file: {e}")
        SETTINGS = {}
    return SETTINGS


def get_setting(key: str, default: int) -> int:
    """
    Returns an integer setting from formatter.yaml, with fallback.

    Non-integer or non-positive values are ignored.

    Args:
        key: Setting name (e.g., 'stabilization_max_passes').
        default: Value used when the key is absent or invalid.
    """
    value = SETTINGS.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        return default
    return value


# Load settings on module import
load_settings()
# --- End optional settings file ---
