"""Configuration settings for FocusBlocks."""

import os
from pathlib import Path

from dotenv import load_dotenv


load_dotenv()

APP_NAME = "FocusBlocks"

# SQLite file holding every persisted slot
DB_PATH = Path(os.getenv("FOCUSBLOCKS_DB_PATH", str(Path.cwd() / "focusblocks.db")))

LOG_LEVEL = os.getenv("FOCUSBLOCKS_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

TICK_INTERVAL_MS = 1000
CLOCK_INTERVAL_MS = 1000

# Audio alert tones: (frequency Hz, duration s, delay s)
TONE_SAMPLE_RATE = 44100
TONES = {
    "beep": [(880.0, 0.25, 0.0)],
    "chime": [(660.0, 0.18, 0.0), (990.0, 0.22, 0.18)],
    "tick": [(440.0, 0.08, 0.0)],
}
