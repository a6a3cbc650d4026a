import os

from dotenv import load_dotenv
from loguru import logger


DOTENV_PATH = os.getenv("DOTENV_PATH", ".env")
if os.path.exists(DOTENV_PATH):
    load_dotenv(dotenv_path=DOTENV_PATH)
else:
    logger.debug(f"No .env file found at {DOTENV_PATH}, using defaults/environment variables")


# Controller timing
STAT_UPDATE_INTERVAL = float(os.getenv("STAT_UPDATE_INTERVAL", "1.0"))  # seconds between status pushes
CONTROLLER_POLL_INTERVAL = float(os.getenv("CONTROLLER_POLL_INTERVAL", "0.1"))  # bounds shutdown latency

# Display
DASHBOARD_FPS = int(os.getenv("DASHBOARD_FPS", "4"))
QUIT_KEY = os.getenv("DASHBOARD_QUIT_KEY", "q")

# Logging; the dashboard owns the terminal so log output only goes to a file
LOG_FILE = os.getenv("MINER_TUI_LOG_FILE") or None
LOG_LEVEL = os.getenv("MINER_TUI_LOG_LEVEL", "INFO")
