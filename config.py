import os
import sys

# Base directory (PyInstaller bundles unpack into _MEIPASS)
IS_FROZEN = getattr(sys, "frozen", False)
BASE_DIR = sys._MEIPASS if IS_FROZEN else os.path.dirname(os.path.abspath(__file__))

# Paths
STATIC_DIR = os.getenv("STATIC_DIR", os.path.join(BASE_DIR, "static"))
DATA_DIR = os.getenv("DATA_DIR", os.path.join(BASE_DIR, "data"))
TOPICS_FILE = os.path.join(DATA_DIR, "topics.json")
LOG_FILE = os.getenv("LOG_FILE", os.path.join(BASE_DIR, "launch.log"))

# Server
DEFAULT_HOST = os.getenv("HOST", "127.0.0.1")
DEFAULT_PORT = int(os.getenv("PORT", "8000"))
DEFAULT_TIMEOUT = 15.0
QUIZ_BASE_URL = os.getenv("QUIZ_BASE_URL", f"http://{DEFAULT_HOST}:{DEFAULT_PORT}")

# Sessions
SESSION_TTL = int(os.getenv("SESSION_TTL", "3600"))   # 1 hour
SESSION_CLEANUP_INTERVAL = 300                         # seconds

# Quiz
QUIZ_DURATION_SECONDS = int(os.getenv("QUIZ_DURATION_SECONDS", "1800"))  # 30 minutes
TIMER_WARNING_SECONDS = 300     # last 5 minutes are shown as a warning
VIOLATION_CEILING = 3
STANDARD_COUNTS = (5, 10, 20, 30, 50)
