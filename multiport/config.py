import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))

# anything other than "production" runs with hot reloading
APP_ENV = os.getenv("APP_ENV", "development")
DEVELOPMENT = APP_ENV.lower() != "production"
RELOAD = _flag("RELOAD", "true" if DEVELOPMENT else "false")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", "")

# Launcher settings
PORTS_CONFIG = os.getenv("PORTS_CONFIG", "ports.config.json")
SHUTDOWN_GRACE = float(os.getenv("SHUTDOWN_GRACE", "1.0"))
DEFAULT_PORTS = [3000, 3001, 3002, 3003]
