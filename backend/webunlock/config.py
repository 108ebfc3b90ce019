import os
from typing import List

from dotenv import load_dotenv

# Navigation and extraction constants
DEFAULT_NAVIGATION_TIMEOUT_MS = 10000
SELECTOR_WAIT_TIMEOUT_MS = 5000
SETTLE_DELAY_MS = 1000  # grace period for client-rendered content
RETRY_BACKOFF_MS = 1000
SCREENSHOT_VIEWPORT = {"width": 1920, "height": 1080}

BASE_BROWSER_ARGS = [
    '--no-sandbox',
    '--disable-setuid-sandbox',
    '--disable-dev-shm-usage',
    '--disable-accelerated-2d-canvas',
    '--no-first-run',
    '--no-zygote',
    '--disable-gpu',
]


def _split(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings:
    def __init__(self):
        # Load environment variables from the working directory, then backend/.env
        load_dotenv()
        script_dir = os.path.dirname(os.path.abspath(__file__))
        backend_env = os.path.join(script_dir, '..', '.env')
        if os.path.exists(backend_env):
            load_dotenv(backend_env, override=True)

        self.host = os.getenv('WEBUNLOCK_HOST', '0.0.0.0')
        self.port = int(os.getenv('PORT', '3000'))
        self.log_level = os.getenv('WEBUNLOCK_LOG_LEVEL', 'INFO').upper()
        self.cors_origins = _split(
            os.getenv('WEBUNLOCK_CORS_ORIGINS', 'http://localhost:3000,http://localhost:3001')
        )
        self.headless = os.getenv('WEBUNLOCK_HEADLESS', 'true').lower() not in ('0', 'false', 'no')
        self.browser_args = BASE_BROWSER_ARGS + _split(os.getenv('WEBUNLOCK_BROWSER_ARGS', ''))


settings = None


def get_settings() -> Settings:
    global settings
    if settings is None:
        settings = Settings()
    return settings
