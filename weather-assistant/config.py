import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root (one level above weather-assistant/)
load_dotenv(dotenv_path=Path(__file__).parent.parent / ".env")

OPENWEATHER_API_KEY = os.getenv("OPENWEATHER_API_KEY", "")
OPENWEATHER_BASE_URL = os.getenv("OPENWEATHER_BASE_URL", "https://api.openweathermap.org/data/2.5")
OPENWEATHER_ICON_URL = os.getenv("OPENWEATHER_ICON_URL", "https://openweathermap.org/img/wn")

AI_PROXY_PORT = int(os.getenv("AI_PROXY_PORT", "8002"))
AI_PROXY_URL = os.getenv("AI_PROXY_URL", f"http://localhost:{AI_PROXY_PORT}")

PREFERENCES_PATH = Path(
    os.getenv("PREFERENCES_PATH", str(Path.home() / ".weathernow.json"))
).expanduser()
