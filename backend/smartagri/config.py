import os

from dotenv import load_dotenv

load_dotenv()

DATABASE_PATH = os.getenv("DATABASE_PATH", "data/smartagri.db")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_DIR = os.getenv("LOG_DIR", "logs")

# Log every SQL statement (development only)
DATABASE_ECHO = os.getenv("DATABASE_ECHO", "false").lower() == "true"

# Comma-separated list, "*" allows any origin
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# LLM used for advisory generation
AI_PROVIDER = os.getenv("AI_PROVIDER", "openai")  # "openai" or "anthropic"
AI_MODEL = os.getenv("AI_MODEL")  # Provider default when unset
AI_TEMPERATURE = float(os.getenv("AI_TEMPERATURE", "0.7"))
AI_MAX_TOKENS = int(os.getenv("AI_MAX_TOKENS", "1000"))

# Upper bound for a single LLM call, in seconds
AI_TIMEOUT = int(os.getenv("AI_TIMEOUT", "60"))

# Lifetime of bearer tokens issued at login/registration
TOKEN_TTL_HOURS = int(os.getenv("TOKEN_TTL_HOURS", "168"))

# OpenWeatherMap, used for weather-based farming advisories
WEATHER_API_KEY = os.getenv("WEATHER_API_KEY", "")
WEATHER_API_URL = os.getenv("WEATHER_API_URL", "https://api.openweathermap.org/data/2.5")
WEATHER_TIMEOUT = float(os.getenv("WEATHER_TIMEOUT", "20"))
