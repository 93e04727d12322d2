import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "postgresql+asyncpg://localhost:5432/gridpulse")
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

GRID_SOURCE_URL = os.getenv("GRID_SOURCE_URL", "http://power.gov.ng/")
NEWS_SOURCE_URL = os.getenv("NEWS_SOURCE_URL", "https://nerc.gov.ng/media-category/news/")
FETCH_TIMEOUT_S = float(os.getenv("FETCH_TIMEOUT_S", "20"))

# "stable" keeps the dashboard contract; "unknown" stops reporting normalcy without a reading
GRID_UNKNOWN_FREQUENCY_STATUS = os.getenv("GRID_UNKNOWN_FREQUENCY_STATUS", "stable").strip().lower()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
