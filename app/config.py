# app/config.py
import os
from dotenv import load_dotenv

# Load .env
load_dotenv()

# Upstream sources
REDDIT_API_BASE = os.getenv("REDDIT_API_BASE", "https://old.reddit.com/r")
FALLBACK_API_BASE = os.getenv("FALLBACK_API_BASE", "https://meme-api.com/gimme")

USER_AGENT = os.getenv(
    "USER_AGENT",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
)
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "10"))

# Request defaults / limits
DEFAULT_SUBREDDIT = os.getenv("DEFAULT_SUBREDDIT", "memes")
DEFAULT_COUNT = 1
MIN_COUNT = 1
MAX_COUNT = 100

# Cache
CACHE_TTL = int(os.getenv("CACHE_TTL", "300"))  # 5 minutes in seconds

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Backend API base URL used by the viewer and probe script
API_URL = os.getenv("API_URL", "http://127.0.0.1:8000")
