# dashboard_utils.py
from dotenv import load_dotenv
import os
import requests
import streamlit as st

# Load .env automatically
load_dotenv()

# Backend API base URL (from .env or fallback)
BASE_URL = os.getenv("API_URL", "http://127.0.0.1:8000")

# Detect plotly availability (used by the viewer for the upvote chart)
try:
    import plotly.express as px  # noqa: F401
    PLOTLY_AVAILABLE = True
except Exception:
    PLOTLY_AVAILABLE = False


def give_path(subreddit: str, count: int) -> str:
    """Build the /give path the way the API parses it."""
    subreddit = (subreddit or "").strip().strip("/")
    if subreddit.startswith("r/"):
        subreddit = subreddit[2:]
    if not subreddit:
        return f"/give/{int(count)}"
    return f"/give/{subreddit}/{int(count)}"


# Simple helper to fetch JSON from backend (cached by Streamlit for as long as the API caches)
@st.cache_data(ttl=300)
def fetch_json(path: str, params: dict | None = None):
    try:
        resp = requests.get(f"{BASE_URL}{path}", params=params or {}, timeout=15)
    except Exception as e:
        return {"error": str(e)}
    try:
        data = resp.json()
    except ValueError:
        return {"error": f"HTTP {resp.status_code}: {resp.text[:200]}"}
    if resp.status_code >= 400 and isinstance(data, dict):
        # API errors carry {error[, message]}
        msg = data.get("error", f"HTTP {resp.status_code}")
        if data.get("message"):
            msg = f"{msg}: {data['message']}"
        return {"error": msg, "status": resp.status_code}
    return data
