# scripts/probe_sources.py
"""
Probe both meme sources for a handful of subreddits, bypassing the cache.
Reports whether Reddit answered, how many posts survived filtering, and
whether meme-api.com answered.
Saves results to data/probe_results.json
Run: python scripts/probe_sources.py [subreddit ...]
"""
import json
import os
from typing import List, Dict

# Make sure project root is on path when running
import sys
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.errors import UpstreamError, UpstreamRejected
from app.models import RequestParams
from app.services import MemeService, PLACEHOLDER_AUTHOR

SUBREDDITS: List[str] = ["memes", "dankmemes", "wholesomememes", "ProgrammerHumor", "me_irl"]
PROBE_COUNT = 10
RESULTS_PATH = "data/probe_results.json"


def probe(service: MemeService, subreddit: str, count: int = PROBE_COUNT) -> Dict:
    params = RequestParams(subreddit=subreddit, count=count)
    row: Dict = {"subreddit": subreddit, "requested": count}

    try:
        result = service.fetch_from_reddit(params)
        row["reddit"] = "ok"
        row["reddit_memes"] = result.count
    except UpstreamRejected as e:
        row["reddit"] = "blocked"
        row["reddit_error"] = e.message
    except UpstreamError as e:
        row["reddit"] = "error"
        row["reddit_error"] = e.message

    try:
        result = service.fetch_from_fallback(params)
        placeholder = any(m.author == PLACEHOLDER_AUTHOR for m in result.memes)
        row["fallback"] = "placeholder" if placeholder else "ok"
        row["fallback_memes"] = 0 if placeholder else result.count
    except UpstreamError as e:
        row["fallback"] = "error"
        row["fallback_error"] = e.message

    return row


def main(subreddits: List[str]) -> List[Dict]:
    service = MemeService()
    rows = []
    for sub in subreddits:
        row = probe(service, sub)
        rows.append(row)
        print(
            f"r/{sub}: reddit={row['reddit']} ({row.get('reddit_memes', 0)}/{PROBE_COUNT}) "
            f"fallback={row['fallback']} ({row.get('fallback_memes', 0)})"
        )

    os.makedirs("data", exist_ok=True)
    with open(RESULTS_PATH, "w", encoding="utf-8") as f:
        json.dump(rows, f, indent=2)
    print(f"Saved {len(rows)} rows to {RESULTS_PATH}")
    return rows


if __name__ == "__main__":
    main(sys.argv[1:] or SUBREDDITS)
