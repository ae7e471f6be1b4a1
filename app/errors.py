# app/errors.py
"""
Error taxonomy for the /give endpoint.

Every error knows the HTTP status it maps to and the JSON body the route
sends back, so the route only has to catch MemeApiError.
"""

from typing import Any, Dict, Optional


class MemeApiError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_payload(self) -> Dict[str, Any]:
        if self.status_code >= 500:
            return {"error": "Internal server error", "message": self.message}
        return {"error": self.message}


class InvalidParamsError(MemeApiError):
    """Bad count or subreddit; raised before any network call."""
    status_code = 400


class NoMemesFound(MemeApiError):
    status_code = 404

    def __init__(self, message: str = "No memes found for this subreddit"):
        super().__init__(message)

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.message, "count": 0, "memes": []}


class MethodNotAllowed(MemeApiError):
    status_code = 405

    def __init__(self, message: str = "Method not allowed"):
        super().__init__(message)


class UpstreamError(MemeApiError):
    """A meme source failed (unreachable, bad status, malformed body).

    The pipeline catches this and moves on to the next source.
    """

    def __init__(self, source: str, message: str, upstream_status: Optional[int] = None):
        super().__init__(message)
        self.source = source
        self.upstream_status = upstream_status


class UpstreamRejected(UpstreamError):
    """The source is actively blocking this client (Reddit answers 403)."""


class FallbackExhausted(MemeApiError):
    """Every source failed."""
