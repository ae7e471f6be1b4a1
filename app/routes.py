# app/routes.py
import logging
import re
from typing import List, Optional, Tuple

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from app import config
from app.errors import InvalidParamsError, MemeApiError, MethodNotAllowed, NoMemesFound
from app.models import SUBREDDIT_PATTERN, RequestParams
from app.services import MemeService

LOG = logging.getLogger("app.routes")

router = APIRouter()

ALLOWED_METHODS = ["GET", "OPTIONS"]
# every method is routed here so unsupported ones get our 405 body
ROUTED_METHODS = ["GET", "OPTIONS", "HEAD", "POST", "PUT", "PATCH", "DELETE"]

# plain ASCII decimals only; "1_2", "1e2" or non-latin digits are not counts
NUMBER_PATTERN = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)", re.ASCII)

# built once at import: one cache per process
_service = MemeService()


def get_meme_service() -> MemeService:
    """Process-wide service (and therefore process-wide cache)."""
    return _service


def _as_count(segment: str) -> Optional[int]:
    """Leading integer of a decimal segment ("2.9" -> 2), None if it is not a number."""
    if not NUMBER_PATTERN.fullmatch(segment):
        return None
    whole = segment.lstrip("+-").split(".")[0].lstrip("0") or "0"
    if len(whole) > 3:
        # out of range whatever the exact value
        whole = "1000"
    value = int(whole)
    return -value if segment.startswith("-") else value


def parse_give_path(path: str) -> Tuple[str, Optional[int]]:
    """
    Turn the part of the url after /give into (subreddit, count).

      ""            -> (memes, 1)
      "5"           -> (memes, 5)
      "dankmemes"   -> (dankmemes, 1)
      "dankmemes/5" -> (dankmemes, 5)

    count is None when the explicit count segment is not a number.
    Anything with more than two segments falls back to the defaults.
    """
    segments: List[str] = [s for s in path.split("/") if s]
    subreddit, count = config.DEFAULT_SUBREDDIT, config.DEFAULT_COUNT

    if len(segments) == 1:
        number = _as_count(segments[0])
        if number is None:
            subreddit = segments[0]
        else:
            count = number
    elif len(segments) == 2:
        subreddit = segments[0]
        count = _as_count(segments[1])

    return subreddit, count


def validate_params(subreddit: str, count: Optional[int]) -> RequestParams:
    if count is None or not config.MIN_COUNT <= count <= config.MAX_COUNT:
        raise InvalidParamsError(f"Count must be between {config.MIN_COUNT} and {config.MAX_COUNT}")
    if not re.fullmatch(SUBREDDIT_PATTERN, subreddit):
        raise InvalidParamsError("Invalid subreddit name")
    return RequestParams(subreddit=subreddit, count=count)


def _error_response(err: MemeApiError) -> JSONResponse:
    headers = {"Allow": ", ".join(ALLOWED_METHODS)} if isinstance(err, MethodNotAllowed) else None
    return JSONResponse(status_code=err.status_code, content=err.to_payload(), headers=headers)


@router.api_route("/give", methods=ROUTED_METHODS)
@router.api_route("/give/{path:path}", methods=ROUTED_METHODS)
def give(request: Request, service: MemeService = Depends(get_meme_service)):
    """
    GET /give[/<subreddit-or-count>[/<count>]]
    Returns {count, memes} with random image posts from the subreddit.
    """
    path = request.path_params.get("path", "")
    if request.method == "OPTIONS":
        # CORS pre-flight; headers come from the middleware in main.py
        return Response(status_code=200)

    try:
        if request.method != "GET":
            LOG.warning(f"{request.method} /give rejected")
            raise MethodNotAllowed()

        subreddit, count = parse_give_path(path)
        try:
            params = validate_params(subreddit, count)
        except InvalidParamsError as e:
            LOG.warning(f"bad /give request path={path!r}: {e.message}")
            raise

        result = service.get_memes(params)
        if result.count == 0:
            LOG.info(f"no memes matched for r/{params.subreddit} count={params.count}")
            raise NoMemesFound()

        return JSONResponse(status_code=200, content=result.to_dict())

    except MemeApiError as e:
        return _error_response(e)
    except Exception as e:
        LOG.exception(f"unhandled error serving /give/{path}: {e}")
        return JSONResponse(status_code=500, content={"error": "Internal server error", "message": str(e)})
