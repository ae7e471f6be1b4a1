# main.py
from dotenv import load_dotenv
load_dotenv()

import logging
import time
from fastapi import FastAPI, Request

from app import config
# routes are in app/ folder
from app.routes import router as give_router, ALLOWED_METHODS

# --- Logging setup ---
logging.basicConfig(
    format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
)
logger = logging.getLogger("meme-proxy")

app = FastAPI(title="Meme Proxy", version="0.1")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": ", ".join(ALLOWED_METHODS),
    "Access-Control-Allow-Headers": "Content-Type",
}


# --- Middleware: permissive CORS on every response (errors and pre-flight included) ---
@app.middleware("http")
async def add_cors_headers(request: Request, call_next):
    response = await call_next(request)
    for name, value in CORS_HEADERS.items():
        response.headers[name] = value
    return response


# --- Middleware for request metrics ---
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time

    logger.info(
        f"{request.method} {request.url.path} "
        f"completed_in={process_time:.3f}s "
        f"status={response.status_code}"
    )

    # include latency in response header
    response.headers["X-Process-Time"] = str(round(process_time, 3))
    return response


@app.get("/")
def read_root():
    logger.info("Root endpoint called")
    return {
        "message": "Hello from Meme Proxy!",
        "endpoints": ["/give", "/give/{count}", "/give/{subreddit}", "/give/{subreddit}/{count}"],
    }


# include routes
app.include_router(give_router, prefix="", tags=["memes"])

if __name__ == "__main__":
    import uvicorn
    # note: reload=True is for development only
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
