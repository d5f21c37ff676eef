import hmac
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from .config import get_settings
from .errors import AuthError, BotError, ParseError, TransportError, ValidationError
from .http_client import close_http_client
from .line.parse import parse_event
from .line.verify import verify_line_signature
from .llm.resolver import command_resolver
from .log import get_logger, setup_logging
from .pipeline.broadcast import broadcaster
from .pipeline.dispatch import dispatcher
from .pipeline.tasks import drain, spawn_detached
from .retrieval.stories import story_source

settings = get_settings()
setup_logging()
logger = get_logger("webhook")


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await drain(timeout=10)
    await close_http_client()


app = FastAPI(lifespan=lifespan)


@app.exception_handler(HTTPException)
async def http_error(request: Request, exc: HTTPException):
    return JSONResponse(status_code=exc.status_code, content={"success": False, "error": exc.detail})


@app.exception_handler(BotError)
async def bot_error(request: Request, exc: BotError):
    if isinstance(exc, AuthError):
        status = 401
    elif isinstance(exc, (ValidationError, ParseError)):
        status = 400
    elif isinstance(exc, TransportError):
        status = 502
    else:
        status = 500
    logger.error(f"{request.url.path} failed: {exc}")
    return JSONResponse(status_code=status, content={"success": False, "error": str(exc)})


def require_admin(request: Request):
    if not settings.ADMIN_TOKEN:
        return
    presented = request.headers.get("authorization", "")
    expected = f"Bearer {settings.ADMIN_TOKEN}"
    if not hmac.compare_digest(presented.encode("utf-8"), expected.encode("utf-8")):
        raise HTTPException(status_code=401, detail="Unauthorized")


@app.post("/webhook")
async def webhook(request: Request):
    # 1. Verify signature over the raw body
    body = await verify_line_signature(request)

    # 2. Parse body
    try:
        event = parse_event(body)
    except ParseError as e:
        logger.warning(f"Rejecting webhook: {e}")
        raise HTTPException(status_code=400, detail="Malformed body")

    # 3. Acknowledge now, work later
    spawn_detached(dispatcher.process(event), name="webhook-dispatch")
    return {"success": True}


@app.get("/health")
async def health():
    return {"success": True}


@app.get("/stories")
async def stories():
    try:
        items = await story_source.fetch()
    except (TransportError, ParseError) as e:
        logger.error(f"Feed unavailable: {e}")
        raise HTTPException(status_code=502, detail="Feed unavailable")
    return [
        {"index": i, "title": story.title, "link": story.link}
        for i, story in enumerate(items, start=1)
    ]


@app.get("/stories/latest-title")
async def latest_title():
    try:
        title = await story_source.latest_title()
    except (TransportError, ParseError) as e:
        logger.error(f"Feed unavailable: {e}")
        raise HTTPException(status_code=502, detail="Feed unavailable")
    return {"title": title}


@app.post("/conversation", dependencies=[Depends(require_admin)])
async def conversation(request: Request):
    """Resolve a text without delivering anything. Handy for prompt tuning."""
    text = (await request.body()).decode("utf-8", errors="replace").strip()
    if not text:
        raise HTTPException(status_code=400, detail="Empty message")
    command = await command_resolver.resolve(text)
    return command.model_dump()


@app.post("/broadcast/today", dependencies=[Depends(require_admin)])
async def broadcast_today():
    count = await broadcaster.broadcast_today_stories()
    return {"success": True, "stories": count}


@app.post("/broadcast/summary", dependencies=[Depends(require_admin)])
async def broadcast_summary():
    digest = await broadcaster.broadcast_daily_summary()
    return {"success": True, "summary": digest}
