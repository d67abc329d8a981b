# main.py
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi_limiter import FastAPILimiter
from starlette.middleware.cors import CORSMiddleware
import routes
from config.cache import close_redis, get_redis
from config.settings import settings
from util.enums import Color, Environment, ErrorMessage
from util.errors import AppError
from util.logger import init_logger

logger = logging.getLogger(__name__)


async def _real_ip(request: Request) -> str:
    if settings.TRUST_PROXY:
        fwd = request.headers.get("x-forwarded-for")
        if fwd:
            return fwd.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


@asynccontextmanager
async def lifespan(fastApi: FastAPI):
    try:
        init_logger()
        print(f"{Color.GREEN}Initializing...{Color.RESET}")
        redis = await get_redis()
        await FastAPILimiter.init(redis, identifier=_real_ip)
        if not settings.LLM_API_KEY:
            logger.warning("startup.llm.unconfigured fallback=local_pattern")
        print(f"{Color.BLUE}Server Started{Color.RESET}")
    except Exception as e:
        print("Failed to connect to Redis:", e)
        raise

    try:
        yield
    finally:
        try:
            await close_redis()
        except Exception as e:
            print("Error closing Redis:", e)

        print(f"{Color.RED}Server Shutdown{Color.RESET}")


app: FastAPI = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "Accept", "apikey", "x-client-info"],
)


@app.get("/healthz")
async def healthz():
    return {"ok": True}


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    body = {"error": exc.message}
    if exc.details:
        body["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=body)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    details = "; ".join(
        f"{'.'.join(str(x) for x in err.get('loc', []))}: {err.get('msg', '')}"
        for err in exc.errors()
    )
    return JSONResponse(
        status_code=ErrorMessage.INVALID_REQUEST.value.http_status,
        content={"error": ErrorMessage.INVALID_REQUEST.value.message, "details": details},
    )


@app.exception_handler(429)
async def ratelimit_handler(request: Request, exc):
    return JSONResponse(
        status_code=429,
        content={
            "error": "rate_limited",
            "details": "Too many requests. Try again in 60s.",
        },
        headers={"Retry-After": "60"},
    )


routes.register_routes(app)

if __name__ == "__main__":
    import uvicorn

    reload = settings.APP_ENV == Environment.DEV
    uvicorn.run("main:app", host="127.0.0.1", port=8000, reload=reload)
