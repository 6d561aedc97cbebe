import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .errors import QuoteError
from .routers import quotes

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("quote_engine")

app = FastAPI(
    title=settings.APP_NAME,
    description="PCB and stencil quotation engine: price, shipping and delivery date",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(quotes.router, prefix="/api")


@app.exception_handler(QuoteError)
def quote_error_handler(request: Request, exc: QuoteError):
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=422, content=exc.to_dict())


@app.get("/health")
def health():
    return {"status": "ok", "app": "pcb-quote-engine"}
