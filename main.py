import time
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from database import COLLECTIONS, create_store, get_store
from documents import build_job, build_linen_order, build_quote, checklist_updates
from logging_config import logger, setup_logging
from settings import Settings, settings as default_settings

JSON_METHODS = ("POST", "PATCH", "PUT")
ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]

router = APIRouter()


# Utility helpers

def send_error(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"ok": False, "error": message, **extra})


def send_ok(doc: dict, status_code: int = 200) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=jsonable_encoder({"ok": True, **doc}))


async def read_json(request: Request) -> Any:
    raw = await request.body()
    if not raw.strip():
        return None
    try:
        return await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid JSON body")


async def fetch_or_404(store, collection: str, doc_id: str, label: str) -> dict:
    try:
        doc = await run_in_threadpool(store.get_document, collection, doc_id)
    except Exception:
        logger.exception("fetch_failed", collection=collection, id=doc_id)
        raise HTTPException(status_code=500, detail=f"Failed to fetch {label}")
    if doc is None:
        raise HTTPException(status_code=404, detail=f"{label.capitalize()} not found")
    return doc


async def create_or_500(store, collection: str, document: dict, label: str) -> dict:
    try:
        return await run_in_threadpool(store.create_document, collection, document)
    except Exception:
        logger.exception("create_failed", collection=collection)
        raise HTTPException(status_code=500, detail=f"Failed to create {label}")


# Root + health

@router.get("/")
@router.get("/api")
async def read_root(request: Request):
    settings = request.app.state.settings
    msg = "Welcome to LuxeClean API root 🚀"
    if "application/json" in request.headers.get("accept", ""):
        return {"ok": True, "message": msg, "env": settings.APP_ENV, "service": settings.SERVICE_NAME}
    return PlainTextResponse(msg)


@router.get("/health")
@router.get("/api/health")
async def health(request: Request):
    settings = request.app.state.settings
    return {"ok": True, "env": settings.APP_ENV, "service": settings.SERVICE_NAME}


# Quotes

@router.post("/quotes")
async def create_quote(request: Request, store=Depends(get_store)):
    quote = build_quote(await read_json(request))
    created = await create_or_500(store, COLLECTIONS["quotes"], quote.to_document(), "quote")
    logger.info("quote_created", id=created["id"], total=quote.pricing.total)
    return send_ok(created, status_code=201)


@router.get("/quotes/{quote_id}")
async def get_quote(quote_id: str, store=Depends(get_store)):
    return send_ok(await fetch_or_404(store, COLLECTIONS["quotes"], quote_id, "quote"))


# Jobs (turnovers)

@router.post("/jobs")
async def create_job(request: Request, store=Depends(get_store)):
    job = build_job(await read_json(request))
    created = await create_or_500(store, COLLECTIONS["jobs"], job.to_document(), "job")
    logger.info("job_created", id=created["id"], total=job.pricing.total)
    return send_ok(created, status_code=201)


@router.get("/jobs/{job_id}")
async def get_job(job_id: str, store=Depends(get_store)):
    return send_ok(await fetch_or_404(store, COLLECTIONS["jobs"], job_id, "job"))


@router.patch("/jobs/{job_id}/checklist")
async def update_checklist(job_id: str, request: Request, store=Depends(get_store)):
    update = checklist_updates(await read_json(request))

    try:
        updated = await run_in_threadpool(store.update_document, COLLECTIONS["jobs"], job_id, update)
    except Exception:
        logger.exception("checklist_update_failed", id=job_id)
        raise HTTPException(status_code=500, detail="Failed to update checklist")
    if updated is None:
        raise HTTPException(status_code=404, detail="Job not found")

    logger.info("checklist_updated", id=job_id, fields=sorted(update))
    return send_ok(updated)


# Linen orders

@router.post("/linen/orders")
async def create_linen_order(request: Request, store=Depends(get_store)):
    order = build_linen_order(await read_json(request))
    created = await create_or_500(store, COLLECTIONS["linen_orders"], order.to_document(), "linen order")
    logger.info("linen_order_created", id=created["id"])
    return send_ok(created, status_code=201)


@router.get("/linen/orders/{order_id}")
async def get_linen_order(order_id: str, store=Depends(get_store)):
    return send_ok(await fetch_or_404(store, COLLECTIONS["linen_orders"], order_id, "linen order"))


# JSON 404 fallback, registered last
@router.api_route("/{path:path}", methods=ALL_METHODS, include_in_schema=False)
async def not_found(request: Request):
    return send_error(404, "Not Found", path=request.url.path)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # methods outside ALL_METHODS reach no route at all
    if exc.status_code == 405:
        return send_error(404, "Not Found", path=request.url.path)
    return send_error(exc.status_code, str(exc.detail))


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("unhandled_error", endpoint=request.url.path, method=request.method)
    return send_error(500, "Internal Server Error")


def create_app(store=None, settings: Optional[Settings] = None) -> FastAPI:
    """Build the API. Without an injected store, one is opened at startup and closed at shutdown."""
    settings = settings or default_settings
    setup_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_store = app.state.store is None
        if owns_store:
            app.state.store = create_store(settings)
        logger.info("startup", service=settings.SERVICE_NAME, env=settings.APP_ENV)
        yield
        if owns_store:
            app.state.store.close()

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store

    @app.middleware("http")
    async def require_json_content_type(request: Request, call_next):
        if request.method in JSON_METHODS:
            if "application/json" not in request.headers.get("content-type", ""):
                return send_error(415, "Content-Type must be application/json")
        return await call_next(request)

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        start = time.time()
        bound_logger = logger.bind(method=request.method, endpoint=request.url.path)
        bound_logger.info("request_started")
        response = await call_next(request)
        latency_ms = round((time.time() - start) * 1000, 2)
        bound_logger.bind(status_code=response.status_code, latency_ms=latency_ms).info("request_finished")
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=default_settings.PORT)
