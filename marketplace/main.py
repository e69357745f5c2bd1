from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.trustedhost import TrustedHostMiddleware

from marketplace.db import settings
from marketplace.errors import DomainError
from marketplace.observability import RequestLoggingMiddleware, configure_logging
from marketplace.routers import languages, product_urls, tenant

configure_logging(settings.log_level)

app = FastAPI(title="Marketplace API")

ALLOWED_ORIGINS = [
    # Dev
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

cors_origins = settings.CORS_ALLOWED_ORIGINS_LIST or ALLOWED_ORIGINS
trusted_hosts = settings.TRUSTED_HOSTS_LIST

if trusted_hosts:
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=trusted_hosts)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_methods=["*"], allow_headers=["*"], allow_credentials=True,
)
app.add_middleware(RequestLoggingMiddleware)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.get("/health")
def health(): return {"ok": True}

app.include_router(languages.router)
app.include_router(tenant.router)
app.include_router(product_urls.router)
