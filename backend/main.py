import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

load_dotenv()

from backend.app.routes.checkout import router as checkout_router
from backend.app.routes.contracts import router as contracts_router
from backend.app.routes.offers import admin_router as offers_admin_router
from backend.app.routes.offers import router as offers_router
from backend.app.routes.plans import router as plans_router
from backend.app.services.checkout import get_checkout_config, get_checkout_service
from backend.middleware_perf import RequestTimingMiddleware

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("checkout")

app = FastAPI(title="Checkout API")

app.add_middleware(RequestTimingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(get_checkout_config().cors_allow_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(plans_router)
app.include_router(checkout_router)
app.include_router(offers_router)
app.include_router(offers_admin_router)
app.include_router(contracts_router)


@app.on_event("startup")
def warm_checkout_services() -> None:
    service = get_checkout_service()
    logger.info("Checkout ready (gateway key %s, currency %s)", service.gateway.key_id, service.currency)


@app.get("/")
def health():
    return {"status": "ok", "message": "Checkout backend is running"}

# run: uvicorn backend.main:app --host 127.0.0.1 --port 8000 --reload
