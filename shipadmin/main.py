import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shipadmin.api.routers.shipping_charges import router as shipping_charges_router
from shipadmin.api.routers.shipping_settings import router as shipping_settings_router
from shipadmin.core.config import settings

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

app = FastAPI(title="Shipping Admin API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS.split(",") if settings.CORS_ALLOW_ORIGINS else ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(shipping_charges_router)
app.include_router(shipping_settings_router)


@app.get("/health")
def health():
    return {"status": "up"}
