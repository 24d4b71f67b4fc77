import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import mask_secret, settings
from payment import vnpay_routes
from ticket import view

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    logger.info("Configured BASE_URL: %s", settings.BASE_URL)
    logger.info(
        "[VNPay] TMN_CODE=%s, RETURN_URL=%s, SECRET=%s, SPACE_PLUS=%s",
        settings.VNPAY_TMNCODE,
        settings.return_url,
        mask_secret(settings.VNPAY_HASH_SECRET_KEY),
        settings.VNPAY_SPACE_PLUS,
    )
    yield


app = FastAPI(title="VNPay payment broker", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(vnpay_routes.router, prefix="/payment/vnpay", tags=["vnpay"])
app.include_router(view.router, tags=["ticket"])


@app.get("/")
def home():
    return {"ok": True, "name": "VNPay payment broker", "returnUrl": settings.return_url}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
