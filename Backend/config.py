from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    VNPAY_TMNCODE: str
    VNPAY_HASH_SECRET_KEY: str
    VNPAY_PAYMENT_URL: str = "https://sandbox.vnpayment.vn/paymentv2/vpcpay.html"
    VNPAY_RETURN_URL: str = ""
    VNPAY_SPACE_PLUS: bool = False
    VNPAY_EXPIRE_MINUTES: int = 15
    VNPAY_MIN_AMOUNT: int = 2000
    DEBUG_VNPAY: bool = False

    BASE_URL: str = "http://localhost:3001"
    PORT: int = 3001
    APP_SCHEME: str = "movieapp"

    RETURN_TARGET_TTL_SECONDS: int = 30 * 60
    RETURN_TARGET_MAX_ENTRIES: int = 10000

    CORS_ORIGINS: str = "*"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

    @field_validator("VNPAY_TMNCODE", "VNPAY_HASH_SECRET_KEY")
    @classmethod
    def _strip_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @property
    def return_url(self) -> str:
        return self.VNPAY_RETURN_URL or f"{self.BASE_URL.rstrip('/')}/payment/vnpay/return"

    @property
    def webview_return_url(self) -> str:
        return f"{self.BASE_URL.rstrip('/')}/payment/vnpay/return-webview"

    @property
    def cors_origins(self) -> list[str]:
        raw = self.CORS_ORIGINS.strip()
        if raw == "*" or not raw:
            return ["*"]
        return [x.strip() for x in raw.split(",") if x.strip()]


def mask_secret(secret: str) -> str:
    if not secret:
        return "N/A"
    if len(secret) <= 8:
        return "***"
    return f"{secret[:4]}***{secret[-4:]}"


settings = Settings()
