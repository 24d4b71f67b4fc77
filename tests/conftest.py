import os
import sys
from pathlib import Path

import pytest

# Ensure Backend/ is on sys.path so `import config` works under all pytest import modes.
BACKEND = Path(__file__).resolve().parents[1] / "Backend"
if str(BACKEND) not in sys.path:
    sys.path.insert(0, str(BACKEND))

# config.settings is built on import and needs these.
os.environ["VNPAY_TMNCODE"] = "TESTTMN1"
os.environ["VNPAY_HASH_SECRET_KEY"] = "TESTSECRET0123456789ABCDEFGHIJKL"
os.environ["VNPAY_PAYMENT_URL"] = "https://sandbox.vnpayment.vn/paymentv2/vpcpay.html"
os.environ["VNPAY_RETURN_URL"] = ""
os.environ["VNPAY_SPACE_PLUS"] = "0"
os.environ["VNPAY_MIN_AMOUNT"] = "2000"
os.environ["DEBUG_VNPAY"] = "0"
os.environ["BASE_URL"] = "http://localhost:3001"
os.environ["APP_SCHEME"] = "movieapp"


@pytest.fixture
def client():
    from fastapi.testclient import TestClient

    from app import app

    return TestClient(app)


@pytest.fixture
def secret():
    from config import settings

    return settings.VNPAY_HASH_SECRET_KEY
