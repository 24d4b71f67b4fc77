import pytest
from pydantic import ValidationError

from config import Settings, mask_secret


def test_blank_secret_is_fatal(monkeypatch):
    monkeypatch.setenv("VNPAY_HASH_SECRET_KEY", "   ")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_missing_secret_is_fatal(monkeypatch):
    monkeypatch.delenv("VNPAY_HASH_SECRET_KEY", raising=False)
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_secret_is_stripped_and_flags_parsed(monkeypatch):
    monkeypatch.setenv("VNPAY_HASH_SECRET_KEY", "  ABCDEF  ")
    monkeypatch.setenv("VNPAY_SPACE_PLUS", "1")
    cfg = Settings(_env_file=None)
    assert cfg.VNPAY_HASH_SECRET_KEY == "ABCDEF"
    assert cfg.VNPAY_SPACE_PLUS is True


def test_return_urls_derive_from_base_url(monkeypatch):
    monkeypatch.setenv("BASE_URL", "https://pay.example.com/")
    monkeypatch.setenv("VNPAY_RETURN_URL", "")
    cfg = Settings(_env_file=None)
    assert cfg.return_url == "https://pay.example.com/payment/vnpay/return"
    assert cfg.webview_return_url == "https://pay.example.com/payment/vnpay/return-webview"

    monkeypatch.setenv("VNPAY_RETURN_URL", "https://other/return")
    assert Settings(_env_file=None).return_url == "https://other/return"


def test_cors_origins(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "*")
    assert Settings(_env_file=None).cors_origins == ["*"]
    monkeypatch.setenv("CORS_ORIGINS", "http://a, http://b,")
    assert Settings(_env_file=None).cors_origins == ["http://a", "http://b"]


def test_mask_secret():
    assert mask_secret("9IQAKIAYAX2H1HCW") == "9IQA***1HCW"
    assert mask_secret("short") == "***"
    assert mask_secret("") == "N/A"
