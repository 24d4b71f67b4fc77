from __future__ import annotations

import math
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class CreatePaymentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Left untyped so bad amounts get a 400 with a readable message instead of a 422
    amount: Any = None
    order_id: Optional[Union[str, int]] = Field(None, alias="orderId")
    order_info: Optional[str] = Field(None, alias="orderInfo")
    bank_code: Optional[str] = Field(None, alias="bankCode")
    # Where the client wants to land after the gateway redirects back
    return_deeplink: Optional[str] = Field(None, alias="returnDeeplink")
    use_webview: bool = Field(False, alias="useWebView")


class PaymentParams(BaseModel):
    """Fields signed and sent to the gateway for a ``pay`` command."""

    model_config = ConfigDict(populate_by_name=True)

    version: str = Field("2.1.0", alias="vnp_Version")
    command: str = Field("pay", alias="vnp_Command")
    tmn_code: str = Field(alias="vnp_TmnCode")
    amount: int = Field(alias="vnp_Amount")  # VND x 100
    curr_code: str = Field("VND", alias="vnp_CurrCode")
    txn_ref: str = Field(alias="vnp_TxnRef")
    order_info: str = Field(alias="vnp_OrderInfo")
    order_type: str = Field("other", alias="vnp_OrderType")
    locale: str = Field("vn", alias="vnp_Locale")
    return_url: str = Field(alias="vnp_ReturnUrl")
    ip_addr: str = Field(alias="vnp_IpAddr")
    create_date: str = Field(alias="vnp_CreateDate")
    expire_date: str = Field(alias="vnp_ExpireDate")
    bank_code: Optional[str] = Field(None, alias="vnp_BankCode")

    def to_params(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


def parse_amount(value: Any) -> int:
    """
    Round a client supplied VND amount to an int.

    Raises ValueError with a client-facing message.
    """
    if value is None or value == "" or value is False:
        raise ValueError("amount is required")
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        raise ValueError("amount must be a positive number (VND)")
    if not math.isfinite(number):
        raise ValueError("amount must be a positive number (VND)")
    # round half up
    rounded = math.floor(number + 0.5)
    if rounded <= 0:
        raise ValueError("amount must be a positive number (VND)")
    return rounded


BLOCKED_SCHEMES = frozenset({"javascript", "data", "vbscript"})


def is_safe_return_target(value: str) -> bool:
    # Browsers drop whitespace and control chars inside a scheme ("java\tscript:")
    cleaned = "".join(ch for ch in value if ord(ch) > 0x20).lower()
    scheme, sep, _ = cleaned.partition(":")
    return not (sep and scheme in BLOCKED_SCHEMES)


def check_return_target(value: str) -> str:
    """Reject return targets that would run script when the browser follows them."""
    if not is_safe_return_target(value):
        raise ValueError("returnDeeplink scheme is not allowed")
    return value
