import datetime
import json
import logging

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse

from config import settings
from payment.schemas import (
    CreatePaymentRequest,
    PaymentParams,
    check_return_target,
    is_safe_return_target,
    parse_amount,
)
from rendering import templates
from return_store import ReturnTargetStore
from vnpay import SECURE_HASH_KEY, SignMode, build_query, encode_component, verify

logger = logging.getLogger(__name__)

router = APIRouter()

# Gateway timestamps are Vietnam local time
VN_TZ = datetime.timezone(datetime.timedelta(hours=7))
DATE_FORMAT = "%Y%m%d%H%M%S"

return_targets = ReturnTargetStore(
    ttl_seconds=settings.RETURN_TARGET_TTL_SECONDS,
    max_entries=settings.RETURN_TARGET_MAX_ENTRIES,
)


def _now() -> datetime.datetime:
    return datetime.datetime.now(VN_TZ)


def get_client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    if request.client and request.client.host:
        return request.client.host
    return "127.0.0.1"


def _build_params(body: CreatePaymentRequest, request: Request, amount: int, return_url: str):
    now = _now()
    stamp = now.strftime(DATE_FORMAT)

    # A fresh txn ref per attempt, the gateway rejects a reused ref with a changed amount
    if body.order_id:
        base_ref = str(body.order_id)
        txn_ref = f"{base_ref}-{stamp}"
    else:
        base_ref = f"ORDER_{stamp}"
        txn_ref = base_ref

    params = PaymentParams(
        tmn_code=settings.VNPAY_TMNCODE,
        amount=amount * 100,
        txn_ref=txn_ref,
        order_info=body.order_info or f"Thanh toan don hang {txn_ref}",
        return_url=return_url,
        ip_addr=get_client_ip(request),
        create_date=stamp,
        expire_date=(now + datetime.timedelta(minutes=settings.VNPAY_EXPIRE_MINUTES)).strftime(DATE_FORMAT),
        bank_code=body.bank_code or None,
    )
    return base_ref, params


def _verify_callback(params: dict) -> bool:
    return verify(
        settings.VNPAY_HASH_SECRET_KEY,
        params,
        params.get(SECURE_HASH_KEY),
        SignMode.ENCODED,
        space_plus=settings.VNPAY_SPACE_PLUS,
    )


# -----------------------
# CREATE PAYMENT URL
# -----------------------
@router.post("/create")
def create_payment(body: CreatePaymentRequest, request: Request):
    try:
        amount = parse_amount(body.amount)
        if body.return_deeplink:
            check_return_target(body.return_deeplink)
    except ValueError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})

    if amount < settings.VNPAY_MIN_AMOUNT:
        return JSONResponse(
            status_code=400,
            content={"error": f"minimum amount for VNPay is {settings.VNPAY_MIN_AMOUNT:,} VND"}
        )

    return_url = settings.webview_return_url if body.use_webview else settings.return_url
    order_id, params = _build_params(body, request, amount, return_url)

    built = build_query(
        settings.VNPAY_HASH_SECRET_KEY,
        params.to_params(),
        SignMode.ENCODED,
        include_type=True,
        space_plus=settings.VNPAY_SPACE_PLUS,
    )
    if settings.DEBUG_VNPAY:
        logger.debug("[VNPay] method=%s signData: %s", built.mode.value, built.sign_data)

    if body.return_deeplink:
        return_targets.remember(params.txn_ref, body.return_deeplink)

    logger.info("Created VNPay payment txnRef=%s amount=%s", params.txn_ref, amount)

    return {
        "orderId": order_id,
        "txnRef": params.txn_ref,
        "amount": amount,
        "payUrl": f"{settings.VNPAY_PAYMENT_URL}?{built.query}",
    }


# -----------------------
# DEBUG: COMPARE SIGNING MODES
# -----------------------
@router.post("/debug")
def debug_payment(body: CreatePaymentRequest, request: Request):
    if not settings.DEBUG_VNPAY:
        raise HTTPException(status_code=404, detail="Not Found")

    try:
        amount = parse_amount(body.amount)
    except ValueError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})

    _, params = _build_params(body, request, amount, settings.return_url)
    vnp_params = params.to_params()

    secret = settings.VNPAY_HASH_SECRET_KEY
    space_plus = settings.VNPAY_SPACE_PLUS
    encoded = build_query(secret, vnp_params, SignMode.ENCODED, space_plus=space_plus)
    raw = build_query(secret, vnp_params, SignMode.RAW, space_plus=space_plus)

    return {
        "debug": True,
        "methodConfigured": SignMode.ENCODED.value,
        "encoded": {"signData": encoded.sign_data, "secureHash": encoded.secure_hash, "query": encoded.query},
        "raw": {"signData": raw.sign_data, "secureHash": raw.secure_hash, "query": raw.query},
        "payUrl": f"{settings.VNPAY_PAYMENT_URL}?{encoded.query}",
        "effective": {
            "VNPAY_TMNCODE": settings.VNPAY_TMNCODE,
            "VNPAY_RETURN_URL": settings.return_url,
        },
        "txnRef": params.txn_ref,
    }


# -----------------------
# BROWSER RETURN
# -----------------------
@router.get("/return", response_class=HTMLResponse)
def vnpay_return(request: Request):
    params = dict(request.query_params)
    is_valid = _verify_callback(params)
    code = params.get("vnp_ResponseCode", "")
    success = is_valid and code == "00"

    txn_ref = params.get("vnp_TxnRef", "")
    if not is_valid:
        logger.warning("Rejected VNPay return with invalid signature txnRef=%s", txn_ref)

    default_target = f"{settings.APP_SCHEME}://payment/vnpay-return"
    target = return_targets.lookup(txn_ref)
    if not target or not is_safe_return_target(target):
        target = default_target
    sep = "&" if "?" in target else "?"
    deeplink = (
        f"{target}{sep}orderId={encode_component(txn_ref)}"
        f"&success={'1' if success else '0'}"
        f"&code={encode_component(code)}"
    )

    return templates.TemplateResponse(request, "vnpay_return.html", {"deeplink": deeplink})


@router.get("/return-webview", response_class=HTMLResponse)
def vnpay_return_webview(request: Request):
    params = dict(request.query_params)
    is_valid = _verify_callback(params)
    code = params.get("vnp_ResponseCode", "")
    success = is_valid and code == "00"
    txn_ref = params.get("vnp_TxnRef", "")

    if not is_valid:
        logger.warning("Rejected VNPay webview return with invalid signature txnRef=%s", txn_ref)

    payload = {
        "success": 1 if success else 0,
        "code": code,
        "txnRef": txn_ref,
        "orderId": txn_ref.split("-")[0],
    }
    return templates.TemplateResponse(
        request,
        "vnpay_return_webview.html",
        {
            "success": success,
            "code": code,
            "txn_ref": txn_ref,
            "message": json.dumps(payload),
        },
    )


# -----------------------
# IPN (SERVER TO SERVER)
# -----------------------
@router.get("/ipn")
def vnpay_ipn(request: Request):
    params = dict(request.query_params)
    if not _verify_callback(params):
        logger.warning("Rejected VNPay IPN with invalid signature txnRef=%s", params.get("vnp_TxnRef", ""))
        return {"RspCode": "97", "Message": "Invalid signature"}

    logger.info(
        "VNPay IPN txnRef=%s responseCode=%s",
        params.get("vnp_TxnRef", ""),
        params.get("vnp_ResponseCode", ""),
    )
    return {"RspCode": "00", "Message": "Confirm Success"}
