import logging

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from rendering import templates
from ticket.qr_payload import BOOKING_LABELS, TICKET_LABELS, parse_qr_payload

logger = logging.getLogger(__name__)

router = APIRouter()


def _rows(fields: dict, labels: dict) -> list:
    # Known fields first in label order, then anything else the payload carried
    keys = [k for k in labels if k in fields] + [k for k in fields if k not in labels]
    return [(labels.get(k, k), fields[k]) for k in keys]


def _invalid(request: Request, message: str):
    return templates.TemplateResponse(
        request,
        "qr_view.html",
        {"title": "QR không hợp lệ", "error": message},
        status_code=400,
    )


def _render(request: Request, text: str, expected_kind: str, title: str, labels: dict):
    try:
        payload = parse_qr_payload(text)
    except ValueError as e:
        logger.info("Unreadable QR payload: %s", e)
        return _invalid(request, str(e))

    if payload.kind != expected_kind:
        return _invalid(request, f"Expected {expected_kind} payload, got {payload.kind}")

    return templates.TemplateResponse(
        request,
        "qr_view.html",
        {"title": title, "rows": _rows(payload.fields, labels)},
    )


# -----------------------
# BOOKING VIEW
# -----------------------
@router.get("/booking/view", response_class=HTMLResponse)
def booking_view(request: Request, text: str = ""):
    return _render(request, text, "BOOKING", "Thông tin đặt vé", BOOKING_LABELS)


# -----------------------
# TICKET VIEW
# -----------------------
@router.get("/ticket/view", response_class=HTMLResponse)
def ticket_view(request: Request, text: str = ""):
    return _render(request, text, "TICKET", "Thông tin vé", TICKET_LABELS)


@router.get("/ticket/{code}", response_class=HTMLResponse)
def ticket_by_code(request: Request, code: str):
    return templates.TemplateResponse(
        request,
        "qr_view.html",
        {"title": "Thông tin vé", "rows": _rows({"code": code}, TICKET_LABELS)},
    )
