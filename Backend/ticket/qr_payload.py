from typing import Dict, NamedTuple

BOOKING_LABELS = {
    "code": "Mã đặt vé",
    "id": "ID",
    "movie": "Phim",
    "time": "Suất chiếu",
    "cinema": "Rạp",
    "room": "Phòng",
    "seats": "Ghế",
    "count": "Số vé",
    "paid": "Đã thanh toán",
}

TICKET_LABELS = {
    "code": "Mã vé",
    "id": "ID",
    "movie": "Phim",
    "time": "Suất chiếu",
    "cinema": "Rạp",
    "room": "Phòng",
    "seat": "Ghế",
    "price": "Giá",
}


class QrPayload(NamedTuple):
    kind: str
    fields: Dict[str, str]


def parse_qr_payload(text: str) -> QrPayload:
    """
    Parse ``KIND|key=value|key=value`` as encoded into booking and ticket QR codes.

    Segments without ``=`` are ignored; on a repeated key the first one wins.
    """
    if not text or not text.strip():
        raise ValueError("empty QR payload")

    head, *segments = text.strip().split("|")
    kind = head.strip().upper()
    if not kind or "=" in kind:
        raise ValueError("QR payload has no type prefix")

    fields: Dict[str, str] = {}
    for segment in segments:
        key, sep, value = segment.partition("=")
        key = key.strip()
        if not sep or not key:
            continue
        fields.setdefault(key, value.strip())
    return QrPayload(kind, fields)
