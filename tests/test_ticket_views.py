from urllib.parse import quote

import pytest

from ticket.qr_payload import parse_qr_payload

BOOKING = "BOOKING|code=BK20240101|id=7|movie=Dune: Part Two|time=2024-01-01 19:30|cinema=CGV|room=3|seats=A1,A2|count=2|paid=2"


def test_parse_booking_payload():
    payload = parse_qr_payload(BOOKING)
    assert payload.kind == "BOOKING"
    assert payload.fields["code"] == "BK20240101"
    assert payload.fields["movie"] == "Dune: Part Two"
    assert payload.fields["seats"] == "A1,A2"


def test_parse_keeps_first_value_and_skips_junk():
    payload = parse_qr_payload("ticket|code=T1|junk|code=T2|=x|note=a=b")
    assert payload.kind == "TICKET"
    assert payload.fields == {"code": "T1", "note": "a=b"}


@pytest.mark.parametrize("text", ["", "   ", "code=T1|id=2", "|code=T1"])
def test_parse_rejects_payload_without_kind(text):
    with pytest.raises(ValueError):
        parse_qr_payload(text)


def test_booking_view_renders_fields(client):
    r = client.get("/booking/view?text=" + quote(BOOKING))
    assert r.status_code == 200
    assert "Thông tin đặt vé" in r.text
    assert "BK20240101" in r.text
    assert "Dune: Part Two" in r.text


def test_booking_view_escapes_values(client):
    text = "BOOKING|code=<script>alert(1)</script>"
    r = client.get("/booking/view?text=" + quote(text))
    assert r.status_code == 200
    assert "<script>alert(1)</script>" not in r.text
    assert "&lt;script&gt;" in r.text


def test_booking_view_rejects_ticket_payload(client):
    r = client.get("/booking/view?text=" + quote("TICKET|code=T1"))
    assert r.status_code == 400


def test_ticket_view_and_missing_text(client):
    r = client.get("/ticket/view?text=" + quote("TICKET|code=T1|seat=B4"))
    assert r.status_code == 200
    assert "B4" in r.text

    r = client.get("/ticket/view")
    assert r.status_code == 400


def test_ticket_by_code(client):
    r = client.get("/ticket/T-0099")
    assert r.status_code == 200
    assert "T-0099" in r.text


def test_templates_autoescape_html():
    from rendering import templates

    assert templates.env.autoescape("qr_view.html") is True
    page = templates.env.get_template("vnpay_return.html").render(deeplink="x://a?b=1&c=<2>")
    assert 'href="x://a?b=1&amp;c=&lt;2&gt;"' in page
    assert "<2>" not in page
