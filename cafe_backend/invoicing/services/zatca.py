# invoicing/services/zatca.py

"""
======================================================
PATH: invoicing/services/zatca.py
======================================================
ZATCA PHASE-1 QR CODEC

Pure, stateless helpers for the Saudi tax-authority QR payload.

Wire format (must stay byte-exact for scanner compatibility):
    [tag:1 byte][length:1 byte][UTF-8 value bytes]   x 5, tags 1..5 in order

    1 seller name
    2 VAT registration number
    3 invoice timestamp (ISO-8601, UTC, milliseconds, "Z")
    4 invoice total including VAT ("115.00")
    5 VAT amount ("15.00")

The concatenated bytes are Base64-encoded for storage and rendered as a QR
image at error-correction level M.

A field longer than 255 UTF-8 bytes cannot be represented with a 1-byte
length and is rejected with ZatcaEncodingError.
"""

from __future__ import annotations

import base64
import binascii
import io
import re
from dataclasses import astuple, dataclass
from datetime import datetime, timezone as dt_timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

import qrcode
import qrcode.constants
from qrcode.image.svg import SvgPathImage

TAG_SELLER_NAME = 1
TAG_VAT_NUMBER = 2
TAG_TIMESTAMP = 3
TAG_TOTAL_WITH_VAT = 4
TAG_VAT_AMOUNT = 5

TAGS = (TAG_SELLER_NAME, TAG_VAT_NUMBER, TAG_TIMESTAMP, TAG_TOTAL_WITH_VAT, TAG_VAT_AMOUNT)

MAX_FIELD_BYTES = 255

VAT_RATE = Decimal("0.15")
TWOPLACES = Decimal("0.01")

QR_BORDER = 2
QR_TARGET_PX = 200

INVOICE_TYPE_STANDARD = "standard"
INVOICE_TYPE_SIMPLIFIED = "simplified"

_VAT_NUMBER_RE = re.compile(r"^3\d{13}3$")
_WHITESPACE_RE = re.compile(r"\s")


class ZatcaEncodingError(ValueError):
    pass


@dataclass(frozen=True)
class ZatcaPayload:
    seller_name: str
    vat_number: str
    timestamp: str
    total_with_vat: str
    vat_amount: str

    def as_tlv_fields(self) -> tuple[str, ...]:
        return astuple(self)


# ------------------------------------------------------------
# FIELD FORMATTING
# ------------------------------------------------------------


def format_timestamp(value) -> str:
    """
    ISO-8601 in UTC with millisecond precision, e.g. 2024-01-01T00:00:00.000Z.

    Strings are passed through untouched so a stored timestamp re-encodes
    to exactly the same bytes.
    """
    if isinstance(value, str):
        return value
    if not isinstance(value, datetime):
        raise ZatcaEncodingError(f"Invalid timestamp: {value!r}")

    if value.tzinfo is None:
        value = value.replace(tzinfo=dt_timezone.utc)
    value = value.astimezone(dt_timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def format_amount(value) -> str:
    if isinstance(value, str):
        raw = value.strip()
    else:
        raw = str(value)
    try:
        amount = Decimal(raw)
    except (InvalidOperation, ValueError) as exc:
        raise ZatcaEncodingError(f"Invalid amount: {value!r}") from exc
    if not amount.is_finite():
        raise ZatcaEncodingError(f"Invalid amount: {value!r}")
    return f"{amount.quantize(TWOPLACES, rounding=ROUND_HALF_UP):.2f}"


# ------------------------------------------------------------
# TLV
# ------------------------------------------------------------


def _tlv(tag: int, value: str) -> bytes:
    raw = value.encode("utf-8")
    if len(raw) > MAX_FIELD_BYTES:
        raise ZatcaEncodingError(
            f"TLV field {tag} is {len(raw)} bytes; the maximum is {MAX_FIELD_BYTES}"
        )
    return bytes((tag, len(raw))) + raw


def build_payload(*, seller_name, vat_number, timestamp, total_with_vat, vat_amount) -> ZatcaPayload:
    return ZatcaPayload(
        seller_name=str(seller_name or ""),
        vat_number=str(vat_number or ""),
        timestamp=format_timestamp(timestamp),
        total_with_vat=format_amount(total_with_vat),
        vat_amount=format_amount(vat_amount),
    )


def encode_tlv_bytes(*, seller_name, vat_number, timestamp, total_with_vat, vat_amount) -> bytes:
    payload = build_payload(
        seller_name=seller_name,
        vat_number=vat_number,
        timestamp=timestamp,
        total_with_vat=total_with_vat,
        vat_amount=vat_amount,
    )
    return b"".join(_tlv(tag, value) for tag, value in zip(TAGS, payload.as_tlv_fields()))


def encode_tlv(*, seller_name, vat_number, timestamp, total_with_vat, vat_amount) -> str:
    """Base64 text of the five TLV records."""
    raw = encode_tlv_bytes(
        seller_name=seller_name,
        vat_number=vat_number,
        timestamp=timestamp,
        total_with_vat=total_with_vat,
        vat_amount=vat_amount,
    )
    return base64.b64encode(raw).decode("ascii")


def decode_tlv(encoded) -> ZatcaPayload:
    """
    Inverse of encode_tlv.

    Accepts Base64 text or raw TLV bytes. Unknown tags are skipped; a
    truncated record or a missing mandatory tag raises ZatcaEncodingError.
    """
    if isinstance(encoded, str):
        try:
            raw = base64.b64decode(encoded.strip(), validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ZatcaEncodingError("Payload is not valid Base64") from exc
    else:
        raw = bytes(encoded)

    fields: dict[int, str] = {}
    offset = 0
    while offset < len(raw):
        if offset + 2 > len(raw):
            raise ZatcaEncodingError(f"Truncated TLV header at byte {offset}")
        tag = raw[offset]
        length = raw[offset + 1]
        start = offset + 2
        end = start + length
        if end > len(raw):
            raise ZatcaEncodingError(f"Truncated TLV value for tag {tag}")

        if tag in TAGS:
            try:
                fields[tag] = raw[start:end].decode("utf-8")
            except UnicodeDecodeError as exc:
                raise ZatcaEncodingError(f"Tag {tag} is not valid UTF-8") from exc
        offset = end

    missing = [tag for tag in TAGS if tag not in fields]
    if missing:
        raise ZatcaEncodingError(f"Missing TLV tags: {missing}")

    return ZatcaPayload(*(fields[tag] for tag in TAGS))


# ------------------------------------------------------------
# QR RENDERING
# ------------------------------------------------------------


def _qr(data: str) -> qrcode.QRCode:
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        border=QR_BORDER,
    )
    qr.add_data(data)
    qr.make(fit=True)
    qr.box_size = max(1, QR_TARGET_PX // (qr.modules_count + 2 * QR_BORDER))
    return qr


def render_qr_png(data: str) -> bytes:
    img = _qr(data).make_image(fill_color="black", back_color="white")
    buffer = io.BytesIO()
    img.save(buffer)
    return buffer.getvalue()


def render_qr_data_url(data: str) -> str:
    encoded = base64.b64encode(render_qr_png(data)).decode("ascii")
    return f"data:image/png;base64,{encoded}"


def render_qr_svg(data: str) -> str:
    img = _qr(data).make_image(image_factory=SvgPathImage)
    buffer = io.BytesIO()
    img.save(buffer)
    return buffer.getvalue().decode("utf-8")


# ------------------------------------------------------------
# VAT HELPERS (fixed 15%)
# ------------------------------------------------------------


def vat_from_total(total_with_vat) -> Decimal:
    total = Decimal(str(total_with_vat))
    return (total * VAT_RATE / (1 + VAT_RATE)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def total_with_vat(net_amount) -> Decimal:
    net = Decimal(str(net_amount))
    return (net * (1 + VAT_RATE)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _clean_vat_number(vat_number) -> str:
    return _WHITESPACE_RE.sub("", str(vat_number or ""))


def validate_vat_number(vat_number) -> bool:
    """Saudi VAT number: 15 digits, first and last digit 3."""
    return bool(_VAT_NUMBER_RE.match(_clean_vat_number(vat_number)))


def format_vat_number(vat_number) -> str:
    cleaned = _clean_vat_number(vat_number)
    if len(cleaned) != 15:
        return vat_number
    return f"{cleaned[:3]} {cleaned[3:7]} {cleaned[7:11]} {cleaned[11:]}"


def classify_invoice_type(customer_vat_number=None) -> str:
    # B2B (customer is VAT registered) -> standard; B2C -> simplified
    if customer_vat_number and validate_vat_number(customer_vat_number):
        return INVOICE_TYPE_STANDARD
    return INVOICE_TYPE_SIMPLIFIED
