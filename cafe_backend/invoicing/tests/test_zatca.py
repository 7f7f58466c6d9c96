# invoicing/tests/test_zatca.py

import base64
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from django.test import SimpleTestCase

from invoicing.services import zatca
from invoicing.services.zatca import ZatcaEncodingError, ZatcaPayload


FIELDS = {
    "seller_name": "ACME",
    "vat_number": "300000000000003",
    "timestamp": "2024-01-01T00:00:00.000Z",
    "total_with_vat": "115.00",
    "vat_amount": "15.00",
}


class TlvCodecTests(SimpleTestCase):
    """
    GUARANTEES:
    - Five records, tags 1..5 in order, 1-byte length, UTF-8 value
    - decode(encode(x)) == x for every field under 256 bytes
    """

    def test_round_trip(self):
        encoded = zatca.encode_tlv(**FIELDS)
        self.assertEqual(zatca.decode_tlv(encoded), ZatcaPayload(**FIELDS))

    def test_exact_bytes(self):
        raw = zatca.encode_tlv_bytes(**FIELDS)
        expected = (
            b"\x01\x04ACME"
            b"\x02\x0f300000000000003"
            b"\x03\x182024-01-01T00:00:00.000Z"
            b"\x04\x06115.00"
            b"\x05\x0515.00"
        )
        self.assertEqual(raw, expected)
        self.assertEqual(zatca.encode_tlv(**FIELDS), base64.b64encode(expected).decode("ascii"))

    def test_arabic_seller_name_uses_utf8_byte_length(self):
        name = "مقهى الرياض"
        raw = zatca.encode_tlv_bytes(**{**FIELDS, "seller_name": name})
        self.assertEqual(raw[0], 1)
        self.assertEqual(raw[1], len(name.encode("utf-8")))
        self.assertEqual(zatca.decode_tlv(raw).seller_name, name)

    def test_amounts_are_normalized_to_two_decimals(self):
        payload = zatca.decode_tlv(
            zatca.encode_tlv(**{**FIELDS, "total_with_vat": Decimal("115"), "vat_amount": 15})
        )
        self.assertEqual(payload.total_with_vat, "115.00")
        self.assertEqual(payload.vat_amount, "15.00")

    def test_field_of_255_bytes_is_accepted(self):
        name = "x" * 255
        self.assertEqual(zatca.decode_tlv(zatca.encode_tlv(**{**FIELDS, "seller_name": name})).seller_name, name)

    def test_oversize_field_is_rejected(self):
        with self.assertRaises(ZatcaEncodingError):
            zatca.encode_tlv(**{**FIELDS, "seller_name": "x" * 256})

    def test_invalid_amount_is_rejected(self):
        with self.assertRaises(ZatcaEncodingError):
            zatca.encode_tlv(**{**FIELDS, "total_with_vat": "abc"})

    def test_truncated_payload(self):
        with self.assertRaises(ZatcaEncodingError):
            zatca.decode_tlv(b"\x01\x05AB")
        with self.assertRaises(ZatcaEncodingError):
            zatca.decode_tlv(zatca.encode_tlv_bytes(**FIELDS) + b"\x06")

    def test_missing_tag(self):
        raw = zatca.encode_tlv_bytes(**FIELDS)
        without_vat = raw[: -len(b"\x05\x0515.00")]
        with self.assertRaises(ZatcaEncodingError):
            zatca.decode_tlv(without_vat)

    def test_unknown_tags_are_skipped(self):
        raw = b"\x09\x02zz" + zatca.encode_tlv_bytes(**FIELDS)
        self.assertEqual(zatca.decode_tlv(raw), ZatcaPayload(**FIELDS))

    def test_invalid_base64(self):
        with self.assertRaises(ZatcaEncodingError):
            zatca.decode_tlv("not base64!!")


class TimestampTests(SimpleTestCase):
    def test_utc_with_milliseconds(self):
        value = datetime(2024, 1, 1, 0, 0, 0, 123456, tzinfo=timezone.utc)
        self.assertEqual(zatca.format_timestamp(value), "2024-01-01T00:00:00.123Z")

    def test_aware_datetime_is_converted_to_utc(self):
        riyadh = timezone(timedelta(hours=3))
        value = datetime(2024, 1, 1, 3, 0, tzinfo=riyadh)
        self.assertEqual(zatca.format_timestamp(value), "2024-01-01T00:00:00.000Z")

    def test_naive_datetime_is_treated_as_utc(self):
        self.assertEqual(zatca.format_timestamp(datetime(2024, 6, 30, 23, 59, 59)), "2024-06-30T23:59:59.000Z")

    def test_strings_pass_through(self):
        self.assertEqual(zatca.format_timestamp(FIELDS["timestamp"]), FIELDS["timestamp"])

    def test_rejects_other_types(self):
        with self.assertRaises(ZatcaEncodingError):
            zatca.format_timestamp(12345)


class VatHelperTests(SimpleTestCase):
    def test_vat_from_total(self):
        self.assertEqual(zatca.vat_from_total(115), Decimal("15.00"))
        self.assertEqual(zatca.vat_from_total("10"), Decimal("1.30"))

    def test_total_with_vat(self):
        self.assertEqual(zatca.total_with_vat(100), Decimal("115.00"))
        self.assertEqual(zatca.total_with_vat("0.10"), Decimal("0.12"))

    def test_validate_vat_number(self):
        self.assertTrue(zatca.validate_vat_number("300000000000003"))
        self.assertTrue(zatca.validate_vat_number("300 0000 0000 0003"))
        self.assertFalse(zatca.validate_vat_number("100000000000003"))
        self.assertFalse(zatca.validate_vat_number("3000000000000003"))
        self.assertFalse(zatca.validate_vat_number(""))
        self.assertFalse(zatca.validate_vat_number(None))

    def test_format_vat_number(self):
        self.assertEqual(zatca.format_vat_number("300000000000003"), "300 0000 0000 0003")
        self.assertEqual(zatca.format_vat_number("12345"), "12345")

    def test_classify_invoice_type(self):
        self.assertEqual(zatca.classify_invoice_type("300000000000003"), zatca.INVOICE_TYPE_STANDARD)
        self.assertEqual(zatca.classify_invoice_type(None), zatca.INVOICE_TYPE_SIMPLIFIED)
        self.assertEqual(zatca.classify_invoice_type("12345"), zatca.INVOICE_TYPE_SIMPLIFIED)


class QrRenderingTests(SimpleTestCase):
    def test_png_data_url(self):
        url = zatca.render_qr_data_url(zatca.encode_tlv(**FIELDS))
        self.assertTrue(url.startswith("data:image/png;base64,"))
        png = base64.b64decode(url.split(",", 1)[1])
        self.assertEqual(png[:8], b"\x89PNG\r\n\x1a\n")

    def test_svg(self):
        svg = zatca.render_qr_svg(zatca.encode_tlv(**FIELDS))
        self.assertIn("<svg", svg)
