# accounting/services/sequence_service.py

"""
======================================================
PATH: accounting/services/sequence_service.py
======================================================
DOCUMENT NUMBER ALLOCATION

Gapless, per-scope counters for:
- JE-<year>-<6 digits>   (tenant + year)
- INV-<year>-<6 digits>  (tenant + branch + year)
- EXP-<year>-<6 digits>  (tenant + year)

Numbers are never derived by counting existing documents. Each allocation
locks the counter row (select_for_update) and advances it with an
F-expression UPDATE inside the caller's transaction, so two concurrent
callers can never read the same value. If the caller's transaction rolls
back, the increment rolls back with it (no gaps).
"""

from __future__ import annotations

from django.db import IntegrityError, transaction
from django.db.models import F

from accounting.models.sequence import DocumentSequence
from accounting.services.exceptions import SequenceAllocationError

PREFIXES = {
    DocumentSequence.KIND_JOURNAL_ENTRY: "JE",
    DocumentSequence.KIND_INVOICE: "INV",
    DocumentSequence.KIND_EXPENSE: "EXP",
}


def _locked_counter(*, tenant_id: str, branch_id: str, kind: str, year: int) -> DocumentSequence:
    scope = {"tenant_id": tenant_id, "branch_id": branch_id, "kind": kind, "year": year}

    counter = DocumentSequence.objects.select_for_update().filter(**scope).first()
    if counter is not None:
        return counter

    # First document of the year for this scope. A concurrent creator may win
    # the insert; the savepoint lets us fall back to its row.
    try:
        with transaction.atomic():
            DocumentSequence.objects.create(**scope, last_value=0)
    except IntegrityError:
        pass

    return DocumentSequence.objects.select_for_update().get(**scope)


@transaction.atomic
def next_value(*, tenant_id: str, kind: str, year: int, branch_id: str = "") -> int:
    if kind not in PREFIXES:
        raise SequenceAllocationError(f"Unknown sequence kind: {kind!r}")
    if not tenant_id:
        raise SequenceAllocationError("tenant_id is required to allocate a number")

    counter = _locked_counter(
        tenant_id=tenant_id, branch_id=branch_id or "", kind=kind, year=int(year)
    )
    DocumentSequence.objects.filter(pk=counter.pk).update(last_value=F("last_value") + 1)
    counter.refresh_from_db(fields=["last_value"])
    return counter.last_value


def format_number(*, kind: str, year: int, value: int) -> str:
    return f"{PREFIXES[kind]}-{int(year)}-{int(value):06d}"


def next_document_number(*, tenant_id: str, kind: str, year: int, branch_id: str = "") -> str:
    value = next_value(tenant_id=tenant_id, kind=kind, year=year, branch_id=branch_id)
    return format_number(kind=kind, year=year, value=value)
