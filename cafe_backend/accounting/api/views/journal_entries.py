# accounting/api/views/journal_entries.py

"""
PATH: accounting/api/views/journal_entries.py

JOURNAL ENTRY API

GET  /api/accounting/journal-entries/            list (django-filter: status, reference_type, entry_date)
POST /api/accounting/journal-entries/            create (draft, or posted with auto_post)
GET  /api/accounting/journal-entries/<id>/       detail with lines
POST /api/accounting/journal-entries/<id>/post/  draft -> posted

There is no update or delete: the ledger is append-only.

Permissions:
- read:   accounting.view_journalentry
- create: accounting.add_journalentry
- post:   accounting.change_journalentry
"""

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.api.serializers.journal_entries import (
    JournalEntryCreateSerializer,
    JournalEntrySerializer,
)
from accounting.api.tenancy import get_tenant_id
from accounting.models.journal import JournalEntry
from accounting.services.exceptions import (
    AccountingServiceError,
    JournalEntryNotFoundError,
    UnbalancedEntryError,
)
from accounting.services.journal_entry_service import (
    create_journal_entry,
    post_journal_entry,
)

VIEW_PERMISSION = "accounting.view_journalentry"
ADD_PERMISSION = "accounting.add_journalentry"
POST_PERMISSION = "accounting.change_journalentry"


def _error(exc: AccountingServiceError) -> Response:
    if isinstance(exc, JournalEntryNotFoundError):
        return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)

    body = {"detail": str(exc)}
    if isinstance(exc, UnbalancedEntryError):
        body["total_debit"] = str(exc.total_debit)
        body["total_credit"] = str(exc.total_credit)
    return Response(body, status=status.HTTP_400_BAD_REQUEST)


class JournalEntryListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = JournalEntryCreateSerializer
    queryset = JournalEntry.objects.all()
    filterset_fields = ["status", "reference_type", "entry_date"]

    @extend_schema(tags=["accounting"], responses=JournalEntrySerializer(many=True))
    def get(self, request, *args, **kwargs):
        if not request.user.has_perm(VIEW_PERMISSION):
            return Response(
                {"detail": "You do not have permission to view journal entries."},
                status=status.HTTP_403_FORBIDDEN,
            )

        tenant_id = get_tenant_id(request)
        qs = self.filter_queryset(
            JournalEntry.objects.filter(tenant_id=tenant_id).prefetch_related("lines")
        )

        page = self.paginate_queryset(qs.order_by("-entry_date", "-id"))
        if page is not None:
            return self.get_paginated_response(JournalEntrySerializer(page, many=True).data)
        return Response(JournalEntrySerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["accounting"],
        request=JournalEntryCreateSerializer,
        responses={201: JournalEntrySerializer, 400: dict, 403: dict},
    )
    def post(self, request, *args, **kwargs):
        if not request.user.has_perm(ADD_PERMISSION):
            return Response(
                {"detail": "You do not have permission to create journal entries."},
                status=status.HTTP_403_FORBIDDEN,
            )

        tenant_id = get_tenant_id(request)
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        if data.get("auto_post") and not request.user.has_perm(POST_PERMISSION):
            return Response(
                {"detail": "You do not have permission to post journal entries."},
                status=status.HTTP_403_FORBIDDEN,
            )

        try:
            entry = create_journal_entry(
                tenant_id=tenant_id,
                entry_date=data.get("entry_date"),
                description=data["description"],
                lines=[dict(line) for line in data["lines"]],
                reference_type=data.get("reference_type"),
                reference_id=data.get("reference_id"),
                created_by=request.user,
                auto_post=data.get("auto_post", False),
            )
        except AccountingServiceError as exc:
            return _error(exc)

        return Response(JournalEntrySerializer(entry).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["accounting"], responses={200: JournalEntrySerializer, 404: dict})
class JournalEntryDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk, *args, **kwargs):
        if not request.user.has_perm(VIEW_PERMISSION):
            return Response(
                {"detail": "You do not have permission to view journal entries."},
                status=status.HTTP_403_FORBIDDEN,
            )

        tenant_id = get_tenant_id(request)
        entry = JournalEntry.objects.filter(tenant_id=tenant_id, pk=pk).prefetch_related("lines").first()
        if entry is None:
            return Response({"detail": "Journal entry not found."}, status=status.HTTP_404_NOT_FOUND)

        return Response(JournalEntrySerializer(entry).data, status=status.HTTP_200_OK)


@extend_schema(tags=["accounting"], request=None, responses={200: JournalEntrySerializer, 400: dict, 404: dict})
class JournalEntryPostView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, pk, *args, **kwargs):
        if not request.user.has_perm(POST_PERMISSION):
            return Response(
                {"detail": "You do not have permission to post journal entries."},
                status=status.HTTP_403_FORBIDDEN,
            )

        tenant_id = get_tenant_id(request)
        try:
            entry = post_journal_entry(tenant_id=tenant_id, entry_id=pk, posted_by=request.user)
        except AccountingServiceError as exc:
            return _error(exc)

        return Response(JournalEntrySerializer(entry).data, status=status.HTTP_200_OK)
