# accounting/api/views/order_posting.py

"""
POST /api/accounting/orders/post/   {"order_id": "<uuid>"}

Posts the sales journal entry for a completed order.

Responses:
- 201 {"status": "posted", "entry": {...}}
- 200 {"status": "skipped", "reason": "...", "entry": null}   (configuration gap, the sale stands)
- 400 already posted / period locked
"""

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.api.serializers.journal_entries import JournalEntrySerializer
from accounting.api.serializers.order_posting import OrderPostingSerializer
from accounting.api.tenancy import get_tenant_id
from accounting.services.exceptions import AccountingServiceError
from accounting.services.order_posting import post_order_journal


class OrderPostingView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = OrderPostingSerializer

    @extend_schema(
        tags=["accounting"],
        request=OrderPostingSerializer,
        responses={200: dict, 201: dict, 400: dict, 403: dict},
    )
    def post(self, request, *args, **kwargs):
        if not request.user.has_perm("accounting.add_journalentry"):
            return Response(
                {"detail": "You do not have permission to post order journals."},
                status=status.HTTP_403_FORBIDDEN,
            )

        tenant_id = get_tenant_id(request)
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            result = post_order_journal(
                tenant_id=tenant_id,
                order_id=s.validated_data["order_id"],
                created_by=request.user,
            )
        except AccountingServiceError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        if not result.posted:
            return Response(
                {"status": result.status, "reason": result.reason, "detail": result.detail, "entry": None},
                status=status.HTTP_200_OK,
            )

        return Response(
            {"status": result.status, "entry": JournalEntrySerializer(result.entry).data},
            status=status.HTTP_201_CREATED,
        )
