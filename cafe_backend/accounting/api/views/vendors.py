# accounting/api/views/vendors.py

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.api.serializers.vendors import VendorSerializer
from accounting.api.tenancy import get_tenant_id
from accounting.services.exceptions import AccountingServiceError
from accounting.services.expense_service import create_vendor, get_vendors


class VendorListCreateView(GenericAPIView):
    """Active vendors of the tenant; POST registers a new one (country SA)."""

    permission_classes = [IsAuthenticated]
    serializer_class = VendorSerializer

    @extend_schema(tags=["accounting"], responses=VendorSerializer(many=True))
    def get(self, request, *args, **kwargs):
        if not request.user.has_perm("accounting.view_vendor"):
            return Response(
                {"detail": "You do not have permission to view vendors."},
                status=status.HTTP_403_FORBIDDEN,
            )

        tenant_id = get_tenant_id(request)
        return Response(VendorSerializer(get_vendors(tenant_id=tenant_id), many=True).data)

    @extend_schema(tags=["accounting"], request=VendorSerializer, responses={201: VendorSerializer, 400: dict})
    def post(self, request, *args, **kwargs):
        if not request.user.has_perm("accounting.add_vendor"):
            return Response(
                {"detail": "You do not have permission to create vendors."},
                status=status.HTTP_403_FORBIDDEN,
            )

        tenant_id = get_tenant_id(request)
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            vendor = create_vendor(tenant_id=tenant_id, **s.validated_data)
        except AccountingServiceError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(VendorSerializer(vendor).data, status=status.HTTP_201_CREATED)
