"""
License API views.

These endpoints are used by account holders to:
- List and look up their plugin licenses
- Claim licenses by key or by email
- See how many licenses need renewing soon

And by plugin developers to list the licenses of their plugins.
"""

from drf_spectacular.utils import OpenApiParameter, extend_schema
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.licenses.serializers import (
    ClaimByEmailRequestSerializer,
    ClaimByEmailResponseSerializer,
    ClaimLicenseRequestSerializer,
    DeveloperLicenseSerializer,
    LicenseListQuerySerializer,
    LicenseLookupQuerySerializer,
    TotalResponseSerializer,
    serialize_license_view,
)
from core.domain.value_objects import Account
from licenses.infrastructure.services import get_license_manager

tracer = trace.get_tracer(__name__)

_LISTING_PARAMETERS = [
    OpenApiParameter(name="q", type=str, required=False, description="Search text"),
    OpenApiParameter(name="page", type=int, required=False, description="1-based page"),
    OpenApiParameter(name="limit", type=int, required=False, description="Page size"),
    OpenApiParameter(name="orderBy", type=str, required=False, description="Sort field"),
    OpenApiParameter(name="ascending", type=bool, required=False, description="Sort direction"),
]


def _bad_request(span, errors) -> Response:
    span.set_attribute("error", "validation_failed")
    span.set_status(Status(StatusCode.ERROR, "Validation failed"))
    return Response({"error": errors}, status=status.HTTP_400_BAD_REQUEST)


class LicenseListView(APIView):
    """View for listing the caller's licenses."""

    @extend_schema(
        operation_id="list_licenses",
        summary="List Licenses",
        description="List the caller's plugin licenses, paginated.",
        tags=["Licenses"],
        parameters=_LISTING_PARAMETERS,
        responses={200: {"description": "Licenses and total"}, 400: {"description": "Bad Request"}},
    )
    def get(self, request: Request) -> Response:
        """List the caller's licenses."""
        with tracer.start_as_current_span("list_licenses") as span:
            serializer = LicenseListQuerySerializer(data=request.query_params.dict())
            if not serializer.is_valid():
                return _bad_request(span, serializer.errors)

            owner = Account.from_user(request.user)
            span.set_attribute("owner.id", owner.id)

            result = get_license_manager().get_licenses_by_owner(owner, serializer.to_options())

            span.set_attribute("licenses.total", result.total)
            span.set_status(Status(StatusCode.OK))
            return Response(
                {
                    "licenses": [serialize_license_view(view) for view in result.items],
                    "total": result.total,
                    "page": result.page,
                    "limit": result.limit,
                },
                status=status.HTTP_200_OK,
            )


class LicenseDetailView(APIView):
    """View for looking up a license by key."""

    @extend_schema(
        operation_id="get_license",
        summary="Get License",
        description=(
            "Look up a license by key. Owners get the full license; anyone else "
            "gets the short key with history, edition and plugin details."
        ),
        tags=["Licenses"],
        parameters=[
            OpenApiParameter(
                name="handle", type=str, required=False, description="Plugin handle"
            ),
        ],
        responses={200: {"description": "License"}, 404: {"description": "Not Found"}},
    )
    def get(self, request: Request, key: str) -> Response:
        """Look up a license by key."""
        with tracer.start_as_current_span("get_license") as span:
            serializer = LicenseLookupQuerySerializer(data=request.query_params.dict())
            if not serializer.is_valid():
                return _bad_request(span, serializer.errors)

            manager = get_license_manager()
            license = manager.get_license_by_key(
                key, plugin_handle=serializer.validated_data.get("handle")
            )
            view = manager.transform_license_for_owner(license, Account.from_user(request.user))

            span.set_attribute("license.id", license.id)
            span.set_status(Status(StatusCode.OK))
            return Response(serialize_license_view(view), status=status.HTTP_200_OK)


class ClaimLicenseView(APIView):
    """View for claiming a license by key."""

    @extend_schema(
        operation_id="claim_license",
        summary="Claim License",
        description="Assign an unclaimed license to the caller.",
        tags=["Licenses"],
        request=ClaimLicenseRequestSerializer,
        responses={
            200: {"description": "Claimed license"},
            400: {"description": "Bad Request"},
            404: {"description": "Not Found"},
            409: {"description": "License already claimed"},
        },
    )
    def post(self, request: Request) -> Response:
        """Claim a license."""
        with tracer.start_as_current_span("claim_license") as span:
            serializer = ClaimLicenseRequestSerializer(data=request.data)
            if not serializer.is_valid():
                return _bad_request(span, serializer.errors)

            owner = Account.from_user(request.user)
            span.set_attribute("owner.id", owner.id)

            manager = get_license_manager()
            license = manager.claim_license(owner, serializer.validated_data["key"])
            view = manager.transform_license_for_owner(license, owner)

            span.set_attribute("license.id", license.id)
            span.set_status(Status(StatusCode.OK))
            return Response(serialize_license_view(view), status=status.HTTP_200_OK)


class ClaimByEmailView(APIView):
    """View for claiming every unowned license sent to an email."""

    @extend_schema(
        operation_id="claim_licenses_by_email",
        summary="Claim Licenses by Email",
        description=(
            "Assign every unclaimed license whose email matches to the caller. "
            "Defaults to the caller's own email."
        ),
        tags=["Licenses"],
        request=ClaimByEmailRequestSerializer,
        responses={200: ClaimByEmailResponseSerializer, 400: {"description": "Bad Request"}},
    )
    def post(self, request: Request) -> Response:
        """Claim licenses by email."""
        with tracer.start_as_current_span("claim_licenses_by_email") as span:
            serializer = ClaimByEmailRequestSerializer(data=request.data)
            if not serializer.is_valid():
                return _bad_request(span, serializer.errors)

            owner = Account.from_user(request.user)
            claimed = get_license_manager().claim_licenses(
                owner, serializer.validated_data.get("email")
            )

            span.set_attribute("licenses.claimed", claimed)
            span.set_status(Status(StatusCode.OK))
            return Response(
                ClaimByEmailResponseSerializer({"claimed": claimed}).data,
                status=status.HTTP_200_OK,
            )


class ExpiringTotalView(APIView):
    """View for counting the caller's licenses that need renewing soon."""

    @extend_schema(
        operation_id="expiring_licenses_total",
        summary="Expiring Licenses Total",
        description="Count the caller's licenses that expire soon and don't auto-renew.",
        tags=["Licenses"],
        responses={200: TotalResponseSerializer},
    )
    def get(self, request: Request) -> Response:
        """Count expiring licenses."""
        with tracer.start_as_current_span("expiring_licenses_total") as span:
            total = get_license_manager().get_expiring_licenses_total(
                Account.from_user(request.user)
            )
            span.set_attribute("licenses.total", total)
            span.set_status(Status(StatusCode.OK))
            return Response(TotalResponseSerializer({"total": total}).data)


class DeveloperLicenseListView(APIView):
    """View for listing licenses of the caller's plugins."""

    @extend_schema(
        operation_id="list_developer_licenses",
        summary="List Developer Licenses",
        description="List licenses issued for plugins the caller develops.",
        tags=["Developer"],
        parameters=_LISTING_PARAMETERS,
        responses={200: {"description": "Licenses and total"}, 400: {"description": "Bad Request"}},
    )
    def get(self, request: Request) -> Response:
        """List licenses of the caller's plugins."""
        with tracer.start_as_current_span("list_developer_licenses") as span:
            serializer = LicenseListQuerySerializer(data=request.query_params.dict())
            if not serializer.is_valid():
                return _bad_request(span, serializer.errors)

            span.set_attribute("developer.id", request.user.id)
            result = get_license_manager().get_licenses_by_developer(
                request.user.id, serializer.to_options()
            )

            span.set_attribute("licenses.total", result.total)
            span.set_status(Status(StatusCode.OK))
            return Response(
                {
                    "licenses": DeveloperLicenseSerializer(result.items, many=True).data,
                    "total": result.total,
                    "page": result.page,
                    "limit": result.limit,
                },
                status=status.HTTP_200_OK,
            )
