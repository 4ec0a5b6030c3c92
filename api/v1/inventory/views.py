"""
Inventory API views.

These endpoints back the license inventory screen:
- List licenses grouped by product, with search and product filters
- Add, update and delete licenses
- Manage the product registry and purchased totals (administrators)
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.inventory.serializers import (
    InventoryMutationResultSerializer,
    InventoryViewSerializer,
    LicenseFieldsRequestSerializer,
    ProductNameRequestSerializer,
    ProductRegistrySerializer,
    RenameProductRequestSerializer,
    SaveLicenseTotalsRequestSerializer,
    SetProductTotalRequestSerializer,
)
from licenses.application.commands.add_license import AddLicenseCommand
from licenses.application.commands.delete_license import DeleteLicenseCommand
from licenses.application.commands.update_license import UpdateLicenseCommand
from licenses.application.handlers.get_license_inventory_handler import (
    GetLicenseInventoryHandler,
)
from licenses.application.handlers.license_handlers import (
    AddLicenseHandler,
    DeleteLicenseHandler,
    UpdateLicenseHandler,
)
from licenses.application.queries.get_license_inventory import GetLicenseInventoryQuery
from licenses.infrastructure.gateways.provider import get_inventory_gateway
from products.application.commands.add_product import AddProductCommand
from products.application.commands.remove_product import RemoveProductCommand
from products.application.commands.rename_product import RenameProductCommand
from products.application.commands.save_license_totals import SaveLicenseTotalsCommand
from products.application.commands.set_product_total import SetProductTotalCommand
from products.application.handlers.product_handlers import (
    AddProductHandler,
    GetProductRegistryHandler,
    RemoveProductHandler,
    RenameProductHandler,
    SaveLicenseTotalsHandler,
    SetProductTotalHandler,
)
from products.application.queries.get_product_registry import GetProductRegistryQuery

ACTING_USER_HEADERS = [
    OpenApiParameter(
        name="X-Username",
        type=str,
        location=OpenApiParameter.HEADER,
        required=True,
        description="User on whose behalf the request runs",
    ),
    OpenApiParameter(
        name="X-User-Role",
        type=str,
        location=OpenApiParameter.HEADER,
        required=False,
        description="Admin or User (default)",
    ),
]

CONFIRM_PARAMETER = OpenApiParameter(
    name="confirm",
    type=bool,
    location=OpenApiParameter.QUERY,
    required=True,
    description="Must be true for the deletion to happen",
)


def _is_confirmed(request: Request) -> bool:
    return request.query_params.get("confirm", "").strip().lower() in ("1", "true", "yes")


def _optional_param(request: Request, name: str):
    value = request.query_params.get(name)
    return value if value else None


class LicenseCollectionView(APIView):
    """View for listing and adding licenses."""

    @extend_schema(
        operation_id="list_licenses",
        summary="List Licenses",
        description=(
            "Return the inventory grouped by product. Every registered product has "
            "a section, even without licenses. The search term matches product "
            "names and every license attribute, case-insensitively."
        ),
        tags=["Inventory API"],
        parameters=ACTING_USER_HEADERS
        + [
            OpenApiParameter(
                name="search",
                type=str,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Free-text search term",
            ),
            OpenApiParameter(
                name="product",
                type=str,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Show only this product",
            ),
        ],
        responses={
            200: InventoryViewSerializer,
            401: {"description": "Missing username"},
            502: {"description": "Inventory API unavailable"},
        },
    )
    def get(self, request: Request) -> Response:
        """List licenses grouped by product."""
        return async_to_sync(self._handle_list_licenses)(request)

    async def _handle_list_licenses(self, request: Request) -> Response:
        """Async handler for list licenses."""
        handler = GetLicenseInventoryHandler(get_inventory_gateway())
        query = GetLicenseInventoryQuery(
            acting_user=request.acting_user,
            search=_optional_param(request, "search"),
            product=_optional_param(request, "product"),
        )
        result = await handler.handle(query)
        return Response(InventoryViewSerializer(result).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="add_license",
        summary="Add License",
        description=(
            "Create a license. Licenses added by non-administrators are subject to "
            "approval; the response message says so."
        ),
        tags=["Inventory API"],
        parameters=ACTING_USER_HEADERS,
        request=LicenseFieldsRequestSerializer,
        responses={
            201: InventoryMutationResultSerializer,
            400: {"description": "Bad Request"},
            502: {"description": "Inventory API rejected the license"},
        },
    )
    def post(self, request: Request) -> Response:
        """Add a license."""
        return async_to_sync(self._handle_add_license)(request)

    async def _handle_add_license(self, request: Request) -> Response:
        """Async handler for add license."""
        serializer = LicenseFieldsRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        handler = AddLicenseHandler(get_inventory_gateway())
        command = AddLicenseCommand(
            fields=serializer.to_license_fields(),
            acting_user=request.acting_user,
        )
        result = await handler.handle(command)
        return Response(
            InventoryMutationResultSerializer(result).data, status=status.HTTP_201_CREATED
        )


class LicenseDetailView(APIView):
    """View for updating and deleting one license."""

    @extend_schema(
        operation_id="update_license",
        summary="Update License",
        description="Replace every editable field of a license. The id is preserved.",
        tags=["Inventory API"],
        parameters=ACTING_USER_HEADERS,
        request=LicenseFieldsRequestSerializer,
        responses={
            200: InventoryMutationResultSerializer,
            400: {"description": "Bad Request"},
            502: {"description": "Inventory API rejected the update"},
        },
    )
    def put(self, request: Request, license_id: int) -> Response:
        """Update a license."""
        return async_to_sync(self._handle_update_license)(request, license_id)

    async def _handle_update_license(self, request: Request, license_id: int) -> Response:
        """Async handler for update license."""
        serializer = LicenseFieldsRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        handler = UpdateLicenseHandler(get_inventory_gateway())
        command = UpdateLicenseCommand(
            license_id=license_id,
            fields=serializer.to_license_fields(),
            acting_user=request.acting_user,
        )
        result = await handler.handle(command)
        return Response(InventoryMutationResultSerializer(result).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="delete_license",
        summary="Delete License",
        description="Permanently delete a license. Requires confirm=true.",
        tags=["Inventory API"],
        parameters=ACTING_USER_HEADERS + [CONFIRM_PARAMETER],
        responses={
            200: InventoryMutationResultSerializer,
            400: {"description": "Deletion not confirmed"},
            502: {"description": "Inventory API rejected the deletion"},
        },
    )
    def delete(self, request: Request, license_id: int) -> Response:
        """Delete a license."""
        return async_to_sync(self._handle_delete_license)(request, license_id)

    async def _handle_delete_license(self, request: Request, license_id: int) -> Response:
        """Async handler for delete license."""
        handler = DeleteLicenseHandler(get_inventory_gateway())
        command = DeleteLicenseCommand(
            license_id=license_id,
            acting_user=request.acting_user,
            confirmed=_is_confirmed(request),
        )
        result = await handler.handle(command)
        return Response(InventoryMutationResultSerializer(result).data, status=status.HTTP_200_OK)


class ProductCollectionView(APIView):
    """View for listing and adding products."""

    @extend_schema(
        operation_id="list_products",
        summary="List Products",
        description="Return every registered product with its purchased total and usage.",
        tags=["Inventory API"],
        parameters=ACTING_USER_HEADERS,
        responses={200: ProductRegistrySerializer},
    )
    def get(self, request: Request) -> Response:
        """List the product registry."""
        return async_to_sync(self._handle_list_products)(request)

    async def _handle_list_products(self, request: Request) -> Response:
        """Async handler for list products."""
        handler = GetProductRegistryHandler(get_inventory_gateway())
        result = await handler.handle(GetProductRegistryQuery(acting_user=request.acting_user))
        return Response(ProductRegistrySerializer(result).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="add_product",
        summary="Add Product",
        description="Register a product with a purchased total of 0. Administrators only.",
        tags=["Inventory API"],
        parameters=ACTING_USER_HEADERS,
        request=ProductNameRequestSerializer,
        responses={
            201: InventoryMutationResultSerializer,
            400: {"description": "Empty product name"},
            403: {"description": "Not an administrator"},
            409: {"description": "Product name already exists"},
        },
    )
    def post(self, request: Request) -> Response:
        """Add a product."""
        return async_to_sync(self._handle_add_product)(request)

    async def _handle_add_product(self, request: Request) -> Response:
        """Async handler for add product."""
        serializer = ProductNameRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        handler = AddProductHandler(get_inventory_gateway())
        command = AddProductCommand(
            name=serializer.validated_data["name"],
            acting_user=request.acting_user,
        )
        result = await handler.handle(command)
        return Response(
            InventoryMutationResultSerializer(result).data, status=status.HTTP_201_CREATED
        )


class LicenseTotalsView(APIView):
    """View for saving every purchased total at once."""

    @extend_schema(
        operation_id="save_license_totals",
        summary="Save License Totals",
        description=(
            "Replace the purchased-totals mapping. Every value must be a "
            "non-negative integer; an empty string counts as 0. Administrators only."
        ),
        tags=["Inventory API"],
        parameters=ACTING_USER_HEADERS,
        request=SaveLicenseTotalsRequestSerializer,
        responses={
            200: InventoryMutationResultSerializer,
            400: {"description": "Invalid total"},
            403: {"description": "Not an administrator"},
        },
    )
    def put(self, request: Request) -> Response:
        """Save license totals."""
        return async_to_sync(self._handle_save_totals)(request)

    async def _handle_save_totals(self, request: Request) -> Response:
        """Async handler for save license totals."""
        serializer = SaveLicenseTotalsRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        handler = SaveLicenseTotalsHandler(get_inventory_gateway())
        command = SaveLicenseTotalsCommand(
            acting_user=request.acting_user,
            totals=serializer.validated_data["totals"],
        )
        result = await handler.handle(command)
        return Response(InventoryMutationResultSerializer(result).data, status=status.HTTP_200_OK)


class ProductDetailView(APIView):
    """View for setting a product's total and removing a product."""

    @extend_schema(
        operation_id="set_product_total",
        summary="Set Product Total",
        description="Set the purchased total of one product. Administrators only.",
        tags=["Inventory API"],
        parameters=ACTING_USER_HEADERS,
        request=SetProductTotalRequestSerializer,
        responses={
            200: InventoryMutationResultSerializer,
            400: {"description": "Invalid total"},
            403: {"description": "Not an administrator"},
            404: {"description": "Product not found"},
        },
    )
    def patch(self, request: Request, name: str) -> Response:
        """Set a product's purchased total."""
        return async_to_sync(self._handle_set_total)(request, name)

    async def _handle_set_total(self, request: Request, name: str) -> Response:
        """Async handler for set product total."""
        serializer = SetProductTotalRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        handler = SetProductTotalHandler(get_inventory_gateway())
        command = SetProductTotalCommand(
            name=name,
            total=serializer.validated_data["total"],
            acting_user=request.acting_user,
        )
        result = await handler.handle(command)
        return Response(InventoryMutationResultSerializer(result).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="remove_product",
        summary="Remove Product",
        description=(
            "Drop a product's purchased total and its registry entry. Licenses "
            "referencing it are not touched, so while any exist the product stays "
            "listed (as a registered section with a total of 0) and the message "
            "reports how many remain. Requires confirm=true. Administrators only."
        ),
        tags=["Inventory API"],
        parameters=ACTING_USER_HEADERS + [CONFIRM_PARAMETER],
        responses={
            200: InventoryMutationResultSerializer,
            400: {"description": "Removal not confirmed"},
            403: {"description": "Not an administrator"},
            404: {"description": "Product not found"},
        },
    )
    def delete(self, request: Request, name: str) -> Response:
        """Remove a product."""
        return async_to_sync(self._handle_remove_product)(request, name)

    async def _handle_remove_product(self, request: Request, name: str) -> Response:
        """Async handler for remove product."""
        handler = RemoveProductHandler(get_inventory_gateway())
        command = RemoveProductCommand(
            name=name,
            acting_user=request.acting_user,
            confirmed=_is_confirmed(request),
        )
        result = await handler.handle(command)
        return Response(InventoryMutationResultSerializer(result).data, status=status.HTTP_200_OK)


class RenameProductView(APIView):
    """View for renaming a product."""

    @extend_schema(
        operation_id="rename_product",
        summary="Rename Product",
        description=(
            "Rename a product on every license and move its purchased total. "
            "Administrators only."
        ),
        tags=["Inventory API"],
        parameters=ACTING_USER_HEADERS,
        request=RenameProductRequestSerializer,
        responses={
            200: InventoryMutationResultSerializer,
            400: {"description": "Empty product name"},
            403: {"description": "Not an administrator"},
            404: {"description": "Product not found"},
            409: {"description": "Product name already exists"},
            502: {"description": "Rename failed or only partially applied"},
        },
    )
    def post(self, request: Request, name: str) -> Response:
        """Rename a product."""
        return async_to_sync(self._handle_rename_product)(request, name)

    async def _handle_rename_product(self, request: Request, name: str) -> Response:
        """Async handler for rename product."""
        serializer = RenameProductRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        handler = RenameProductHandler(get_inventory_gateway())
        command = RenameProductCommand(
            old_name=name,
            new_name=serializer.validated_data["new_name"],
            acting_user=request.acting_user,
        )
        result = await handler.handle(command)
        return Response(InventoryMutationResultSerializer(result).data, status=status.HTTP_200_OK)
