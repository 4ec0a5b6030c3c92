"""
Serializers for Inventory API endpoints.
"""

from rest_framework import serializers

from licenses.domain.license import LicenseFields


class OptionalTextField(serializers.CharField):
    """Optional free-text license attribute; blank and null are both accepted."""

    def __init__(self, **kwargs):
        kwargs.setdefault("required", False)
        kwargs.setdefault("allow_blank", True)
        kwargs.setdefault("allow_null", True)
        kwargs.setdefault("default", None)
        kwargs.setdefault("max_length", 1000)
        super().__init__(**kwargs)


class RawTotalField(serializers.Field):
    """
    Purchased total as typed by the user.

    Integers and strings pass through untouched; the domain decides
    whether they are valid totals.
    """

    def to_internal_value(self, data):
        return data

    def to_representation(self, value):
        return value


class LicenseFieldsRequestSerializer(serializers.Serializer):
    """Serializer for add and update license requests."""

    product = serializers.CharField(required=True, max_length=255)
    serial_key = serializers.CharField(required=False, allow_blank=True, default="", max_length=500)
    assigned_user = serializers.CharField(
        required=False, allow_blank=True, default="", max_length=255
    )
    license_type = OptionalTextField()
    expiration_date = OptionalTextField(max_length=64)
    job_title = OptionalTextField()
    department = OptionalTextField()
    manager = OptionalTextField()
    cost_center = OptionalTextField()
    ledger_account = OptionalTextField()
    computer_name = OptionalTextField()
    ticket_number = OptionalTextField()
    notes = OptionalTextField(max_length=5000)

    def to_license_fields(self) -> LicenseFields:
        """Build LicenseFields from validated data."""
        return LicenseFields(**{name: self.validated_data.get(name) for name in LicenseFields.field_names()})


class ProductNameRequestSerializer(serializers.Serializer):
    """Serializer for add product requests."""

    name = serializers.CharField(required=True, allow_blank=True, trim_whitespace=False)


class RenameProductRequestSerializer(serializers.Serializer):
    """Serializer for rename product requests."""

    new_name = serializers.CharField(required=True, allow_blank=True, trim_whitespace=False)


class SetProductTotalRequestSerializer(serializers.Serializer):
    """Serializer for set product total requests."""

    total = RawTotalField(required=True)


class SaveLicenseTotalsRequestSerializer(serializers.Serializer):
    """Serializer for save license totals requests."""

    totals = serializers.DictField(child=RawTotalField(), allow_empty=True)


class ExpirationSerializer(serializers.Serializer):
    """Serializer for ExpirationDTO."""

    status = serializers.CharField()
    label = serializers.CharField()
    expires_on = serializers.CharField(allow_null=True)


class ApprovalBadgeSerializer(serializers.Serializer):
    """Serializer for ApprovalBadgeDTO."""

    status = serializers.CharField()
    label = serializers.CharField()


class LicenseRowSerializer(serializers.Serializer):
    """Serializer for LicenseRowDTO."""

    id = serializers.IntegerField()
    product = serializers.CharField()
    serial_key = serializers.CharField(allow_blank=True)
    assigned_user = serializers.CharField(allow_blank=True)
    license_type = serializers.CharField(allow_null=True)
    expiration_date = serializers.CharField(allow_null=True)
    job_title = serializers.CharField(allow_null=True)
    department = serializers.CharField(allow_null=True)
    manager = serializers.CharField(allow_null=True)
    cost_center = serializers.CharField(allow_null=True)
    ledger_account = serializers.CharField(allow_null=True)
    computer_name = serializers.CharField(allow_null=True)
    ticket_number = serializers.CharField(allow_null=True)
    notes = serializers.CharField(allow_null=True)
    approval_status = serializers.CharField(allow_null=True)
    rejection_reason = serializers.CharField(allow_null=True)
    expiration = ExpirationSerializer()
    approval_badge = ApprovalBadgeSerializer(allow_null=True)


class ProductGroupSerializer(serializers.Serializer):
    """Serializer for ProductGroupDTO."""

    product = serializers.CharField()
    registered = serializers.BooleanField()
    total = serializers.IntegerField()
    used = serializers.IntegerField()
    available = serializers.IntegerField()
    has_shortage = serializers.BooleanField()
    licenses = LicenseRowSerializer(many=True)


class InventoryViewSerializer(serializers.Serializer):
    """Serializer for InventoryViewDTO."""

    products = serializers.ListField(child=serializers.CharField())
    totals = serializers.DictField(child=serializers.IntegerField())
    groups = ProductGroupSerializer(many=True)
    orphaned_products = serializers.ListField(child=serializers.CharField())
    can_manage_products = serializers.BooleanField()


class InventoryMutationResultSerializer(serializers.Serializer):
    """Serializer for InventoryMutationResultDTO."""

    message = serializers.CharField(allow_null=True)
    inventory = InventoryViewSerializer(allow_null=True)
    license = LicenseRowSerializer(allow_null=True)


class ProductEntrySerializer(serializers.Serializer):
    """Serializer for ProductEntryDTO."""

    name = serializers.CharField()
    total = serializers.IntegerField()
    used = serializers.IntegerField()
    available = serializers.IntegerField()
    has_recorded_total = serializers.BooleanField()


class ProductRegistrySerializer(serializers.Serializer):
    """Serializer for ProductRegistryDTO."""

    products = ProductEntrySerializer(many=True)
