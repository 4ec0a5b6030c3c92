"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions.
"""


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    def __init__(self, message: str, code: str = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class InventoryValidationError(DomainException):
    """Base exception for input rejected before any remote call."""

    pass


class InvalidProductNameError(InventoryValidationError):
    """Raised when a product name is empty after trimming."""

    def __init__(self, message: str = "Product name cannot be empty"):
        super().__init__(message, code="INVALID_PRODUCT_NAME")


class DuplicateProductNameError(InventoryValidationError):
    """Raised when a product name collides with an existing one."""

    def __init__(self, name: str):
        super().__init__(
            f"A product named '{name}' already exists",
            code="DUPLICATE_PRODUCT_NAME",
        )
        self.name = name


class InvalidLicenseTotalError(InventoryValidationError):
    """Raised when a purchased total is not a non-negative integer."""

    def __init__(self, value):
        super().__init__(
            f"Invalid purchased total: {value!r} (must be a non-negative integer)",
            code="INVALID_LICENSE_TOTAL",
        )
        self.value = value


class InvalidLicenseFieldsError(InventoryValidationError):
    """Raised when license fields break a domain rule."""

    def __init__(self, message: str = "Invalid license fields"):
        super().__init__(message, code="INVALID_LICENSE_FIELDS")


class ProductNotFoundError(DomainException):
    """Raised when a product is not in the registry."""

    def __init__(self, name: str):
        super().__init__(f"Product '{name}' not found", code="PRODUCT_NOT_FOUND")
        self.name = name


class ConfirmationRequiredError(DomainException):
    """Raised when a destructive action was not confirmed."""

    def __init__(self, message: str = "This action must be confirmed"):
        super().__init__(message, code="CONFIRMATION_REQUIRED")


class ProductManagementForbiddenError(DomainException):
    """Raised when a non-admin tries to manage products."""

    def __init__(self, message: str = "Only administrators can manage products"):
        super().__init__(message, code="PRODUCT_MANAGEMENT_FORBIDDEN")


class RemoteInventoryError(DomainException):
    """Raised when a call to the external inventory API fails."""

    def __init__(self, operation: str, detail: str = ""):
        message = f"Inventory API call '{operation}' failed"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message, code="REMOTE_INVENTORY_ERROR")
        self.operation = operation
        self.detail = detail


class ProductRenameIncompleteError(RemoteInventoryError):
    """Raised when licenses were renamed but the purchased total was not moved."""

    def __init__(self, old_name: str, new_name: str, detail: str = ""):
        super().__init__("save_license_totals", detail)
        self.message = (
            f"Licenses were moved from '{old_name}' to '{new_name}' but the "
            f"purchased total could not be moved"
        )
        self.code = "PRODUCT_RENAME_INCOMPLETE"
        self.args = (self.message,)
        self.old_name = old_name
        self.new_name = new_name
