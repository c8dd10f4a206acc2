class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class StructuralError(AppError):
    """Raised when a generation request cannot be attempted at all."""
    def __init__(self, message: str, status_code: int = 400, details: dict = None):
        super().__init__(message, status_code=status_code, details=details)

class DivisionNotFoundError(StructuralError):
    """Raised when the requested division is not in the catalog."""
    def __init__(self, division_id: str):
        super().__init__(
            "Division not found",
            status_code=404,
            details={"division_id": division_id},
        )

class NoEligibleSubjectsError(StructuralError):
    """Raised when a division references no subject known to the catalog."""
    def __init__(self, division_id: str):
        super().__init__(
            "No subjects assigned to this division",
            status_code=422,
            details={"division_id": division_id},
        )

class CatalogValidationError(AppError):
    """Raised when strict generation is requested against an insufficient catalog."""
    def __init__(self, errors: list[str]):
        super().__init__(
            "Catalog is insufficient for timetable generation",
            status_code=422,
            details={"errors": list(errors)},
        )

class ConfigurationError(AppError):
    """Raised when system configuration is invalid."""
    def __init__(self, message: str):
        super().__init__(message, status_code=500)
