"""ORM models aggregate exports."""
from .core import (  # noqa: F401
    Base,
    Clinic,
    Customer,
    DentalService,
    Employee,
    new_id,
)
from .labo import (  # noqa: F401
    LaboItem,
    LaboOrder,
    LaboService,
    Supplier,
)

__all__ = [
    "Base",
    "new_id",
    "Clinic",
    "Employee",
    "Customer",
    "DentalService",
    "Supplier",
    "LaboItem",
    "LaboService",
    "LaboOrder",
]
