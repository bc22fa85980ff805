# Import models here so Alembic can discover metadata.
from runi.models.owner import Owner  # noqa: F401

# Staff accounts, permission catalog, grants
from runi.models.staff import Staff  # noqa: F401
from runi.models.permission import PermissionDefinition  # noqa: F401
from runi.models.staff_permission import StaffPermission  # noqa: F401

# Tenant-scoped business records
from runi.models.product_category import ProductCategory  # noqa: F401
