from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Tuple


class PermissionKey(str, enum.Enum):
    # staff master switches
    STAFF_PRODUCT_MASTER = "staff_product_master"
    STAFF_SALES_MASTER = "staff_sales_master"
    STAFF_CASH_TRACKING_MASTER = "staff_cash_tracking_master"

    # products : categories
    PRODUCT_CATEGORIES_VIEW = "product_categories_view"
    PRODUCT_CATEGORIES_CREATE = "product_categories_create"
    PRODUCT_CATEGORIES_EDIT = "product_categories_edit"
    PRODUCT_CATEGORIES_DELETE = "product_categories_delete"

    # products : adding
    PRODUCT_ADDING_VIEW = "product_adding_view"
    PRODUCT_ADDING_CREATE = "product_adding_create"

    # products : live stock
    LIVE_STOCK_VIEW = "live_stock_view"
    LIVE_STOCK_EDIT = "live_stock_edit"
    LIVE_STOCK_DELETE = "live_stock_delete"

    # sales
    MANAGE_SALES_VIEW = "manage_sales_view"
    MANAGE_SALES_EDIT = "manage_sales_edit"
    MANAGE_SALES_DELETE = "manage_sales_delete"
    ADD_SALES_VIEW = "add_sales_view"
    AUDIT_SALES_VIEW = "audit_sales_view"
    AUDIT_SALES_CONFIRM = "audit_sales_confirm"
    AUDIT_SALES_REJECT = "audit_sales_reject"

    # cash tracking
    DEPOSITED_VIEW = "deposited_view"
    DEPOSITED_CREATE = "deposited_create"
    DEPOSITED_DELETE = "deposited_delete"
    DEBTORS_VIEW = "debtors_view"


@dataclass(frozen=True)
class PermissionSpec:
    permission_key: str
    main_tab_key: str
    sub_tab_key: str
    action_key: str
    label: str
    description: Optional[str] = None

    def __post_init__(self) -> None:
        # raises ValueError for a key outside the closed set
        PermissionKey(self.permission_key)


def _p(key: PermissionKey, main_tab: str, sub_tab: str, action: str, label: str, description: Optional[str] = None) -> PermissionSpec:
    return PermissionSpec(
        permission_key=key.value,
        main_tab_key=main_tab,
        sub_tab_key=sub_tab,
        action_key=action,
        label=label,
        description=description,
    )


PERMISSION_DEFINITIONS: Tuple[PermissionSpec, ...] = (
    _p(PermissionKey.STAFF_PRODUCT_MASTER, "products", "master", "master",
       "Staff Product Access", "Global toggle for all Staff Product permissions"),
    _p(PermissionKey.STAFF_SALES_MASTER, "sales", "master", "master",
       "Staff Sales Access", "Global toggle for all Staff Sales permissions"),
    _p(PermissionKey.STAFF_CASH_TRACKING_MASTER, "cash_tracking", "master", "master",
       "Staff Cash Tracking Access", "Global toggle for all Staff Cash Tracking permissions"),

    _p(PermissionKey.PRODUCT_CATEGORIES_VIEW, "products", "categories", "view", "View Categories"),
    _p(PermissionKey.PRODUCT_CATEGORIES_CREATE, "products", "categories", "create", "Create Category"),
    _p(PermissionKey.PRODUCT_CATEGORIES_EDIT, "products", "categories", "edit", "Edit Category"),
    _p(PermissionKey.PRODUCT_CATEGORIES_DELETE, "products", "categories", "delete", "Delete Category"),

    _p(PermissionKey.PRODUCT_ADDING_VIEW, "products", "product_adding", "view", "View Product Adding"),
    _p(PermissionKey.PRODUCT_ADDING_CREATE, "products", "product_adding", "create", "Add Product"),

    _p(PermissionKey.LIVE_STOCK_VIEW, "products", "live_stock", "view", "View Live Stock"),
    _p(PermissionKey.LIVE_STOCK_EDIT, "products", "live_stock", "edit", "Edit Stock"),
    _p(PermissionKey.LIVE_STOCK_DELETE, "products", "live_stock", "delete", "Delete Stock"),

    _p(PermissionKey.MANAGE_SALES_VIEW, "sales", "manage_sales", "view", "View Sales"),
    _p(PermissionKey.ADD_SALES_VIEW, "sales", "add_sales", "view", "Add Sale Access"),
    _p(PermissionKey.MANAGE_SALES_EDIT, "sales", "manage_sales", "edit", "Edit Sales"),
    _p(PermissionKey.MANAGE_SALES_DELETE, "sales", "manage_sales", "delete", "Delete Sales"),

    _p(PermissionKey.AUDIT_SALES_VIEW, "sales", "audit_sales", "view", "View Sales Audit"),
    _p(PermissionKey.AUDIT_SALES_CONFIRM, "sales", "audit_sales", "confirm", "Confirm Audit"),
    _p(PermissionKey.AUDIT_SALES_REJECT, "sales", "audit_sales", "reject", "Reject Audit"),

    _p(PermissionKey.DEPOSITED_VIEW, "cash_tracking", "deposited", "view", "View Deposited"),
    _p(PermissionKey.DEPOSITED_CREATE, "cash_tracking", "deposited", "create", "Create Deposit"),
    _p(PermissionKey.DEPOSITED_DELETE, "cash_tracking", "deposited", "delete", "Delete Deposit"),

    _p(PermissionKey.DEBTORS_VIEW, "cash_tracking", "debtors", "view", "View Debtors"),
)


def normalize_permission_key(key: str | PermissionKey) -> str:
    if isinstance(key, PermissionKey):
        return key.value
    return (key or "").strip()
