# permissions/roles.py

from __future__ import annotations

from typing import Optional

from rest_framework.permissions import SAFE_METHODS, BasePermission


# =========================================================
# ROLE CONSTANTS (STAFF JOB ROLES)
# =========================================================
ROLE_ADMIN = "admin"
ROLE_STAFF = "staff"

STAFF_ROLES = {
    ROLE_ADMIN,
    ROLE_STAFF,
}


# =========================================================
# CAPABILITIES (THE REAL PERMISSION LANGUAGE)
# =========================================================
# Views protect capabilities, not raw roles.
CAP_BILLING_ISSUE = "billing.issue"          # issue invoices + tickets
CAP_BILLING_STATUS = "billing.status"        # move documents through their lifecycle

CAP_LEDGER_POST = "ledger.post"              # manual deposit/credit entries
CAP_PARTIES_EDIT = "parties.edit"            # create/update customers, agents, vendors

CAP_REPORTS_VIEW = "reports.view"

CAP_FINANCE_RESET = "finance.reset"          # bulk ledger/balance reset

ALL_CAPABILITIES = {
    CAP_BILLING_ISSUE,
    CAP_BILLING_STATUS,
    CAP_LEDGER_POST,
    CAP_PARTIES_EDIT,
    CAP_REPORTS_VIEW,
    CAP_FINANCE_RESET,
}


# =========================================================
# ROLE → CAPABILITY MAP
# =========================================================
ROLE_CAPABILITIES: dict[str, set[str]] = {
    ROLE_ADMIN: {
        *ALL_CAPABILITIES,
    },
    ROLE_STAFF: {
        CAP_BILLING_ISSUE,
        CAP_BILLING_STATUS,
        CAP_LEDGER_POST,
        CAP_PARTIES_EDIT,
        CAP_REPORTS_VIEW,
        # deliberately NOT finance.reset
    },
}


# =========================================================
# Helpers
# =========================================================
def get_user_role(user) -> Optional[str]:
    return getattr(user, "role", None)


def capabilities_for(user) -> set[str]:
    if getattr(user, "is_superuser", False):
        return set(ALL_CAPABILITIES)
    return set(ROLE_CAPABILITIES.get(get_user_role(user), set()))


def user_has_capability(user, capability: str) -> bool:
    return capability in capabilities_for(user)


# =========================================================
# Capability Permissions
# =========================================================
class HasCapability(BasePermission):
    """
    Require a specific capability.

    Usage:
        permission_classes = [IsAuthenticated, HasCapability]
        view.required_capability = CAP_LEDGER_POST
    """

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        required = getattr(view, "required_capability", None)
        if not required:
            # deny-by-default
            return False

        return user_has_capability(user, required)


class HasWriteCapability(HasCapability):
    """
    Reads are open to any authenticated staff member; unsafe methods
    require view.required_capability.
    """

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        if request.method in SAFE_METHODS:
            return get_user_role(user) in STAFF_ROLES or user.is_superuser

        return super().has_permission(request, view)

