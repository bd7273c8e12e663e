# users/permissions_matrix.py
# Static role -> permission table. Loaded once at import time and frozen;
# nothing at runtime can grant or revoke a permission.
#
# A permission is the opaque token "<resource>:<action>" with action in
# {read, write}. Tokens are not hierarchical: "members:write" does not imply
# "members:read".
from types import MappingProxyType

# --- Roles ---
FRONT_OFFICE = "FRONT_OFFICE"
ACCOUNTING = "ACCOUNTING"
MARKETING = "MARKETING"
SUPERVISOR = "SUPERVISOR"
OWNER = "OWNER"

ROLE_CHOICES = [
    (FRONT_OFFICE, "Front Office"),
    (ACCOUNTING, "Accounting"),
    (MARKETING, "Marketing"),
    (SUPERVISOR, "Supervisor"),
    (OWNER, "Owner"),
]
ROLES = tuple(value for value, _ in ROLE_CHOICES)

# --- Resource families ---
MEMBERS = "members"
MEMBER_TRANSACTIONS = "member_transactions"
MEMBER_ABSENCES = "member_absences"
COMPANY_TRANSACTIONS = "company_transactions"
CAMPAIGNS = "campaigns"
CAMPAIGN_LOGS = "campaign_logs"
ANALYTICS = "analytics"
ACTIVITY_LOGS = "activity_logs"

RESOURCES = (
    MEMBERS,
    MEMBER_TRANSACTIONS,
    MEMBER_ABSENCES,
    COMPANY_TRANSACTIONS,
    CAMPAIGNS,
    CAMPAIGN_LOGS,
    ANALYTICS,
    ACTIVITY_LOGS,
)

# Families that carry day-to-day data (everything but the OWNER-only reports)
OPERATIONAL_RESOURCES = RESOURCES[:6]

READ = "read"
WRITE = "write"
ACTIONS = (READ, WRITE)


def perm(resource: str, action: str) -> str:
    return f"{resource}:{action}"


def _read_write(*resources):
    out = []
    for r in resources:
        out += [perm(r, READ), perm(r, WRITE)]
    return out


# "Front office"  -> members, member payments, absences
# "Accounting"    -> company ledger
# "Marketing"     -> campaigns + campaign logs
# "Supervisor"    -> view everything operational, change nothing
# "Owner"         -> everything, plus analytics and the staff activity trail
_PERMS = {
    FRONT_OFFICE: _read_write(MEMBERS, MEMBER_TRANSACTIONS, MEMBER_ABSENCES),
    ACCOUNTING: _read_write(COMPANY_TRANSACTIONS),
    MARKETING: _read_write(CAMPAIGNS, CAMPAIGN_LOGS),
    SUPERVISOR: [perm(r, READ) for r in OPERATIONAL_RESOURCES],
    OWNER: _read_write(*OPERATIONAL_RESOURCES) + [perm(ANALYTICS, READ), perm(ACTIVITY_LOGS, READ)],
}

ROLE_PERMISSIONS = MappingProxyType({role: frozenset(perms) for role, perms in _PERMS.items()})


def has_permission(role, permission) -> bool:
    """True only if `permission` is listed for `role`. Unknown inputs are simply False."""
    try:
        return permission in ROLE_PERMISSIONS.get(role, ())
    except TypeError:
        # unhashable role/permission
        return False


def can_read(role, resource) -> bool:
    return has_permission(role, perm(resource, READ))


def can_write(role, resource) -> bool:
    return has_permission(role, perm(resource, WRITE))


def permissions_for(role) -> list[str]:
    """Sorted permission list for a role (empty for unknown roles)."""
    try:
        return sorted(ROLE_PERMISSIONS.get(role, ()))
    except TypeError:
        return []
