"""Default security group rule revoker - reusable for CLI and FastAPI."""

from sg_revoker.regions import REGIONS, get_regions
from sg_revoker.revoker import (
    find_default_security_groups,
    list_security_group_rules,
    revoke_rule,
    revoke_default_rules,
    revoke_region,
    revoke_all_regions,
    security_group_console_url,
    DefaultSecurityGroup,
    SecurityGroupRule,
    RegionRevokeResult,
    RunReport,
)

__all__ = [
    "REGIONS",
    "get_regions",
    "find_default_security_groups",
    "list_security_group_rules",
    "revoke_rule",
    "revoke_default_rules",
    "revoke_region",
    "revoke_all_regions",
    "security_group_console_url",
    "DefaultSecurityGroup",
    "SecurityGroupRule",
    "RegionRevokeResult",
    "RunReport",
]
