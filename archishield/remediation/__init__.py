"""Rule-based remediation suggestions for failed audits."""

from archishield.remediation.advisor import REMEDIATION_RULES, RemediationAdvisor, apply_actions

__all__ = ["REMEDIATION_RULES", "RemediationAdvisor", "apply_actions"]
