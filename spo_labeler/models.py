"""Plain data types passed between the workflow phases."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class FeatureFlag:
    name: str
    tenant_property: str
    title: str


AIP_INTEGRATION = FeatureFlag("aip_integration", "EnableAIPIntegration", "AIP Integration")
PDF_SENSITIVITY_LABELING = FeatureFlag(
    "pdf_sensitivity_labeling", "EnableSensitivityLabelforPDF", "PDF sensitivity labeling"
)
# Gate order matters: a decline on the first flag skips the second.
REQUIRED_FLAGS = (AIP_INTEGRATION, PDF_SENSITIVITY_LABELING)


@dataclass
class TenantFeatureFlags:
    aip_integration_enabled: bool
    pdf_sensitivity_labeling_enabled: bool

    def is_enabled(self, flag: FeatureFlag) -> bool:
        return bool(getattr(self, f"{flag.name}_enabled"))


@dataclass
class SensitivityLabel:
    display_name: str
    content_type: str = ""
    id: Optional[str] = None


@dataclass(frozen=True)
class SiteTarget:
    tenant_name: str
    site_name: str

    @property
    def url(self) -> str:
        return f"https://{self.tenant_name}.sharepoint.com/sites/{self.site_name}"

    @property
    def root_url(self) -> str:
        return f"https://{self.tenant_name}.sharepoint.com"

    @property
    def admin_url(self) -> str:
        return f"https://{self.tenant_name}-admin.sharepoint.com"


class WorkflowOutcome(str, Enum):
    COMPLETED = "completed"
    ENVIRONMENT_UNAVAILABLE = "environment_unavailable"
    CONFIGURATION_INVALID = "configuration_invalid"
    CONNECTION_FAILED = "connection_failed"
    FEATURE_DECLINED = "feature_declined"
    FEATURE_FLAG_FAILED = "feature_flag_failed"
    EMPTY_CATALOG = "empty_catalog"
    INVALID_SELECTION = "invalid_selection"
    ASSIGNMENT_FAILED = "assignment_failed"


@dataclass
class WorkflowResult:
    outcome: WorkflowOutcome
    message: str = ""
    label: Optional[SensitivityLabel] = None
    site_url: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.outcome is WorkflowOutcome.COMPLETED
