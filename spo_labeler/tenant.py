"""
Tenant administration module.
Reads and writes SharePoint Online tenant settings through the admin site.
"""
import logging

from spo_labeler.models import REQUIRED_FLAGS, FeatureFlag, TenantFeatureFlags
from spo_labeler.rest import RestClient

logger = logging.getLogger(__name__)


class TenantAdminClient:
    """Client for `https://{tenant}-admin.sharepoint.com/_api/SPO.Tenant`."""

    def __init__(self, rest: RestClient, admin_url: str):
        self.rest = rest
        self.admin_url = admin_url.rstrip("/")

    @property
    def tenant_endpoint(self) -> str:
        return f"{self.admin_url}/_api/SPO.Tenant"

    def get_flags(self) -> TenantFeatureFlags:
        data = self.rest.get_json(
            self.tenant_endpoint,
            params={"$select": ",".join(f.tenant_property for f in REQUIRED_FLAGS)},
        )
        flags = TenantFeatureFlags(
            aip_integration_enabled=bool(data.get("EnableAIPIntegration", False)),
            pdf_sensitivity_labeling_enabled=bool(data.get("EnableSensitivityLabelforPDF", False)),
        )
        logger.debug("Tenant flags: %s", flags)
        return flags

    def get_flag(self, flag: FeatureFlag) -> bool:
        return self.get_flags().is_enabled(flag)

    def set_flag(self, flag: FeatureFlag, value: bool) -> None:
        logger.info("Setting tenant property %s to %s", flag.tenant_property, value)
        self.rest.request("PATCH", self.tenant_endpoint, json={flag.tenant_property: value})
