"""
Storage module.
Sets and reads the default sensitivity label of a SharePoint document library.
"""
import logging
from typing import Optional

from spo_labeler.errors import AssignmentError, ServiceError
from spo_labeler.rest import RestClient

logger = logging.getLogger(__name__)

DEFAULT_LABEL_PROPERTY = "DefaultSensitivityLabelForLibrary"


def _odata_literal(value: str) -> str:
    return value.replace("'", "''")


class SiteAdminClient:
    def __init__(self, rest: RestClient):
        self.rest = rest

    def library_endpoint(self, site_url: str, library: str) -> str:
        return f"{site_url.rstrip('/')}/_api/web/lists/getbytitle('{_odata_literal(library)}')"

    def set_default_label(self, site_url: str, label_id: str, library: str = "Documents") -> None:
        """
        Make `label_id` the default sensitivity label of `library` on `site_url`.
        """
        logger.info("Setting default label %s on %s (%s)", label_id, site_url, library)
        try:
            self.rest.request(
                "POST",
                self.library_endpoint(site_url, library),
                json={DEFAULT_LABEL_PROPERTY: label_id},
                headers={"X-HTTP-Method": "MERGE", "IF-MATCH": "*"},
            )
        except ServiceError as exc:
            raise AssignmentError(f"Failed to set default label on {site_url}: {exc}") from exc

    def get_default_label(self, site_url: str, library: str = "Documents") -> Optional[str]:
        try:
            data = self.rest.get_json(
                self.library_endpoint(site_url, library),
                params={"$select": DEFAULT_LABEL_PROPERTY},
            )
        except ServiceError as exc:
            raise AssignmentError(f"Failed to read default label on {site_url}: {exc}") from exc
        return data.get(DEFAULT_LABEL_PROPERTY) or None
