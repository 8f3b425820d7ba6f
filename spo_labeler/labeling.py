"""
Labeling module.
Reads Microsoft Purview Information Protection sensitivity labels from Graph.
"""
import logging
from typing import Iterator, List

from spo_labeler.errors import LabelResolutionError
from spo_labeler.models import SensitivityLabel
from spo_labeler.rest import RestClient

logger = logging.getLogger(__name__)


class LabelCatalogClient:
    def __init__(self, rest: RestClient, graph_base_url: str):
        self.rest = rest
        self.labels_url = f"{graph_base_url.rstrip('/')}/security/informationProtection/sensitivityLabels"

    def _pages(self, params: dict) -> Iterator[dict]:
        url, query = self.labels_url, params
        while url:
            data = self.rest.get_json(url, params=query)
            yield from data.get("value", [])
            # nextLink already carries the query string
            url, query = data.get("@odata.nextLink"), None

    def list_labels(self) -> List[SensitivityLabel]:
        """
        Return the organisation's labels in the order the service lists them.
        Entries carry the name and content formats only; see `resolve_label_id`.
        """
        labels = []
        for item in self._pages({"$select": "name,contentFormats"}):
            labels.append(SensitivityLabel(
                display_name=item.get("name") or item.get("displayName") or "",
                content_type=", ".join(item.get("contentFormats") or []),
            ))
        logger.info("Retrieved %d sensitivity label(s)", len(labels))
        return labels

    def resolve_label_id(self, display_name: str) -> str:
        """
        Look the label up by name and return its immutable id.
        """
        for item in self._pages({"$select": "id,name"}):
            if (item.get("name") or item.get("displayName")) == display_name and item.get("id"):
                logger.info("Resolved label '%s' to %s", display_name, item["id"])
                return item["id"]
        raise LabelResolutionError(f"Sensitivity label '{display_name}' was not found")
