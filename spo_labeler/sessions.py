"""Opens the authenticated clients every later phase works through."""
from __future__ import annotations

import logging
from dataclasses import dataclass

import requests

from spo_labeler.auth import AuthManager
from spo_labeler.config import AppConfig
from spo_labeler.errors import ConnectionFailedError
from spo_labeler.labeling import LabelCatalogClient
from spo_labeler.models import SiteTarget
from spo_labeler.rest import SHAREPOINT_HEADERS, RestClient, bearer_session
from spo_labeler.storage import SiteAdminClient
from spo_labeler.tenant import TenantAdminClient

logger = logging.getLogger(__name__)

GRAPH_LABEL_SCOPES = ["https://graph.microsoft.com/InformationProtectionPolicy.Read"]


def sharepoint_scopes(resource_url: str) -> list:
    return [f"{resource_url.rstrip('/')}/AllSites.FullControl"]


@dataclass
class Sessions:
    labels: LabelCatalogClient
    tenant: TenantAdminClient
    sites: SiteAdminClient

    def close(self) -> None:
        for client in (self.labels, self.tenant, self.sites):
            client.rest.close()


def open_sessions(auth: AuthManager, user_principal_name: str, target: SiteTarget,
                  config: AppConfig) -> Sessions:
    """Sign the operator in and build one client per remote service.

    Raises ConnectionFailedError when any login or token request fails.
    """
    try:
        graph = auth.login(user_principal_name, GRAPH_LABEL_SCOPES)
        logger.info("Connected to the compliance label service as %s", user_principal_name)
        admin_token = auth.get_token(sharepoint_scopes(target.admin_url))
        logger.info("Connected to SharePoint Online admin %s", target.admin_url)
        site_token = auth.get_token(sharepoint_scopes(target.root_url))
    except (requests.RequestException, ValueError) as exc:
        # MSAL surfaces network and authority problems as these.
        raise ConnectionFailedError(str(exc)) from exc

    return Sessions(
        labels=LabelCatalogClient(
            RestClient(bearer_session(graph["access_token"]), config.http_timeout),
            config.graph_base_url,
        ),
        tenant=TenantAdminClient(
            RestClient(bearer_session(admin_token, SHAREPOINT_HEADERS), config.http_timeout),
            target.admin_url,
        ),
        sites=SiteAdminClient(
            RestClient(bearer_session(site_token, SHAREPOINT_HEADERS), config.http_timeout),
        ),
    )
