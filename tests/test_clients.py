"""Tests for the REST clients against a mocked requests session."""
from unittest.mock import MagicMock

import pytest
import requests

from spo_labeler.errors import AssignmentError, LabelResolutionError, ServiceError
from spo_labeler.labeling import LabelCatalogClient
from spo_labeler.models import AIP_INTEGRATION, PDF_SENSITIVITY_LABELING
from spo_labeler.rest import RestClient
from spo_labeler.storage import SiteAdminClient
from spo_labeler.tenant import TenantAdminClient

ADMIN = "https://contoso-admin.sharepoint.com"
SITE = "https://contoso.sharepoint.com/sites/Finance"
GRAPH = "https://graph.microsoft.com/beta"


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


class TestRestClient:
    def test_error_status_raises_service_error(self, session, mock_response):
        session.request.return_value = mock_response(403, text="Access denied")
        with pytest.raises(ServiceError) as excinfo:
            RestClient(session).request("GET", ADMIN)
        assert excinfo.value.status_code == 403
        assert "Access denied" in str(excinfo.value)

    def test_transport_error_raises_service_error(self, session):
        session.request.side_effect = requests.ConnectionError("unreachable")
        with pytest.raises(ServiceError, match="unreachable"):
            RestClient(session).request("GET", ADMIN)

    def test_non_json_success_body_raises_service_error(self, session):
        resp = MagicMock(status_code=200, content=b"<html>sign in</html>", text="<html>sign in</html>")
        resp.json.side_effect = requests.exceptions.JSONDecodeError("Expecting value", "<html>", 0)
        session.request.return_value = resp

        with pytest.raises(ServiceError, match="non-JSON") as excinfo:
            RestClient(session).get_json(GRAPH)
        assert excinfo.value.status_code == 200
        assert "sign in" in excinfo.value.body

    def test_timeout_is_applied(self, session, mock_response):
        session.request.return_value = mock_response(200, {"a": 1})
        assert RestClient(session, timeout=7).get_json(ADMIN) == {"a": 1}
        assert session.request.call_args.kwargs["timeout"] == 7


class TestTenantAdminClient:
    def test_reads_both_flags(self, session, mock_response):
        session.request.return_value = mock_response(
            200, {"EnableAIPIntegration": True, "EnableSensitivityLabelforPDF": False}
        )
        client = TenantAdminClient(RestClient(session), ADMIN + "/")

        flags = client.get_flags()

        assert flags.aip_integration_enabled is True
        assert flags.pdf_sensitivity_labeling_enabled is False
        method, url = session.request.call_args.args
        assert (method, url) == ("GET", f"{ADMIN}/_api/SPO.Tenant")
        assert client.get_flag(PDF_SENSITIVITY_LABELING) is False

    def test_set_flag_patches_tenant_property(self, session, mock_response):
        session.request.return_value = mock_response(204)
        TenantAdminClient(RestClient(session), ADMIN).set_flag(AIP_INTEGRATION, True)

        assert session.request.call_args.args == ("PATCH", f"{ADMIN}/_api/SPO.Tenant")
        assert session.request.call_args.kwargs["json"] == {"EnableAIPIntegration": True}


class TestLabelCatalogClient:
    def test_list_keeps_service_order_and_follows_next_link(self, session, mock_response):
        session.request.side_effect = [
            mock_response(200, {
                "value": [{"name": "Public", "contentFormats": ["file", "email"]}],
                "@odata.nextLink": f"{GRAPH}/next",
            }),
            mock_response(200, {"value": [{"name": "Confidential", "contentFormats": []}]}),
        ]
        labels = LabelCatalogClient(RestClient(session), GRAPH).list_labels()

        assert [(l.display_name, l.content_type, l.id) for l in labels] == [
            ("Public", "file, email", None),
            ("Confidential", "", None),
        ]
        assert session.request.call_args_list[1].args == ("GET", f"{GRAPH}/next")
        assert session.request.call_args_list[1].kwargs["params"] is None

    def test_resolve_by_name(self, session, mock_response):
        session.request.return_value = mock_response(200, {"value": [
            {"id": "11111111-aaaa", "name": "Public"},
            {"id": "22222222-bbbb", "name": "Confidential"},
        ]})
        client = LabelCatalogClient(RestClient(session), GRAPH)
        assert client.resolve_label_id("Confidential") == "22222222-bbbb"

    def test_resolve_missing_label(self, session, mock_response):
        session.request.return_value = mock_response(200, {"value": []})
        with pytest.raises(LabelResolutionError):
            LabelCatalogClient(RestClient(session), GRAPH).resolve_label_id("Secret")


class TestSiteAdminClient:
    def test_set_default_label_merges_library(self, session, mock_response):
        session.request.return_value = mock_response(204)
        SiteAdminClient(RestClient(session)).set_default_label(SITE, "label-guid", "Documents")

        method, url = session.request.call_args.args
        kwargs = session.request.call_args.kwargs
        assert method == "POST"
        assert url == f"{SITE}/_api/web/lists/getbytitle('Documents')"
        assert kwargs["json"] == {"DefaultSensitivityLabelForLibrary": "label-guid"}
        assert kwargs["headers"]["X-HTTP-Method"] == "MERGE"

    def test_library_title_is_quoted(self, session):
        client = SiteAdminClient(RestClient(session))
        assert client.library_endpoint(SITE, "Bob's Docs").endswith("getbytitle('Bob''s Docs')")

    def test_service_failure_becomes_assignment_error(self, session, mock_response):
        session.request.return_value = mock_response(404, text="List does not exist")
        with pytest.raises(AssignmentError, match="List does not exist"):
            SiteAdminClient(RestClient(session)).set_default_label(SITE, "label-guid")

    def test_get_default_label(self, session, mock_response):
        session.request.return_value = mock_response(200, {"DefaultSensitivityLabelForLibrary": "abc"})
        assert SiteAdminClient(RestClient(session)).get_default_label(SITE) == "abc"

    def test_get_default_label_unset(self, session, mock_response):
        session.request.return_value = mock_response(200, {"DefaultSensitivityLabelForLibrary": ""})
        assert SiteAdminClient(RestClient(session)).get_default_label(SITE) is None
