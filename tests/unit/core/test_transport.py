"""
Tests for the HTTP transport and task id extraction.
"""

import pytest
import requests
from lxml import etree

from vappnet.core.exceptions import TaskReferenceError, TransportError
from vappnet.core.transport import HttpTransport, extract_task_id, get_header, task_id_from_url

from tests.common import (
    API_URL,
    NETWORK_CONFIG_SECTION,
    TASK_DOCUMENT,
    TASK_ID,
    TASK_LOCATION,
    VCD_ERROR_DOCUMENT,
    MockFactory,
)

SECTION_PATH = "/vApp/vapp-1234/networkConfigSection"
CONTENT_TYPE = "application/vnd.vmware.vcloud.networkConfigSection+xml"


def _transport(*responses, **kwargs):
    return HttpTransport(API_URL + "/", session=MockFactory.session(*responses), **kwargs)


class TestHttpTransport:
    """Tests for HttpTransport."""

    def test_session_headers(self):
        transport = _transport(auth_token="secret", api_version="27.0")

        assert transport.api_url == API_URL
        assert transport.session.headers["Accept"] == "application/*+xml;version=27.0"
        assert transport.auth_token == "secret"

    def test_no_token_by_default(self):
        transport = _transport()

        assert transport.auth_token is None
        assert transport.session.headers["Accept"] == "application/*+xml;version=5.5"

    def test_get_parses_document(self):
        transport = _transport(MockFactory.http_response(200, NETWORK_CONFIG_SECTION))

        document, headers = transport.send("GET", SECTION_PATH)

        assert etree.QName(document).localname == "NetworkConfigSection"
        transport.session.request.assert_called_once_with(
            "GET", f"{API_URL}{SECTION_PATH}", timeout=30.0, verify=True, data=None, headers={}
        )

    def test_put_sends_body_and_content_type(self):
        transport = _transport(
            MockFactory.http_response(202, TASK_DOCUMENT, {"Location": TASK_LOCATION}),
            verify_ssl=False,
            timeout=5,
        )

        document, headers = transport.send("put", SECTION_PATH, b"<xml/>", CONTENT_TYPE)

        assert headers["Location"] == TASK_LOCATION
        transport.session.request.assert_called_once_with(
            "PUT",
            f"{API_URL}{SECTION_PATH}",
            timeout=5,
            verify=False,
            data=b"<xml/>",
            headers={"Content-Type": CONTENT_TYPE},
        )

    def test_empty_body(self):
        transport = _transport(MockFactory.http_response(202, b"  \n", {"Location": TASK_LOCATION}))

        document, headers = transport.send("PUT", SECTION_PATH, b"<xml/>")

        assert document is None
        assert headers == {"Location": TASK_LOCATION}

    def test_absolute_url(self):
        transport = _transport(MockFactory.http_response(200, b""))

        transport.send("GET", TASK_LOCATION)

        assert transport.session.request.call_args[0][1] == TASK_LOCATION

    def test_vcd_error_document(self):
        transport = _transport(MockFactory.http_response(400, VCD_ERROR_DOCUMENT, reason="Bad Request"))

        with pytest.raises(TransportError) as exc_info:
            transport.send("PUT", SECTION_PATH, b"<xml/>")

        assert exc_info.value.status_code == 400
        assert str(exc_info.value) == (
            "[BAD_REQUEST] The requested operation could not be executed since vApp is not running."
        )

    @pytest.mark.parametrize("content", [b"", b"<html>oops</html>", b"not xml"])
    def test_error_without_vcd_document(self, content):
        transport = _transport(MockFactory.http_response(503, content, reason="Service Unavailable"))

        with pytest.raises(TransportError) as exc_info:
            transport.send("GET", SECTION_PATH)

        assert exc_info.value.status_code == 503
        assert str(exc_info.value) == "HTTP 503 Service Unavailable"

    def test_connection_error(self):
        session = MockFactory.session()
        session.request.side_effect = requests.exceptions.ConnectionError("refused")
        transport = HttpTransport(API_URL, session=session)

        with pytest.raises(TransportError) as exc_info:
            transport.send("GET", SECTION_PATH)

        assert exc_info.value.status_code is None
        assert "refused" in str(exc_info.value)

    def test_malformed_response(self):
        transport = _transport(MockFactory.http_response(200, b"<NetworkConfigSection>"))

        with pytest.raises(TransportError, match="Malformed response"):
            transport.send("GET", SECTION_PATH)

    def test_login_stores_token(self):
        transport = _transport(MockFactory.http_response(200, b"", {"x-vcloud-authorization": "tok"}))

        assert transport.login("admin@org", "pw") == "tok"
        assert transport.auth_token == "tok"
        transport.session.request.assert_called_once_with(
            "POST", f"{API_URL}/sessions", timeout=30.0, verify=True, auth=("admin@org", "pw")
        )

    def test_login_without_token(self):
        transport = _transport(MockFactory.http_response(200, b""))

        with pytest.raises(TransportError, match="session token"):
            transport.login("admin@org", "pw")

    def test_login_rejected(self):
        transport = _transport(MockFactory.http_response(401, b"", reason="Unauthorized"))

        with pytest.raises(TransportError) as exc_info:
            transport.login("admin@org", "wrong")

        assert exc_info.value.status_code == 401


class TestTaskId:
    """Tests for task id extraction."""

    def test_from_location(self):
        assert extract_task_id({"Location": TASK_LOCATION}) == TASK_ID

    def test_header_lookup_is_case_insensitive(self):
        assert extract_task_id({"location": TASK_LOCATION}) == TASK_ID
        assert get_header({"CONTENT-TYPE": "x"}, "Content-Type") == "x"
        assert get_header({}, "Location") is None

    def test_strips_through_last_marker(self):
        assert task_id_from_url("https://h/api/task/old/task/abc-123") == "abc-123"
        assert task_id_from_url("abc-123") == "abc-123"

    def test_location_wins_over_document(self):
        document = etree.fromstring(TASK_DOCUMENT.encode("utf-8"))

        assert extract_task_id({"Location": f"{API_URL}/task/other"}, document) == "other"

    def test_from_task_document(self):
        document = etree.fromstring(TASK_DOCUMENT.encode("utf-8"))

        assert extract_task_id({}, document) == TASK_ID

    def test_from_nested_task(self):
        document = etree.fromstring(
            f'<Tasks xmlns="http://www.vmware.com/vcloud/v1.5"><Task href="{TASK_LOCATION}"/></Tasks>'.encode("utf-8")
        )

        assert extract_task_id({}, document) == TASK_ID

    def test_no_reference(self):
        with pytest.raises(TaskReferenceError):
            extract_task_id({})
        with pytest.raises(TaskReferenceError):
            extract_task_id({"Location": ""}, etree.fromstring(b"<Other/>"))
