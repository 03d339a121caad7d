from typing import Optional
from unittest.mock import Mock, patch
from xml.sax.saxutils import escape

import pytest

from experia_v10_exporter.client.auth import TOKEN_PATH
from experia_v10_exporter.client.fetcher import DOMAIN_ENDPOINTS
from experia_v10_exporter.models import Domain


def make_status_xml(root_tag: str, pairs: list[tuple[str, str]], per_instance: Optional[int] = None) -> str:
    """Build a device status page with ParaName/ParaValue pairs."""
    per_instance = per_instance or max(len(pairs), 1)
    instances = []
    for start in range(0, len(pairs), per_instance):
        body = "".join(
            f"<ParaName>{escape(name)}</ParaName><ParaValue>{escape(value)}</ParaValue>"
            for name, value in pairs[start : start + per_instance]
        )
        instances.append(f"<Instance>{body}</Instance>")
    return (
        '<?xml version="1.0" encoding="utf-8"?>'
        "<ajax_response_xml_root><IF_ERRORSTR>SUCC</IF_ERRORSTR>"
        f"<{root_tag}>{''.join(instances)}</{root_tag}>"
        "</ajax_response_xml_root>"
    )


ETHERNET_FIELD_NAMES = ["_InstID", "Alias", "InBytes", "InPkts", "OutPkts", "OutBytes"]


def make_ethernet_xml(values: list[str]) -> str:
    """Ethernet page whose values are laid out as 6-field interfaces."""
    names = [ETHERNET_FIELD_NAMES[i % 6] for i in range(len(values))]
    return make_status_xml("OBJ_ETH_ID", list(zip(names, values)), per_instance=6)


def make_response(text: str = "", status_code: int = 200) -> Mock:
    return Mock(status_code=status_code, text=text)


@pytest.fixture
def dsl_pairs():
    return [
        ("UpstreamCurrRate", "5117"),
        ("DownstreamCurrRate", "40000"),
        ("Status", "Up"),
        ("UpstreamNoiseMargin", "9.1"),
        ("DownstreamAttenuation", "-12.5"),
    ]


@pytest.fixture
def dsl_response(dsl_pairs):
    return make_status_xml("OBJ_DSLINTERFACE_ID", dsl_pairs)


@pytest.fixture
def ethernet_values():
    return ["eth0", "LAN1", "1000", "0", "0", "2000", "eth1", "LAN2", "0", "0", "0", "0"]


@pytest.fixture
def ethernet_response(ethernet_values):
    return make_ethernet_xml(ethernet_values)


@pytest.fixture
def token_response():
    return "<ajax_response_xml_root>42</ajax_response_xml_root>"


class FakeDevice:
    """
    Routes patched requests.Session calls to canned device responses.

    Responses are keyed by (method, path). The login and logout forms both
    post to "/", so they are keyed as ("POST", "login") and ("POST", "logout").
    A response may be an exception instance, which is raised instead.
    """

    def __init__(self, responses: dict):
        self.responses = dict(responses)
        self.calls: list[tuple[str, str, Optional[dict]]] = []
        self.cookie_snapshots: list[dict] = []
        self.http_session = None
        self.login_cookie: Optional[tuple[str, str]] = None

    @staticmethod
    def _path(url: str) -> str:
        rest = url.split("://", 1)[1]
        return rest[rest.index("/") :] if "/" in rest else "/"

    def _respond(self, key, method, path, data):
        if self.http_session is not None:
            self.cookie_snapshots.append(self.http_session.cookies.get_dict())
        self.calls.append((method, path, data))

        result = self.responses.get(key, "")
        if isinstance(result, Exception):
            raise result
        return make_response(result)

    def get(self, url, **kwargs):
        path = self._path(url)
        return self._respond(("GET", path), "GET", path, None)

    def post(self, url, data=None, **kwargs):
        path = self._path(url)
        kind = "logout" if data and "IF_LogOff" in data else "login"
        response = self._respond(("POST", kind), "POST", path, data)
        if kind == "login" and self.login_cookie and self.http_session is not None:
            self.http_session.cookies.set(*self.login_cookie)
        return response

    def paths(self, method: Optional[str] = None) -> list[str]:
        return [path for m, path, _ in self.calls if method is None or m == method]

    def posts(self, kind: str) -> list[dict]:
        key = "IF_LogOff" if kind == "logout" else "action"
        return [data for m, _, data in self.calls if m == "POST" and data and key in data]


@pytest.fixture
def device_responses(token_response, dsl_response, ethernet_response):
    dsl = DOMAIN_ENDPOINTS[Domain.DSL]
    ethernet = DOMAIN_ENDPOINTS[Domain.ETHERNET]
    return {
        ("GET", "/"): "<html>login</html>",
        ("GET", TOKEN_PATH): token_response,
        ("POST", "login"): "<html><div id='mainWrapper'>home</div></html>",
        ("GET", dsl.priming_path): "<html>dsl</html>",
        ("GET", dsl.data_path): dsl_response,
        ("GET", ethernet.priming_path): "<html>lan</html>",
        ("GET", ethernet.data_path): ethernet_response,
        ("POST", "logout"): "<html>bye</html>",
    }


@pytest.fixture
def fake_device(device_responses):
    """Patch requests.Session so every call is answered by a FakeDevice."""
    device = FakeDevice(device_responses)
    with patch("requests.Session.get") as mock_get, patch("requests.Session.post") as mock_post:
        mock_get.side_effect = device.get
        mock_post.side_effect = device.post
        yield device


@pytest.fixture
def client_kwargs():
    return {
        "host": "192.168.2.254",
        "username": "Admin",
        "password": "pw",
        "timeout": 5.0,
    }
