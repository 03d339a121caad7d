"""Pipeline tests for ExperiaV10Client."""

import logging

import pytest
from requests.exceptions import ConnectTimeout

from experia_v10_exporter import ExperiaV10Client
from experia_v10_exporter.client.auth import TOKEN_PATH
from experia_v10_exporter.client.fetcher import DOMAIN_ENDPOINTS
from experia_v10_exporter.exceptions import (
    ExperiaAuthenticationError,
    ExperiaProtocolError,
    ExperiaTimeoutError,
)
from experia_v10_exporter.models import Domain, DslMeasurement, InterfaceMeasurement

DSL = DOMAIN_ENDPOINTS[Domain.DSL]
ETHERNET = DOMAIN_ENDPOINTS[Domain.ETHERNET]


def run_poll(client):
    with client.authenticated_session():
        return client.scrape()


@pytest.mark.unit
class TestClientInitialization:
    """Test client construction."""

    def test_defaults(self):
        client = ExperiaV10Client(host="192.168.2.254", password="pw")

        assert client.host == "192.168.2.254"
        assert client.session.username == "Admin"
        assert client.session.base_url == "http://192.168.2.254"
        assert client.strict_scrape is False
        assert client.domains == (Domain.DSL, Domain.ETHERNET)

    def test_context_manager_closes_session(self, client_kwargs):
        with ExperiaV10Client(**client_kwargs) as client:
            assert isinstance(client, ExperiaV10Client)


@pytest.mark.integration
class TestPollPipeline:
    """Test login, scrape and logout together."""

    def test_successful_poll_request_order(self, client_kwargs, fake_device):
        client = ExperiaV10Client(**client_kwargs)

        result = run_poll(client)

        assert result.ok
        assert fake_device.paths() == [
            "/",
            TOKEN_PATH,
            "/",
            DSL.priming_path,
            DSL.data_path,
            ETHERNET.priming_path,
            ETHERNET.data_path,
            "/",
        ]
        assert len(fake_device.posts("logout")) == 1

    def test_successful_poll_measurements(self, client_kwargs, fake_device):
        client = ExperiaV10Client(**client_kwargs)

        result = run_poll(client)

        assert DslMeasurement("UpstreamCurrRate", 5117.0) in result.measurements
        assert InterfaceMeasurement("eth0", "LAN1", "received", 1000.0) in result.measurements
        assert InterfaceMeasurement("eth0", "LAN1", "sent", 2000.0) in result.measurements

    def test_failed_login_skips_scrape_and_logout(self, client_kwargs, fake_device):
        fake_device.responses[("POST", "login")] = "<div id='loginWrapper'></div>"
        client = ExperiaV10Client(**client_kwargs)
        scraped = []

        with pytest.raises(ExperiaAuthenticationError):
            with client.authenticated_session():
                scraped.append(client.scrape())

        assert scraped == []
        assert fake_device.paths() == ["/", TOKEN_PATH, "/"]
        assert fake_device.posts("logout") == []

    def test_login_timeout_skips_scrape_and_logout(self, client_kwargs, fake_device):
        fake_device.responses[("GET", "/")] = ConnectTimeout("timed out")
        client = ExperiaV10Client(**client_kwargs)

        with pytest.raises(ExperiaTimeoutError):
            run_poll(client)

        assert fake_device.paths() == ["/"]

    def test_failed_scrape_still_logs_out_once(self, client_kwargs, fake_device):
        fake_device.responses[("GET", DSL.data_path)] = ConnectTimeout("timed out")
        fake_device.responses[("GET", ETHERNET.data_path)] = "<broken"
        client = ExperiaV10Client(**client_kwargs)

        result = run_poll(client)

        assert set(result.errors) == {Domain.DSL, Domain.ETHERNET}
        assert isinstance(result.errors[Domain.DSL], ExperiaTimeoutError)
        assert isinstance(result.errors[Domain.ETHERNET], ExperiaProtocolError)
        assert len(fake_device.posts("logout")) == 1

    def test_logout_runs_when_block_raises(self, client_kwargs, fake_device):
        client = ExperiaV10Client(**client_kwargs)

        with pytest.raises(RuntimeError):
            with client.authenticated_session():
                raise RuntimeError("renderer failed")

        assert len(fake_device.posts("logout")) == 1

    def test_one_failing_domain_does_not_stop_the_other(self, client_kwargs, fake_device):
        fake_device.responses[("GET", DSL.priming_path)] = ConnectTimeout("timed out")
        client = ExperiaV10Client(**client_kwargs)

        result = run_poll(client)

        assert list(result.errors) == [Domain.DSL]
        assert DSL.data_path not in fake_device.paths()
        assert ETHERNET.data_path in fake_device.paths()
        assert all(isinstance(m, InterfaceMeasurement) for m in result.measurements)
        assert len(result.measurements) == 4

    def test_strict_scrape_stops_at_first_failing_domain(self, client_kwargs, fake_device):
        fake_device.responses[("GET", DSL.data_path)] = ConnectTimeout("timed out")
        client = ExperiaV10Client(strict_scrape=True, **client_kwargs)

        result = run_poll(client)

        assert list(result.errors) == [Domain.DSL]
        assert ETHERNET.priming_path not in fake_device.paths()
        assert result.measurements == []
        assert len(fake_device.posts("logout")) == 1

    def test_strict_scrape_summary_counts_attempted_domains_only(self, client_kwargs, fake_device, caplog):
        fake_device.responses[("GET", DSL.data_path)] = ConnectTimeout("timed out")
        client = ExperiaV10Client(strict_scrape=True, **client_kwargs)

        with caplog.at_level(logging.INFO, logger="experia-v10-exporter"):
            result = run_poll(client)

        assert result.attempted == [Domain.DSL]
        assert "(0/1 domains)" in caplog.text

    def test_all_domains_attempted_by_default(self, client_kwargs, fake_device, caplog):
        client = ExperiaV10Client(**client_kwargs)

        with caplog.at_level(logging.INFO, logger="experia-v10-exporter"):
            result = run_poll(client)

        assert result.attempted == [Domain.DSL, Domain.ETHERNET]
        assert "(2/2 domains)" in caplog.text


@pytest.mark.integration
class TestCookieIsolation:
    """Test that no cookie survives from one poll into the next."""

    def test_cookie_from_first_poll_is_not_sent_in_second(self, client_kwargs, fake_device):
        client = ExperiaV10Client(**client_kwargs)
        fake_device.http_session = client.session.http

        fake_device.login_cookie = ("SID", "poll-1")
        run_poll(client)
        first_poll_calls = len(fake_device.cookie_snapshots)

        assert any(snapshot.get("SID") == "poll-1" for snapshot in fake_device.cookie_snapshots)

        fake_device.login_cookie = None
        run_poll(client)

        assert all("SID" not in snapshot for snapshot in fake_device.cookie_snapshots[first_poll_calls:])

    def test_cookie_from_failed_poll_is_not_reused(self, client_kwargs, fake_device):
        client = ExperiaV10Client(**client_kwargs)
        fake_device.http_session = client.session.http
        # A cookie left behind by a poll that never got to log out
        client.session.cookies.set("SID", "stale")

        run_poll(client)

        assert all("SID" not in snapshot for snapshot in fake_device.cookie_snapshots)

    def test_cookie_store_replaced_at_login_and_logout(self, client_kwargs, fake_device):
        client = ExperiaV10Client(**client_kwargs)
        jars = [client.session.cookies]

        with client.authenticated_session():
            jars.append(client.session.cookies)
        jars.append(client.session.cookies)

        assert len({id(jar) for jar in jars}) == 3
