"""
Page Fetcher for the Experia Box V10 Exporter
=============================================

Each data endpoint only returns populated content after its HTML page has
been requested in the same session, so every domain is fetched as a
priming GET followed by the data GET.

"""

import logging

from experia_v10_exporter.client.http import DeviceSession
from experia_v10_exporter.models import Domain, DomainEndpoints

logger = logging.getLogger("experia-v10-exporter")

DOMAIN_ENDPOINTS: dict[Domain, DomainEndpoints] = {
    Domain.DSL: DomainEndpoints(
        priming_path="/getpage.lua?pid=123&nextpage=Internet_InternetStatusforRoute_DSL_t.lp&Menu3Location=0",
        data_path="/common_page/internet_dsl_interface_lua.lua",
        root_tag="OBJ_DSLINTERFACE_ID",
    ),
    Domain.ETHERNET: DomainEndpoints(
        priming_path="/getpage.lua?pid=123&nextpage=Localnet_LAN_LocalnetStatus_t.lp&Menu3Location=0&_=1611056303063",
        data_path="/common_page/lanStatus_lua.lua",
        root_tag="OBJ_ETH_ID",
    ),
}


class PageFetcher:
    """Fetches the raw XML body of a domain from an authenticated session."""

    def __init__(self, endpoints: dict[Domain, DomainEndpoints] = DOMAIN_ENDPOINTS):
        self.endpoints = endpoints

    def fetch(self, session: DeviceSession, domain: Domain) -> str:
        """
        Fetch the data body of a domain.

        Args:
            session: Already authenticated session
            domain: Domain to fetch

        Returns:
            Raw XML body of the data endpoint

        Raises:
            ExperiaTransportError: If either request fails
        """
        endpoints = self.endpoints[domain]
        logger.debug(f"📊 Fetching {domain.value} metrics...")

        session.get(endpoints.priming_path)
        return session.get(endpoints.data_path)


__all__ = ["DOMAIN_ENDPOINTS", "PageFetcher"]
