"""MWS endpoint families: URL path segment and API version."""
from dataclasses import dataclass

from mws_sdk.errors import InvalidParameterError


@dataclass(frozen=True)
class Endpoint:
    """An MWS API section sharing one path segment and version."""

    name: str
    path: str
    version: str

    @property
    def resource(self) -> str:
        """Request path, e.g. ``/Orders/2013-09-01``."""
        return f"{self.path}{self.version}"


ENDPOINTS: dict[str, Endpoint] = {
    endpoint.name: endpoint
    for endpoint in (
        Endpoint("Products", "/Products/", "2011-10-01"),
        Endpoint("Sellers", "/Sellers/", "2011-07-01"),
        Endpoint("Orders", "/Orders/", "2013-09-01"),
        Endpoint("Feeds", "/Feeds/", "2009-01-01"),
        Endpoint("Reports", "/Reports/", "2009-01-01"),
        Endpoint("Recommendations", "/Recommendations/", "2013-04-01"),
        Endpoint("FulfillmentInventory", "/FulfillmentInventory/", "2010-10-01"),
    )
}


def get_endpoint(family: str) -> Endpoint:
    try:
        return ENDPOINTS[family]
    except KeyError:
        raise InvalidParameterError(
            f"Unknown MWS endpoint family: {family!r}. "
            f"Expected one of: {', '.join(ENDPOINTS)}"
        ) from None
