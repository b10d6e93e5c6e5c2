"""Chart publishing backends."""

from chartfeed.core.charts.base import ChartBackend, Payload
from chartfeed.core.charts.datawrapper import DatawrapperClient, encode_payload, normalize_public_url

__all__ = ["ChartBackend", "Payload", "DatawrapperClient", "encode_payload", "normalize_public_url"]
