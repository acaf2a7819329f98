"""Adapter factory - get the right extractor for each configured key"""

from typing import List, Optional

from config import config, get_logger
from exceptions import ConfigurationError, VendorError
from pipeline.protocols import MetricsCollector
from vendors.adapters.veracode_adapter_async import AsyncVeracodeAdapter
from vendors.adapters.veracode_rss_adapter_async import AsyncVeracodeRssAdapter
from vendors.adapters.sdelements_adapter_async import AsyncSDElementsAdapter
from vendors.session_manager_async import AsyncSessionManager

logger = get_logger(__name__).bind(component="vendor")

VENDOR_ADAPTERS = {
    "veracode": AsyncVeracodeAdapter,
    "veracode_rss": AsyncVeracodeRssAdapter,
    "sdelements": AsyncSDElementsAdapter,
}


def get_async_adapter(
    vendor: str,
    metrics: Optional[MetricsCollector] = None,
    sessions: Optional[AsyncSessionManager] = None,
    **kwargs
):
    """Get async adapter for extractor key. Raises VendorError if unsupported."""
    if vendor not in VENDOR_ADAPTERS:
        raise VendorError(f"Unsupported vendor: {vendor}", vendor=vendor)

    adapter_cls = VENDOR_ADAPTERS[vendor]
    return adapter_cls(metrics=metrics, sessions=sessions, **kwargs)


def get_active_adapters(
    keys: Optional[List[str]] = None,
    metrics: Optional[MetricsCollector] = None,
    sessions: Optional[AsyncSessionManager] = None,
) -> list:
    """Instantiate the extractors for a run, in configured order

    Args:
        keys: Extractor keys (defaults to config.EXTRACTORS)

    Raises:
        ConfigurationError: If any key is not registered
    """
    keys = list(config.EXTRACTORS if keys is None else keys)

    unknown = [key for key in keys if key not in VENDOR_ADAPTERS]
    if unknown:
        raise ConfigurationError(
            f"Unknown extractor(s): {', '.join(unknown)}. "
            f"Available: {', '.join(sorted(VENDOR_ADAPTERS))}",
            config_key="RELEASEWATCH_EXTRACTORS",
        )

    adapters = [get_async_adapter(key, metrics=metrics, sessions=sessions) for key in keys]
    logger.debug("active extractors", keys=keys)
    return adapters
