"""mDNS discovery of eSCL scanners (``_uscan._tcp`` / ``_uscans._tcp``).

Devices announcing both services collapse into one entry keyed by UUID (or host
when no UUID is advertised); the https variant wins. Browsing stops at the
overall timeout, or shortly after the first device shows up.
"""
import asyncio
import logging
from typing import Dict, Iterable, List, Mapping, Optional

from zeroconf import IPVersion, ServiceStateChange
from zeroconf.asyncio import AsyncServiceBrowser, AsyncServiceInfo, AsyncZeroconf

from papersync.domain.Errors import ScannerDiscoveryError
from papersync.domain.Scanner import AdvertisedCapabilities, DiscoveredScanner
from papersync.utilities.config import DISCOVERY_TIMEOUT
from papersync.utilities.constants import DEFAULT_COLOR_MODES, DEFAULT_DOCUMENT_FORMATS

logger = logging.getLogger(__name__)

SERVICE_PROTOCOLS = {
    "_uscan._tcp.local.": "http",
    "_uscans._tcp.local.": "https",
}
EARLY_FINISH_DELAY = 1.5
RESOLVE_TIMEOUT_MS = 3000


def _decode_txt(properties: Mapping) -> Dict[str, str]:
    txt: Dict[str, str] = {}
    for key, value in (properties or {}).items():
        k = key.decode("utf-8", "replace") if isinstance(key, bytes) else str(key)
        if value is None:
            continue
        txt[k] = value.decode("utf-8", "replace") if isinstance(value, bytes) else str(value)
    return txt


def _split_list(value: Optional[str]) -> List[str]:
    return [v.strip() for v in (value or "").split(",") if v.strip()]


def service_to_scanner(name: str, protocol: str, port: int, properties: Mapping,
                       addresses: Iterable[str] = (), server: Optional[str] = None) -> DiscoveredScanner:
    """Build a DiscoveredScanner from a resolved service and its TXT record."""
    txt = _decode_txt(properties)
    addresses = list(addresses)
    host = addresses[0] if addresses else (server or "").rstrip(".") or "unknown"
    instance = name.split("._", 1)[0] if name else ""
    return DiscoveredScanner(
        id=f"{protocol}://{host}:{port}",
        name=instance or "Unknown Scanner",
        host=host,
        port=port,
        protocol=protocol,
        model=txt.get("ty"),
        manufacturer=txt.get("mfg"),
        uuid=txt.get("UUID") or txt.get("uuid"),
        admin_url=txt.get("adminurl"),
        capabilities=AdvertisedCapabilities(
            color_modes=_split_list(txt.get("cs") or txt.get("CS")) or list(DEFAULT_COLOR_MODES),
            document_formats=_split_list(txt.get("pdl") or txt.get("PDL")) or list(DEFAULT_DOCUMENT_FORMATS),
        ),
    )


def add_scanner(found: Dict[str, DiscoveredScanner], scanner: DiscoveredScanner) -> None:
    key = scanner.dedupe_key
    if key not in found or scanner.protocol == "https":
        found[key] = scanner


class ScannerDiscovery:
    def __init__(self, early_finish_delay: float = EARLY_FINISH_DELAY, *, zeroconf_factory=None,
                 browser_factory=AsyncServiceBrowser, info_factory=AsyncServiceInfo):
        self.early_finish_delay = early_finish_delay
        self._zeroconf_factory = zeroconf_factory or (lambda: AsyncZeroconf(ip_version=IPVersion.V4Only))
        self._browser_factory = browser_factory
        self._info_factory = info_factory

    async def _resolve(self, aiozc: AsyncZeroconf, service_type: str, name: str,
                       found: Dict[str, DiscoveredScanner], first_seen: asyncio.Event):
        info = self._info_factory(service_type, name)
        if not await info.async_request(aiozc.zeroconf, RESOLVE_TIMEOUT_MS):
            logger.debug("Could not resolve %s", name)
            return
        scanner = service_to_scanner(
            name, SERVICE_PROTOCOLS[service_type], info.port or 0, info.properties,
            addresses=info.parsed_addresses(), server=info.server,
        )
        add_scanner(found, scanner)
        first_seen.set()

    async def discover(self, timeout: float = DISCOVERY_TIMEOUT) -> List[DiscoveredScanner]:
        found: Dict[str, DiscoveredScanner] = {}
        first_seen = asyncio.Event()
        pending: set = set()
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout

        try:
            aiozc = self._zeroconf_factory()
        except OSError as e:
            raise ScannerDiscoveryError("Failed to discover scanners via mDNS", cause=e) from e

        def on_service_state_change(zeroconf, service_type, name, state_change):
            if state_change is not ServiceStateChange.Added:
                return
            task = asyncio.ensure_future(self._resolve(aiozc, service_type, name, found, first_seen))
            pending.add(task)
            task.add_done_callback(pending.discard)

        browser = self._browser_factory(
            aiozc.zeroconf, list(SERVICE_PROTOCOLS), handlers=[on_service_state_change],
        )
        try:
            try:
                await asyncio.wait_for(first_seen.wait(), timeout)
                remaining = max(0.0, deadline - loop.time())
                await asyncio.sleep(min(self.early_finish_delay, remaining))
            except asyncio.TimeoutError:
                pass
        finally:
            unresolved = list(pending)
            for task in unresolved:
                task.cancel()
            await asyncio.gather(*unresolved, return_exceptions=True)
            await browser.async_cancel()
            await aiozc.async_close()

        scanners = list(found.values())
        logger.info("mDNS discovery found %d scanner(s)", len(scanners))
        return scanners
