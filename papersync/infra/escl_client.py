"""eSCL (AirScan) HTTP client.

Protocol sequence for one page:
  GET  {base}/eSCL/ScannerCapabilities   -> capabilities XML
  POST {base}/eSCL/ScanJobs              -> 201 + Location: job URL
  GET  {job}/NextDocument                -> image bytes

Scanners advertised over ``https`` are contacted with certificate checks
turned off: eSCL devices on a LAN almost always present self-signed certs.
There is no retry at this layer; each call is one request with its own timeout.
"""
import asyncio
import base64
import logging
from typing import Awaitable, Callable, List, Optional

import httpx

from papersync.domain.Errors import ESCLCapabilitiesError, ESCLError
from papersync.domain.Scanner import DiscoveredScanner, ScanJob, ScannerCapabilities, ScanSettings
from papersync.logic.scanner.escl_xml import build_scan_request_xml, parse_capabilities
from papersync.utilities.config import HTTP_TIMEOUT, SCAN_POLL_DELAY
from papersync.utilities.network import build_base_url

logger = logging.getLogger(__name__)


def scanner_base_url(scanner: DiscoveredScanner) -> str:
    return build_base_url(scanner.protocol, scanner.host, scanner.port)


def resolve_job_url(base_url: str, location: str) -> str:
    if location.startswith(("http://", "https://")):
        return location
    if not location.startswith("/"):
        location = "/" + location
    return base_url + location


class ESCLClient:
    def __init__(self, *, timeout: float = HTTP_TIMEOUT, poll_delay: float = SCAN_POLL_DELAY,
                 transport: Optional[httpx.AsyncBaseTransport] = None,
                 sleep: Callable[[float], Awaitable[None]] = asyncio.sleep):
        self.timeout = timeout
        self.poll_delay = poll_delay
        self._transport = transport
        self._sleep = sleep

    def _client(self, url: str) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            verify=not url.startswith("https://"),
            transport=self._transport,
        )

    async def get_capabilities(self, scanner: DiscoveredScanner) -> ScannerCapabilities:
        url = f"{scanner_base_url(scanner)}/eSCL/ScannerCapabilities"
        try:
            async with self._client(url) as client:
                response = await client.get(url, headers={"Accept": "text/xml, application/xml"})
        except httpx.HTTPError as e:
            raise ESCLCapabilitiesError("Failed to fetch scanner capabilities", cause=e) from e
        if not response.is_success:
            raise ESCLCapabilitiesError("Failed to fetch scanner capabilities", status_code=response.status_code)
        return parse_capabilities(response.text)

    async def start_scan(self, scanner: DiscoveredScanner, settings: ScanSettings) -> ScanJob:
        base_url = scanner_base_url(scanner)
        url = f"{base_url}/eSCL/ScanJobs"
        try:
            async with self._client(url) as client:
                response = await client.post(
                    url,
                    content=build_scan_request_xml(settings).encode("utf-8"),
                    headers={"Content-Type": "text/xml; charset=utf-8"},
                )
        except httpx.HTTPError as e:
            raise ESCLError("Failed to start scan job", cause=e) from e
        if response.status_code != 201:
            raise ESCLError("Failed to create scan job", status_code=response.status_code)
        location = response.headers.get("Location")
        if not location:
            raise ESCLError("No job URL returned from scanner", status_code=response.status_code)
        job = ScanJob(job_url=resolve_job_url(base_url, location), status="pending")
        logger.info("Scan job started on %s: %s", scanner.name, job.job_url)
        return job

    async def get_scan_result(self, job_url: str) -> str:
        """Wait the fixed poll delay, fetch the next page once, return it as a data URL."""
        await self._sleep(self.poll_delay)
        url = f"{job_url.rstrip('/')}/NextDocument"
        try:
            async with self._client(url) as client:
                response = await client.get(url)
        except httpx.HTTPError as e:
            raise ESCLError("Failed to retrieve scan result", cause=e) from e
        if not response.is_success:
            raise ESCLError("Failed to get scan result", status_code=response.status_code)
        content_type = response.headers.get("Content-Type") or "image/jpeg"
        encoded = base64.b64encode(response.content).decode("ascii")
        return f"data:{content_type};base64,{encoded}"


class ScanSession:
    """Walks one scanner through discover -> capabilities -> scan -> result.

    ``state`` is one of: idle, scanners-known, capabilities-known, job-pending,
    document-ready, failed. Any network error moves the session to ``failed``
    and is re-raised to the caller.
    """

    IDLE = "idle"
    SCANNERS_KNOWN = "scanners-known"
    CAPABILITIES_KNOWN = "capabilities-known"
    JOB_PENDING = "job-pending"
    DOCUMENT_READY = "document-ready"
    FAILED = "failed"

    def __init__(self, client: ESCLClient, discovery=None):
        self.client = client
        self.discovery = discovery
        self.state = self.IDLE
        self.scanners: List[DiscoveredScanner] = []
        self.scanner: Optional[DiscoveredScanner] = None
        self.capabilities: Optional[ScannerCapabilities] = None
        self.job: Optional[ScanJob] = None
        self.document: Optional[str] = None
        self.error: Optional[Exception] = None

    def _fail(self, error: Exception):
        self.state = self.FAILED
        self.error = error
        if self.job is not None:
            self.job = self.job.model_copy(update={"status": "failed"})

    async def discover(self, timeout: Optional[float] = None) -> List[DiscoveredScanner]:
        if self.discovery is None:
            raise RuntimeError("No discovery service configured")
        try:
            self.scanners = await (self.discovery.discover(timeout) if timeout is not None
                                   else self.discovery.discover())
        except Exception as e:
            self._fail(e)
            raise
        self.state = self.SCANNERS_KNOWN
        return self.scanners

    def select(self, scanner: DiscoveredScanner):
        self.scanner = scanner
        if self.state in (self.IDLE, self.FAILED):
            self.state = self.SCANNERS_KNOWN

    async def load_capabilities(self, scanner: Optional[DiscoveredScanner] = None) -> ScannerCapabilities:
        if scanner is not None:
            self.select(scanner)
        if self.scanner is None:
            raise RuntimeError("No scanner selected")
        try:
            self.capabilities = await self.client.get_capabilities(self.scanner)
        except Exception as e:
            self._fail(e)
            raise
        self.state = self.CAPABILITIES_KNOWN
        return self.capabilities

    async def start(self, settings: ScanSettings) -> ScanJob:
        if self.scanner is None:
            raise RuntimeError("No scanner selected")
        self.document = None
        try:
            self.job = await self.client.start_scan(self.scanner, settings)
        except Exception as e:
            self._fail(e)
            raise
        self.state = self.JOB_PENDING
        return self.job

    async def fetch_result(self) -> str:
        if self.state != self.JOB_PENDING or self.job is None:
            raise RuntimeError(f"No pending scan job (state: {self.state})")
        self.job = self.job.model_copy(update={"status": "processing"})
        try:
            self.document = await self.client.get_scan_result(self.job.job_url)
        except Exception as e:
            self._fail(e)
            raise
        self.job = self.job.model_copy(update={"status": "completed"})
        self.state = self.DOCUMENT_READY
        return self.document
