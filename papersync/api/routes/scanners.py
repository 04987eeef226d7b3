import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from papersync.api.errors import http_error
from papersync.domain.Errors import PaperSyncError
from papersync.domain.Scanner import DiscoveredScanner, ScannerCapabilities
from papersync.events.event_helpers import (
    publish_scan_completed, publish_scan_failed, publish_scanners_discovered,
)
from papersync.infra.escl_client import ESCLClient
from papersync.infra.scanner_discovery import ScannerDiscovery
from papersync.utilities.validators import ScanRequest

router = APIRouter(prefix="/api/scanners")
logger = logging.getLogger(__name__)


def get_discovery() -> ScannerDiscovery:
    return ScannerDiscovery()


def get_escl_client() -> ESCLClient:
    return ESCLClient()


@router.get("")
async def api_discover(timeout: Optional[float] = Query(default=None, gt=0, le=60),
                       discovery=Depends(get_discovery)):
    try:
        scanners: List[DiscoveredScanner] = await (
            discovery.discover(timeout) if timeout is not None else discovery.discover()
        )
    except PaperSyncError as e:
        raise http_error(e)
    publish_scanners_discovered(s.name for s in scanners)
    return {
        "scanners": [s.model_dump(by_alias=True) for s in scanners],
        "count": len(scanners),
    }


@router.post("/capabilities")
async def api_capabilities(scanner: DiscoveredScanner, client=Depends(get_escl_client)):
    try:
        capabilities: ScannerCapabilities = await client.get_capabilities(scanner)
    except PaperSyncError as e:
        logger.warning("Capabilities request to %s failed: %s", scanner.name, e)
        raise http_error(e)
    return capabilities.model_dump(by_alias=True)


@router.post("/scan")
async def api_scan(payload: ScanRequest, client=Depends(get_escl_client)):
    scanner = payload.scanner
    try:
        job = await client.start_scan(scanner, payload.settings)
        image = await client.get_scan_result(job.job_url)
    except PaperSyncError as e:
        logger.warning("Scan on %s failed: %s", scanner.name, e)
        publish_scan_failed(scanner.name, str(e))
        raise http_error(e)
    publish_scan_completed(scanner.name, job.job_url)
    return {"jobUrl": job.job_url, "image": image}
