"""Event helper utilities.

Typed publishers for sync and scanner events on the global event bus.

Quick import:
    from papersync.events.event_helpers import publish_synced, publish_scan_completed
"""
from __future__ import annotations
from typing import Iterable, Optional
from .Event_Bus import (
    publish,
    VAULT_SYNCED, VAULT_SYNC_FAILED, SCANNER_DISCOVERED, SCAN_COMPLETED, SCAN_FAILED,
)

__all__ = [
    'publish_synced', 'publish_sync_failed', 'publish_scanners_discovered',
    'publish_scan_completed', 'publish_scan_failed',
]


def publish_synced(week: str, note_path: str, method: str, warning: Optional[str] = None):
    publish(VAULT_SYNCED, {'week': week, 'note_path': note_path, 'method': method, 'warning': warning})


def publish_sync_failed(week: str, method: str, error: str):
    publish(VAULT_SYNC_FAILED, {'week': week, 'method': method, 'error': error})


def publish_scanners_discovered(names: Iterable[str]):
    names_list = list(names)
    publish(SCANNER_DISCOVERED, {'count': len(names_list), 'scanners': names_list})


def publish_scan_completed(scanner: str, job_url: str):
    publish(SCAN_COMPLETED, {'scanner': scanner, 'job_url': job_url})


def publish_scan_failed(scanner: str, error: str):
    publish(SCAN_FAILED, {'scanner': scanner, 'error': error})
