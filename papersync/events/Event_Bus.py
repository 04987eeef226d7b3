"""Simple Event Bus / Observer implementation for sync and scanner activity.

Event names:
  vault.synced -> payload {"week": str, "note_path": str, "method": str, "warning": str | None}
  vault.sync_failed -> payload {"week": str, "method": str, "error": str}
  scanner.discovered -> payload {"count": int, "scanners": [name, ...]}
  scanner.scan_completed -> payload {"scanner": str, "job_url": str}
  scanner.scan_failed -> payload {"scanner": str, "error": str}

Subscribers are callables taking (event_name, payload).
"""
from __future__ import annotations
import logging
from collections import defaultdict
from typing import Callable, Any, Dict, List

logger = logging.getLogger(__name__)

# --- Event name constants (used across modules) ---
VAULT_SYNCED = "vault.synced"
VAULT_SYNC_FAILED = "vault.sync_failed"
SCANNER_DISCOVERED = "scanner.discovered"
SCAN_COMPLETED = "scanner.scan_completed"
SCAN_FAILED = "scanner.scan_failed"
ALL_EVENTS = (VAULT_SYNCED, VAULT_SYNC_FAILED, SCANNER_DISCOVERED, SCAN_COMPLETED, SCAN_FAILED)


class EventBus:
	def __init__(self):
		self._subscribers: Dict[str, List[Callable[[str, Any], None]]] = defaultdict(list)

	def subscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		if callback not in self._subscribers[event_name]:
			self._subscribers[event_name].append(callback)

	def unsubscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		try:
			self._subscribers[event_name].remove(callback)
		except (ValueError, KeyError):
			pass

	def publish(self, event_name: str, payload: Any):
		# A failing subscriber must not abort the sync/scan that published the event
		for cb in list(self._subscribers.get(event_name, [])):
			try:
				cb(event_name, payload)
			except Exception:
				logger.exception("Error delivering %s to %r", event_name, cb)


GLOBAL_EVENT_BUS = EventBus()


def publish(event_name: str, payload: Any = None) -> None:
	"""Publish an event on the global bus."""
	GLOBAL_EVENT_BUS.publish(event_name, payload)


__all__ = [
	'EventBus', 'GLOBAL_EVENT_BUS', 'publish',
	'VAULT_SYNCED', 'VAULT_SYNC_FAILED', 'SCANNER_DISCOVERED', 'SCAN_COMPLETED', 'SCAN_FAILED', 'ALL_EVENTS',
]
