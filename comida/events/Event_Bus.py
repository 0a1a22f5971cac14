"""Simple Event Bus / Observer implementation for session changes.

Event names used so far:
  session.changed -> payload {"client_id": str, "user": SessionUser | None}

Subscribers are callables taking (event_name, payload). A subscriber may be a
coroutine function; publish_async awaits it, publish only calls sync ones.
"""
from __future__ import annotations
import inspect
import logging
from collections import defaultdict
from typing import Callable, Any, Dict, List

logger = logging.getLogger(__name__)

# --- Event name constants (used across modules) ---
SESSION_CHANGED = "session.changed"


class EventBus:
	def __init__(self):
		self._subscribers: Dict[str, List[Callable[[str, Any], Any]]] = defaultdict(list)

	def subscribe(self, event_name: str, callback: Callable[[str, Any], Any]):
		if callback not in self._subscribers[event_name]:
			self._subscribers[event_name].append(callback)

	def unsubscribe(self, event_name: str, callback: Callable[[str, Any], Any]):
		try:
			self._subscribers[event_name].remove(callback)
		except (ValueError, KeyError):
			pass

	def subscriber_count(self, event_name: str) -> int:
		return len(self._subscribers.get(event_name, []))

	def publish(self, event_name: str, payload: Any):
		for cb in list(self._subscribers.get(event_name, [])):
			try:
				result = cb(event_name, payload)
				if inspect.isawaitable(result):
					# Sync publish cannot run coroutine subscribers
					result.close()
					logger.warning("Async subscriber %s skipped by sync publish of %s", cb, event_name)
			except Exception:
				logger.exception("Error delivering %s to %s", event_name, cb)

	async def publish_async(self, event_name: str, payload: Any):
		for cb in list(self._subscribers.get(event_name, [])):
			try:
				result = cb(event_name, payload)
				if inspect.isawaitable(result):
					await result
			except Exception:
				logger.exception("Error delivering %s to %s", event_name, cb)


__all__ = ['EventBus', 'SESSION_CHANGED']
