from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional, Tuple

from api.services.ingest import PhotoRecord

Listener = Callable[[], None]


@dataclass(frozen=True)
class StoreSnapshot:
	records: Tuple[PhotoRecord, ...] = ()
	selected_index: int = 0

	@property
	def selected(self) -> Optional[PhotoRecord]:
		if 0 <= self.selected_index < len(self.records):
			return self.records[self.selected_index]
		return None


class SessionStore:
	"""
	Ordered photo records plus the selected index.

	Every mutation notifies the listeners subscribed when the mutation
	started, synchronously and before the call returns. Listeners take no
	arguments and re-read state through snapshot().
	"""

	def __init__(self) -> None:
		self._state = StoreSnapshot()
		# dict as an ordered set
		self._listeners: Dict[Listener, None] = {}

	def snapshot(self) -> StoreSnapshot:
		return self._state

	def __len__(self) -> int:
		return len(self._state.records)

	def replace_all(self, records: Iterable[PhotoRecord]) -> None:
		self._set(StoreSnapshot(tuple(records), 0))

	def append(self, records: Iterable[PhotoRecord]) -> None:
		state = self._state
		self._set(StoreSnapshot(state.records + tuple(records), state.selected_index))

	def select(self, index: int) -> int:
		count = len(self._state.records)
		clamped = 0 if count == 0 else min(max(index, 0), count - 1)
		self._set(StoreSnapshot(self._state.records, clamped))
		return clamped

	def subscribe(self, listener: Listener) -> Callable[[], bool]:
		self._listeners[listener] = None

		def unsubscribe() -> bool:
			return self._listeners.pop(listener, False) is None

		return unsubscribe

	def _set(self, state: StoreSnapshot) -> None:
		self._state = state
		for listener in list(self._listeners):
			listener()
