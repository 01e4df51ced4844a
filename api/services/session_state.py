from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, FrozenSet

from api.services.errors import InvalidTransition

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
	START = "start"
	LOADING = "loading"
	EDITING = "editing"
	SAVING = "saving"


class Action(str, Enum):
	LOAD = "load"
	SELECT = "select"
	SET_OPTION = "set_option"
	EXPORT = "export"


_ALLOWED: Dict[SessionState, FrozenSet[Action]] = {
	SessionState.START: frozenset({Action.LOAD}),
	SessionState.LOADING: frozenset(),
	SessionState.EDITING: frozenset(Action),
	SessionState.SAVING: frozenset(),
}


class SessionStateMachine:
	def __init__(self) -> None:
		self._state = SessionState.START

	@property
	def state(self) -> SessionState:
		return self._state

	def allows(self, action: Action) -> bool:
		return action in _ALLOWED[self._state]

	def begin_batch(self) -> None:
		self._move({SessionState.START, SessionState.EDITING}, SessionState.LOADING)

	def finish_batch(self, has_records: bool) -> None:
		self._move({SessionState.LOADING}, SessionState.EDITING if has_records else SessionState.START)

	def begin_export(self) -> None:
		self._move({SessionState.EDITING}, SessionState.SAVING)

	def finish_export(self) -> None:
		self._move({SessionState.SAVING}, SessionState.EDITING)

	def _move(self, sources, target: SessionState) -> None:
		if self._state not in sources:
			raise InvalidTransition(f"cannot go from {self._state.value} to {target.value}")
		logger.debug("Session state %s -> %s", self._state.value, target.value)
		self._state = target
