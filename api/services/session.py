from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from typing import Any, Callable, Optional, Sequence

from api.config import CANVAS_HEIGHT, CANVAS_WIDTH, EXPORT_SUFFIX, get_settings
from api.services import compositor
from api.services.compositor import DisplayOptions, Mat
from api.services.errors import ActionNotAllowed, BatchInProgress, ExportFailure, UnknownOption
from api.services.ingest import BatchResult, SourceFile, ingest_batch
from api.services.session_state import Action, SessionState, SessionStateMachine
from api.services.session_store import SessionStore, StoreSnapshot
from api.services.surface import Surface

logger = logging.getLogger(__name__)

SaveFn = Callable[[bytes, str], None]


@dataclass(frozen=True)
class ExportedImage:
	filename: str
	data: bytes


def export_filename(source_name: str) -> str:
	# "photo.jpg" -> "photo_jpg_mat.jpeg"
	return source_name.replace(".", "_", 1) + EXPORT_SUFFIX


def _coerce_option(name: str, value: Any) -> Any:
	if name == "mat":
		try:
			return Mat(value)
		except ValueError:
			raise UnknownOption(f"mat must be one of {[m.value for m in Mat]}, got {value!r}") from None
	if not isinstance(value, bool):
		raise UnknownOption(f"{name} expects a boolean, got {value!r}")
	return value


class PhotoSession:
	"""
	One editing session: the photo store, the session state, the display
	options and the target surface the current photo is rendered onto.
	"""

	def __init__(
		self,
		store: Optional[SessionStore] = None,
		surface: Optional[Surface] = None,
		options: Optional[DisplayOptions] = None,
	) -> None:
		self.store = store if store is not None else SessionStore()
		self.surface = surface or Surface(CANVAS_WIDTH, CANVAS_HEIGHT)
		self.options = options or DisplayOptions()
		self.machine = SessionStateMachine()
		self.last_batch: Optional[BatchResult] = None
		self._unsubscribe = self.store.subscribe(self.render_current)

	@property
	def state(self) -> SessionState:
		return self.machine.state

	def snapshot(self) -> StoreSnapshot:
		return self.store.snapshot()

	def close(self) -> None:
		self._unsubscribe()
		self.store.replace_all([])

	def _require(self, action: Action) -> None:
		if not self.machine.allows(action):
			raise ActionNotAllowed(f"{action.value} is not available while {self.state.value}")

	async def load_replace(self, files: Sequence[SourceFile]) -> BatchResult:
		return await self._load(files, replace_existing=True)

	async def load_append(self, files: Sequence[SourceFile]) -> BatchResult:
		return await self._load(files, replace_existing=False)

	async def _load(self, files: Sequence[SourceFile], replace_existing: bool) -> BatchResult:
		files = list(files)
		if not files:
			return BatchResult()
		if self.state is SessionState.LOADING:
			raise BatchInProgress("a batch is already loading")
		self._require(Action.LOAD)

		self.machine.begin_batch()
		logger.info("Loading %d file(s) (%s)", len(files), "replace" if replace_existing else "append")
		try:
			if replace_existing:
				self.store.replace_all([])
			result = await ingest_batch(files, lambda record: self.store.append([record]))
		finally:
			self.machine.finish_batch(len(self.store) > 0)
		self.last_batch = result
		logger.info("Loaded %d file(s), %d failed", len(result.records), len(result.failures))
		return result

	def select_photo(self, index: int) -> int:
		self._require(Action.SELECT)
		return self.store.select(index)

	def set_option(self, name: str, value: Any) -> DisplayOptions:
		self._require(Action.SET_OPTION)
		if name not in {f.name for f in fields(DisplayOptions)}:
			raise UnknownOption(f"unknown option {name!r}")
		self.options = replace(self.options, **{name: _coerce_option(name, value)})
		self.render_current()
		return self.options

	def render_current(self) -> bool:
		photo = self.store.snapshot().selected
		if photo is None:
			return False
		compositor.render(self.surface, photo, self.options)
		return True

	def export_current(self, save: Optional[SaveFn] = None) -> ExportedImage:
		self._require(Action.EXPORT)
		photo = self.store.snapshot().selected
		if photo is None:
			raise ActionNotAllowed("no photo selected")

		self.machine.begin_export()
		try:
			try:
				data = self.surface.encode_jpeg(get_settings().export_quality)
				exported = ExportedImage(export_filename(photo.source.name), data)
				if save is not None:
					save(exported.data, exported.filename)
			except Exception as e:
				logger.error("Export of %s failed: %s", photo.source.name, e)
				raise ExportFailure(str(e)) from e
		finally:
			self.machine.finish_export()
		logger.info("Exported %s (%d bytes)", exported.filename, len(exported.data))
		return exported
