from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from fastapi.concurrency import run_in_threadpool
from PIL import Image

from api.config import CANVAS_MARGIN, THUMBNAIL_QUALITY, WORK_CANVAS_HEIGHT, WORK_CANVAS_WIDTH
from api.services.errors import DecodeFailure
from api.services.image_utils import aspect_ratio, decode_raster, jpeg_data_url, resample_to
from api.services.layout import compute_fit
from api.services.metadata import ExposureMetadata, read_exposure_metadata

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceFile:
	"""Read-only handle on an input file: a path on disk or bytes already in memory."""
	name: str
	path: Optional[Path] = None
	data: Optional[bytes] = field(default=None, repr=False)

	@classmethod
	def from_path(cls, path: Path) -> "SourceFile":
		return cls(name=path.name, path=path)

	async def read_bytes(self) -> bytes:
		if self.data is not None:
			return self.data
		if self.path is None:
			raise DecodeFailure(self.name, "no data")
		try:
			return await run_in_threadpool(self.path.read_bytes)
		except OSError as e:
			raise DecodeFailure(self.name, f"unable to read file ({e})") from e


@dataclass(frozen=True, eq=False)
class PhotoRecord:
	source: SourceFile
	display_url: str = field(repr=False)
	raster: Image.Image = field(repr=False)
	metadata: ExposureMetadata
	width: int
	height: int

	@property
	def aspect(self) -> float:
		return self.width / self.height


@dataclass
class BatchResult:
	records: List[PhotoRecord] = field(default_factory=list)
	failures: List[DecodeFailure] = field(default_factory=list)

	@property
	def succeeded(self) -> bool:
		return bool(self.records)


async def ingest(source: SourceFile) -> PhotoRecord:
	"""
	Turn one input file into a PhotoRecord.
	Metadata problems degrade to empty metadata; decode problems raise DecodeFailure.
	"""
	data = await source.read_bytes()
	metadata = await run_in_threadpool(read_exposure_metadata, data)
	decoded = await run_in_threadpool(decode_raster, data, source.name)

	aspect = aspect_ratio(decoded.size, source.name)
	fit = compute_fit(
		WORK_CANVAS_WIDTH,
		WORK_CANVAS_HEIGHT,
		CANVAS_MARGIN,
		CANVAS_MARGIN,
		CANVAS_MARGIN,
		CANVAS_MARGIN,
		aspect,
	)
	raster = await run_in_threadpool(resample_to, decoded, fit.w, fit.h)
	display_url = await run_in_threadpool(jpeg_data_url, raster, THUMBNAIL_QUALITY)

	logger.debug("Ingested %s: %sx%s -> %sx%s", source.name, decoded.width, decoded.height, raster.width, raster.height)
	return PhotoRecord(
		source=source,
		display_url=display_url,
		raster=raster,
		metadata=metadata,
		width=raster.width,
		height=raster.height,
	)


async def ingest_batch(
	sources: Iterable[SourceFile],
	publish: Callable[[PhotoRecord], None],
) -> BatchResult:
	"""
	Ingest files one after another in input order.
	Each record is published before the next file is read; a failed file is
	recorded and skipped.
	"""
	result = BatchResult()
	for source in sources:
		try:
			record = await ingest(source)
		except DecodeFailure as e:
			logger.warning("Skipping %s: %s", source.name, e.reason)
			result.failures.append(e)
			continue
		publish(record)
		result.records.append(record)
	return result
