"""
Frame Photos - batch mat rendering from the command line

Loads every image given (files or folders), renders each one on the
1440x1440 mat with the chosen options and writes the JPEG exports.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from typing import List

from api.logging_setup import configure_logging
from api.services.ingest import SourceFile
from api.services.session import PhotoSession

logger = logging.getLogger(__name__)

SUPPORTED_IMAGE_EXTS = {".jpg", ".jpeg", ".png", ".tif", ".tiff", ".bmp", ".webp"}


def list_image_files(inputs: List[Path]) -> List[Path]:
	out: List[Path] = []
	for p in inputs:
		if p.is_dir():
			out.extend(sorted(c for c in p.iterdir() if c.is_file() and c.suffix.lower() in SUPPORTED_IMAGE_EXTS))
		else:
			out.append(p)
	return out


async def frame_photos(
	inputs: List[Path],
	output_dir: Path,
	light: bool = False,
	rounded: bool = True,
	exif: bool = False,
	glow: bool = False,
) -> List[Path]:
	paths = list_image_files(inputs)
	if not paths:
		raise SystemExit("No images found")
	output_dir.mkdir(parents=True, exist_ok=True)

	session = PhotoSession()
	result = await session.load_replace([SourceFile.from_path(p) for p in paths])
	for failure in result.failures:
		logger.warning("Unable to load %s: %s", failure.filename, failure.reason)
	if not result.succeeded:
		raise SystemExit("None of the images could be decoded")

	session.set_option("mat", "light" if light else "dark")
	session.set_option("rounded_corners", rounded)
	session.set_option("show_metadata_overlay", exif)
	session.set_option("glow", glow)

	written: List[Path] = []

	def save(data: bytes, filename: str) -> None:
		out_path = output_dir / filename
		out_path.write_bytes(data)
		written.append(out_path)

	for i in range(len(result.records)):
		session.select_photo(i)
		session.export_current(save)
		logger.info("Saved: %s", written[-1])
	return written


def main():
	parser = argparse.ArgumentParser(description="Frame photos on a square mat")
	parser.add_argument("--input", required=True, nargs="+", help="Image files or folders")
	parser.add_argument("--output", required=True, help="Output folder for the framed JPEGs")
	parser.add_argument("--light", action="store_true", help="White mat instead of black")
	parser.add_argument("--square", action="store_true", help="Square corners instead of rounded")
	parser.add_argument("--exif", action="store_true", help="Print exposure metadata under the photo")
	parser.add_argument("--glow", action="store_true", help="Soft glow behind the photo")
	args = parser.parse_args()

	configure_logging()
	asyncio.run(frame_photos(
		[Path(p) for p in args.input],
		Path(args.output),
		light=bool(args.light),
		rounded=not args.square,
		exif=bool(args.exif),
		glow=bool(args.glow),
	))


if __name__ == "__main__":
	main()
