"""Logging configuration helpers."""

from __future__ import annotations

import logging
import sys
from typing import Optional, Union

from api.config import get_settings

APP_LOGGERS = ("api", "mat_pipeline")


def configure_logging(level: Optional[Union[str, int]] = None) -> None:
	"""Attach a single stream handler to the application loggers."""
	if level is None:
		level = get_settings().log_level
	formatter = logging.Formatter(
		"%(asctime)s - %(name)s - %(levelname)s - %(message)s",
		datefmt="%Y-%m-%d %H:%M:%S",
	)
	for name in APP_LOGGERS:
		logger = logging.getLogger(name)
		logger.setLevel(level)
		if logger.handlers:
			continue
		handler = logging.StreamHandler(sys.stdout)
		handler.setFormatter(formatter)
		logger.addHandler(handler)
		logger.propagate = False

	# Pillow logs every plugin it probes at DEBUG
	logging.getLogger("PIL").setLevel(logging.WARNING)
