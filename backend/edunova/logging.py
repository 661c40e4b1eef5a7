import logging
from typing import Optional

from .settings import settings


DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
	"""Initialize the root logger once per process (safe to call on reload)."""
	resolved_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)
	formatter = logging.Formatter(fmt or DEFAULT_FORMAT)

	root = logging.getLogger()
	root.setLevel(resolved_level)

	# Clear existing handlers to avoid duplicate logs in reloads
	for h in list(root.handlers):
		root.removeHandler(h)

	handler = logging.StreamHandler()
	handler.setFormatter(formatter)
	root.addHandler(handler)

	# httpx logs every request line at INFO, which would include the API key in the query
	logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
	if not logging.getLogger().handlers:
		setup_logging()
	return logging.getLogger(name)
