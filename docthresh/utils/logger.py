"""Logging helper."""
import logging


def get_logger(name: str = "docthresh", level: str = "INFO"):
	logger = logging.getLogger(name)
	if not logger.handlers:
		ch = logging.StreamHandler()
		ch.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
		logger.addHandler(ch)
	logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
	return logger
