"""Internal helpers shared by jsreprint modules."""

from jsreprint.utils.logger import ROOT_LOGGER_NAME, get_logger

__all__ = ["ROOT_LOGGER_NAME", "get_logger"]
