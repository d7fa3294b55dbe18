"""Routing Storage - Load prepared routing engine artifacts into packed arrays."""

from routing_storage.api import inspect, load_dataset
from routing_storage.io.file import BinaryFile
from routing_storage.version import VERSION

__version__ = VERSION
__all__ = ["VERSION", "BinaryFile", "inspect", "load_dataset"]
