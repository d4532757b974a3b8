"""
Cluster models package.
"""

from .datacenter import Datacenter
from .host import Host, ProcessingElement
from .vm import Vm

__all__ = ["Datacenter", "Host", "ProcessingElement", "Vm"]
