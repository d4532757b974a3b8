"""
Simulation package entrypoints.
"""

from .broker import DatacenterBroker
from .config import SimulationConfig
from .engine import SimulationEngine

__all__ = ["DatacenterBroker", "SimulationConfig", "SimulationEngine"]
