"""Data models for systop."""

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class CpuInfo:
    """Identification data for one logical CPU."""

    name: str
    brand: str
    frequency_mhz: int


@dataclass(slots=True, frozen=True)
class MemoryUsage:
    """Memory figures in MB (2**20 bytes)."""

    total_mb: float
    used_mb: float
    available_mb: float


@dataclass(slots=True, frozen=True)
class Snapshot:
    """Immutable sample of everything drawn in one frame."""

    cpu_usage_percent: float  # 0.0 - 100.0, global aggregate
    memory: MemoryUsage
    core_count: int  # Physical cores
    cpus: tuple[CpuInfo, ...]  # Provider order
