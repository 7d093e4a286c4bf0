"""Metrics sampling for systop."""

import platform
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import psutil

from systop.models import CpuInfo, MemoryUsage, Snapshot

BYTES_PER_MB = 1024 * 1024
CPUINFO_PATH = Path("/proc/cpuinfo")


class SamplerError(Exception):
    """Base error for sampling failures."""


class CoreCountUnavailableError(SamplerError):
    """Raised when the provider cannot report the physical core count."""

    def __init__(self) -> None:
        super().__init__("Unable to determine the physical core count")


@dataclass(slots=True, frozen=True)
class CpuReading:
    """Raw per-CPU descriptor as reported by a provider."""

    name: str
    brand: str
    frequency: int  # MHz


@dataclass(slots=True, frozen=True)
class MemoryReading:
    """Raw memory figures in bytes."""

    total: int
    used: int
    available: int


class MetricsProvider(Protocol):
    """Source of system metrics. ``refresh`` must be called before reading."""

    def refresh(self) -> None:
        """Resync every metric from the system."""
        ...

    def cpu_usage(self) -> float:
        """Global CPU usage in percent, 0.0 - 100.0."""
        ...

    def memory(self) -> MemoryReading:
        """Total, used and available memory in bytes."""
        ...

    def physical_core_count(self) -> int | None:
        """Physical core count, or None if it cannot be determined."""
        ...

    def cpus(self) -> list[CpuReading]:
        """One reading per logical CPU, in a stable order."""
        ...


def read_cpu_brands(path: Path = CPUINFO_PATH) -> list[str]:
    """
    Read the per-processor model names from a cpuinfo file.

    Returns an empty list if the file is missing or unreadable.
    """
    try:
        content = path.read_text(encoding="utf-8", errors="ignore")
    except OSError:
        return []

    brands = []
    for line in content.splitlines():
        key, sep, value = line.partition(":")
        if sep and key.strip().lower() == "model name":
            brands.append(value.strip())
    return brands


class PsutilProvider:
    """
    Metrics provider backed by psutil.

    Values are captured by ``refresh()`` and served from that capture until the
    next refresh, so a sample never mixes readings from two points in time.
    """

    def __init__(self, cpuinfo_path: Path = CPUINFO_PATH) -> None:
        """
        Initialize the provider.

        Args:
            cpuinfo_path: Where to read CPU brand strings from.
        """
        self._brands = read_cpu_brands(cpuinfo_path)
        self._fallback_brand = platform.processor() or platform.machine()
        self._cpu_usage = 0.0
        self._memory = MemoryReading(total=0, used=0, available=0)
        self._physical_cores: int | None = None
        self._cpus: list[CpuReading] = []
        # Initialize CPU percent (first call returns 0.0)
        psutil.cpu_percent()

    def refresh(self) -> None:
        """Resync every metric from the system."""
        # Non-blocking, measures since the previous call
        self._cpu_usage = psutil.cpu_percent()

        mem = psutil.virtual_memory()
        self._memory = MemoryReading(total=mem.total, used=mem.used, available=mem.available)

        self._physical_cores = psutil.cpu_count(logical=False)
        self._cpus = self._read_cpus()

    def _read_cpus(self) -> list[CpuReading]:
        """Build one reading per logical CPU in kernel order."""
        logical = psutil.cpu_count(logical=True) or 0
        try:
            freqs = psutil.cpu_freq(percpu=True) or []
        except (AttributeError, NotImplementedError, OSError):
            # Not every platform exposes frequencies
            freqs = []

        cpus = []
        for index in range(logical):
            if index < len(freqs):
                frequency = int(freqs[index].current)
            elif freqs:
                # Aggregate frequency only
                frequency = int(freqs[0].current)
            else:
                frequency = 0

            if index < len(self._brands):
                brand = self._brands[index]
            elif self._brands:
                brand = self._brands[0]
            else:
                brand = self._fallback_brand

            cpus.append(CpuReading(name=f"cpu{index}", brand=brand, frequency=frequency))
        return cpus

    def cpu_usage(self) -> float:
        """Get the CPU usage captured by the last refresh."""
        return self._cpu_usage

    def memory(self) -> MemoryReading:
        """Get the memory figures captured by the last refresh."""
        return self._memory

    def physical_core_count(self) -> int | None:
        """Get the physical core count captured by the last refresh."""
        return self._physical_cores

    def cpus(self) -> list[CpuReading]:
        """Get a copy of the per-CPU readings captured by the last refresh."""
        return list(self._cpus)


def bytes_to_mb(value: int) -> float:
    """Convert bytes to MB (2**20 bytes)."""
    return value / BYTES_PER_MB


def sample(provider: MetricsProvider) -> Snapshot:
    """
    Take one snapshot from the provider.

    Raises:
        CoreCountUnavailableError: If the physical core count is unknown.
    """
    provider.refresh()

    cores = provider.physical_core_count()
    if cores is None:
        raise CoreCountUnavailableError()

    mem = provider.memory()
    memory = MemoryUsage(
        total_mb=bytes_to_mb(mem.total),
        used_mb=bytes_to_mb(mem.used),
        available_mb=bytes_to_mb(mem.available),
    )

    cpus = tuple(
        CpuInfo(name=str(cpu.name), brand=str(cpu.brand), frequency_mhz=int(cpu.frequency))
        for cpu in provider.cpus()
    )

    return Snapshot(
        cpu_usage_percent=float(provider.cpu_usage()),
        memory=memory,
        core_count=cores,
        cpus=cpus,
    )
