"""Shared fixtures for systop tests."""

import pytest

from systop.monitor import CpuReading, MemoryReading

GIB = 1024**3


class FakeProvider:
    """Provider returning fixed readings and recording the order of calls."""

    def __init__(
        self,
        cpu_usage: float = 25.0,
        memory: MemoryReading | None = None,
        cores: int | None = 4,
        cpus: list[CpuReading] | None = None,
    ) -> None:
        self.usage = cpu_usage
        self.reading = memory or MemoryReading(total=16 * GIB, used=4 * GIB, available=12 * GIB)
        self.cores = cores
        self.readings = (
            cpus
            if cpus is not None
            else [CpuReading(name=f"cpu{i}", brand="Test CPU @ 3.00GHz", frequency=3000) for i in range(2)]
        )
        self.calls: list[str] = []

    @property
    def refresh_count(self) -> int:
        return self.calls.count("refresh")

    def refresh(self) -> None:
        self.calls.append("refresh")

    def cpu_usage(self) -> float:
        self.calls.append("cpu_usage")
        return self.usage

    def memory(self) -> MemoryReading:
        self.calls.append("memory")
        return self.reading

    def physical_core_count(self) -> int | None:
        self.calls.append("physical_core_count")
        return self.cores

    def cpus(self) -> list[CpuReading]:
        self.calls.append("cpus")
        return list(self.readings)


@pytest.fixture
def make_provider():
    """Factory for fake providers."""
    return FakeProvider


@pytest.fixture
def provider() -> FakeProvider:
    """A fake provider with default readings."""
    return FakeProvider()
