"""Shared fakes for the Cassandra driver."""

from __future__ import annotations

import time
from types import SimpleNamespace
from typing import Any, Optional

import pytest


class FakeSession:
    def __init__(self, keyspace: Optional[str]) -> None:
        self.keyspace = keyspace
        self.shutdown_calls = 0

    def shutdown(self) -> None:
        self.shutdown_calls += 1


class FakeCluster:
    def __init__(self, driver: "FakeDriver", **kwargs: Any) -> None:
        self._driver = driver
        self.kwargs = kwargs
        self.metadata = SimpleNamespace(cluster_name=driver.cluster_name)
        self.sessions: list[FakeSession] = []
        self.shutdown_calls = 0

    def connect(self, keyspace: Optional[str] = None) -> FakeSession:
        self._driver.connect_attempts += 1
        if self._driver.connect_delay:
            time.sleep(self._driver.connect_delay)
        if self._driver.fail_with is not None:
            raise self._driver.fail_with
        session = FakeSession(keyspace)
        self.sessions.append(session)
        return session

    def shutdown(self) -> None:
        self.shutdown_calls += 1
        if self._driver.shutdown_error is not None:
            raise self._driver.shutdown_error


class FakeDriver:
    """Callable standing in for ``cassandra.cluster.Cluster``."""

    def __init__(self) -> None:
        self.clusters: list[FakeCluster] = []
        self.connect_attempts = 0
        self.cluster_name = "Test Cluster"
        self.fail_with: Optional[BaseException] = None
        self.shutdown_error: Optional[BaseException] = None
        self.connect_delay = 0.0

    def __call__(self, **kwargs: Any) -> FakeCluster:
        cluster = FakeCluster(self, **kwargs)
        self.clusters.append(cluster)
        return cluster

    @property
    def last_kwargs(self) -> dict[str, Any]:
        return self.clusters[-1].kwargs


@pytest.fixture
def fake_driver() -> FakeDriver:
    return FakeDriver()
