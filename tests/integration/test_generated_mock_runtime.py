import asyncio
import threading

import pytest

from pymoq.app import Mocker


def test_mock_records_calls_and_delegates(shop, import_fresh):
    Mocker(shop).write(["Fetcher"], out=shop / "fetcher_mock.py")
    mocks = import_fresh(shop.parent, "shop.fetcher_mock")

    mocked = mocks.FetcherMock(fetch_func=lambda id: mocks.Item(id=id))

    assert mocked.fetch("a") == mocks.Item(id="a")
    assert mocked.fetch("b").id == "b"
    assert [call.id for call in mocked.fetch_calls()] == ["a", "b"]
    assert mocked.fetch_calls()[0] == mocks.FetcherMock.FetchCall(id="a")


def test_unset_hook_raises_with_a_descriptive_message(shop, import_fresh):
    Mocker(shop).write(["Fetcher"], out=shop / "fetcher_mock.py")
    mocks = import_fresh(shop.parent, "shop.fetcher_mock")

    with pytest.raises(
        RuntimeError, match="FetcherMock.fetch_func is None but Fetcher.fetch was just called"
    ):
        mocks.FetcherMock().fetch("a")


def test_accessor_returns_a_snapshot(shop, import_fresh):
    Mocker(shop).write(["Fetcher"], out=shop / "fetcher_mock.py")
    mocks = import_fresh(shop.parent, "shop.fetcher_mock")
    mocked = mocks.FetcherMock(fetch_func=lambda id: None)

    mocked.fetch("a")
    calls = mocked.fetch_calls()
    calls.clear()

    assert len(mocked.fetch_calls()) == 1


def test_concurrent_calls_are_all_recorded(shop, import_fresh):
    Mocker(shop).write(["Fetcher"], out=shop / "fetcher_mock.py")
    mocks = import_fresh(shop.parent, "shop.fetcher_mock")
    mocked = mocks.FetcherMock(fetch_func=lambda id: None)

    def worker(n):
        for i in range(200):
            mocked.fetch(f"{n}-{i}")

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(mocked.fetch_calls()) == 8 * 200


def test_async_hook_is_awaited(workspace_factory, import_fresh):
    root = workspace_factory.with_package(
        "remote",
        client="""
        from typing import Protocol


        class Client(Protocol):
            async def get(self, key: str, *rest: str, timeout: float = 1.0) -> int: ...
        """,
    ).build()
    Mocker(root / "remote").write(["Client"], out=root / "remote" / "client_mock.py")
    mocks = import_fresh(root, "remote.client_mock")

    async def get(key, *rest, timeout=1.0):
        return len(rest)

    mocked = mocks.ClientMock(get_func=get)

    assert asyncio.run(mocked.get("k", "x", "y", timeout=2.0)) == 2
    call = mocked.get_calls()[0]
    assert (call.key, call.rest, call.timeout) == ("k", ("x", "y"), 2.0)


def test_abc_mock_is_an_instance_of_the_contract(workspace_factory, import_fresh):
    root = workspace_factory.with_package(
        "repo",
        base="""
        from abc import ABC, abstractmethod


        class Repository(ABC):
            @abstractmethod
            def save(self, key: str) -> None: ...
        """,
    ).build()
    Mocker(root / "repo").write(["Repository"], out=root / "repo" / "repo_mock.py")
    mocks = import_fresh(root, "repo.repo_mock")

    mocked = mocks.RepositoryMock(save_func=lambda key: None)
    mocked.save("k")

    assert isinstance(mocked, mocks.Repository)
    assert [call.key for call in mocked.save_calls()] == ["k"]
