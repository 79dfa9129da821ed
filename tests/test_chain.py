"""Tests for larvatus.middleware.chain: ordering, short-circuit, reuse, validation."""

from typing import Any

import pytest

from larvatus.errors import ConfigurationError
from larvatus.http.headers import Headers
from larvatus.http.request import Request
from larvatus.http.response import Response
from larvatus.middleware.chain import MiddlewareChain


def _request(path: str = "/") -> Request:
    return Request(method="GET", url=path, path=path, headers=Headers())


def _recorder(name: str, calls: list[str]) -> Any:
    async def mw(request: Request, response: Response, next: Any) -> Any:
        calls.append(f"{name}-before")
        result = await next()
        calls.append(f"{name}-after")
        return result

    return mw


class TestChainOrdering:
    @pytest.mark.asyncio
    async def test_onion_order(self) -> None:
        calls: list[str] = []

        async def terminal(request: Request, response: Response) -> str:
            calls.append("t")
            return "done"

        chain = MiddlewareChain()
        chain.add(_recorder("m1", calls))
        chain.add(_recorder("m2", calls))

        result = await chain.run(_request(), Response(), terminal)

        assert calls == ["m1-before", "m2-before", "t", "m2-after", "m1-after"]
        assert result == "done"

    @pytest.mark.asyncio
    async def test_empty_chain_runs_terminal(self) -> None:
        calls: list[str] = []

        async def terminal(request: Request, response: Response) -> None:
            calls.append("t")

        await MiddlewareChain().run(_request(), Response(), terminal)
        assert calls == ["t"]

    @pytest.mark.asyncio
    async def test_short_circuit_skips_downstream(self) -> None:
        calls: list[str] = []

        async def stop(request: Request, response: Response, next: Any) -> str:
            calls.append("stop")
            return "stopped"

        async def terminal(request: Request, response: Response) -> None:
            calls.append("t")

        chain = MiddlewareChain([stop, _recorder("m2", calls)])
        result = await chain.run(_request(), Response(), terminal)

        assert calls == ["stop"]
        assert result == "stopped"

    @pytest.mark.asyncio
    async def test_sync_terminal_inside_async_link(self) -> None:
        calls: list[str] = []

        def terminal(request: Request, response: Response) -> str:
            calls.append("t")
            response.write("body")
            response.send()
            return "sync-done"

        response = Response()
        chain = MiddlewareChain([_recorder("m1", calls)])
        result = await chain.run(_request(), response, terminal)

        assert calls == ["m1-before", "t", "m1-after"]
        assert result == "sync-done"
        assert response.outbound is not None
        assert response.outbound.body == b"body"

    @pytest.mark.asyncio
    async def test_callable_object_middleware(self) -> None:
        class Tag:
            def __init__(self) -> None:
                self.seen: list[str] = []

            async def __call__(self, request: Request, response: Response, next: Any) -> Any:
                self.seen.append(request.path)
                response.set_header("X-Tag", "yes")
                return await next()

        tag = Tag()
        response = Response()

        async def terminal(request: Request, response: Response) -> None:
            pass

        await MiddlewareChain([tag]).run(_request("/x"), response, terminal)
        assert tag.seen == ["/x"]
        assert response.get_header("x-tag") == "yes"

    @pytest.mark.asyncio
    async def test_middleware_can_mutate_request_state(self) -> None:
        async def auth(request: Request, response: Response, next: Any) -> Any:
            request.state["user"] = "alice"
            return await next()

        seen: list[str] = []

        async def terminal(request: Request, response: Response) -> None:
            seen.append(request.state["user"])

        await MiddlewareChain([auth]).run(_request(), Response(), terminal)
        assert seen == ["alice"]


class TestChainReuse:
    @pytest.mark.asyncio
    async def test_chain_not_drained_between_runs(self) -> None:
        calls: list[str] = []

        async def terminal(request: Request, response: Response) -> None:
            calls.append("t")

        chain = MiddlewareChain([_recorder("m1", calls)])
        await chain.run(_request(), Response(), terminal)
        await chain.run(_request(), Response(), terminal)

        assert calls == ["m1-before", "t", "m1-after"] * 2
        assert len(chain) == 1

    @pytest.mark.asyncio
    async def test_calling_next_twice_reruns_downstream(self) -> None:
        calls: list[str] = []

        async def twice(request: Request, response: Response, next: Any) -> Any:
            await next()
            return await next()

        async def terminal(request: Request, response: Response) -> None:
            calls.append("t")

        await MiddlewareChain([twice]).run(_request(), Response(), terminal)
        assert calls == ["t", "t"]

    @pytest.mark.asyncio
    async def test_exception_propagates_through_links(self) -> None:
        calls: list[str] = []

        async def terminal(request: Request, response: Response) -> None:
            raise RuntimeError("handler failed")

        chain = MiddlewareChain([_recorder("m1", calls)])
        with pytest.raises(RuntimeError, match="handler failed"):
            await chain.run(_request(), Response(), terminal)
        assert calls == ["m1-before"]

    def test_add_appends(self) -> None:
        async def a(request: Request, response: Response, next: Any) -> Any: ...
        async def b(request: Request, response: Response, next: Any) -> Any: ...

        chain = MiddlewareChain([a])
        chain.add(b)
        assert list(chain) == [a, b]


class TestChainValidation:
    def test_sync_function_rejected(self) -> None:
        def sync_mw(request: Request, response: Response, next: Any) -> Any:
            return next()

        with pytest.raises(ConfigurationError, match="async"):
            MiddlewareChain([sync_mw])
        with pytest.raises(ConfigurationError):
            MiddlewareChain().add(sync_mw)

    def test_sync_callable_object_rejected(self) -> None:
        class Timer:
            def __call__(self, request: Request, response: Response, next: Any) -> Any:
                return next()

        with pytest.raises(ConfigurationError):
            MiddlewareChain().add(Timer())

    def test_rejected_link_not_added(self) -> None:
        chain = MiddlewareChain()
        with pytest.raises(ConfigurationError):
            chain.add(lambda request, response, next: next())
        assert len(chain) == 0
