"""Custom Dishka FastAPI integration using Scope.UOW."""

from dishka import AsyncContainer
from starlette.requests import Request
from starlette.types import ASGIApp, Receive, Send
from starlette.types import Scope as ASGIScope
from starlette.websockets import WebSocket

from aidportal.util.di.scope import Scope


class ContainerMiddleware:
    """ASGI middleware that opens a Scope.UOW container for each request.

    A version of dishka.integrations.starlette.ContainerMiddleware that uses
    our Scope.UOW instead of dishka.Scope.REQUEST.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: ASGIScope, receive: Receive, send: Send) -> None:
        if scope["type"] not in ("http", "websocket"):
            return await self.app(scope, receive, send)

        request: Request | WebSocket
        context: dict[type[Request | WebSocket], Request | WebSocket]

        if scope["type"] == "http":
            request = Request(scope, receive=receive, send=send)
            context = {Request: request}
        else:
            request = WebSocket(scope, receive, send)
            context = {WebSocket: request}

        async with request.app.state.dishka_container(
            context,
            scope=Scope.UOW,
        ) as request_container:
            request.state.dishka_container = request_container
            return await self.app(scope, receive, send)


def setup_dishka(container: AsyncContainer, app) -> None:
    """Install the UOW middleware and attach the container to the app."""
    app.add_middleware(ContainerMiddleware)
    app.state.dishka_container = container
