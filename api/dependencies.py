"""Request-time access to the objects built once at startup."""

from fastapi import Request

from relay.config import RelayConfig
from relay.dispatcher import Dispatcher


def get_dispatcher(request: Request) -> Dispatcher:
    return request.app.state.dispatcher


def get_relay_config(request: Request) -> RelayConfig:
    return request.app.state.relay_config
