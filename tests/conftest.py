"""
Общие фикстуры для тестов парсера.
"""
import logging

import pytest

from proxyparse.logger import LOGGER_NAME, enable_trace


@pytest.fixture(autouse=True)
def reset_logging():
    """trace-хук и хэндлеры — глобальные, не даём им протечь между тестами."""
    yield
    enable_trace(False)
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def absolute_request() -> bytes:
    """Запрос к forward proxy: target в absolute-URI form."""
    return (
        b"GET http://example.com:8080/index.html HTTP/1.1\r\n"
        b"Host: example.com\r\n"
        b"\r\n"
    )


@pytest.fixture
def origin_request() -> bytes:
    """Обычный запрос к серверу: только путь."""
    return (
        b"GET /api/users?page=1 HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: application/json\r\n"
        b"Connection: keep-alive\r\n"
        b"\r\n"
    )


@pytest.fixture
def post_request() -> bytes:
    """POST с телом — тело парсер не трогает."""
    body = b'{"name": "John"}'
    return (
        b"POST http://api.example.com/users HTTP/1.0\r\n"
        b"Host: api.example.com\r\n"
        b"Content-Type: application/json\r\n"
        + f"Content-Length: {len(body)}\r\n".encode()
        + b"\r\n"
        + body
    )
