"""
Чтение заголовков запроса из asyncio-потока.

Сам парсер с сетью не работает: ему нужен полный буфер до пустой строки.
Здесь — тонкий адаптер для прокси: копим строки до пустой,
отдаём в parse_request(). Тело остаётся в reader'е.

Размер head ограничен дважды: max_request_size на весь head и limit
самого StreamReader'а (по умолчанию 64KB) на одну строку. Строку длиннее
limit'а readline() не отдаст — поднимайте limit при создании reader'а.
"""
import asyncio
import logging
from typing import Optional

from proxyparse.config import ParserConfig, ReadConfig
from proxyparse.errors import MalformedHeader
from proxyparse.logger import LOGGER_NAME
from proxyparse.request import ParsedRequest, parse_request

logger = logging.getLogger(LOGGER_NAME)


async def read_head(
    reader: asyncio.StreamReader,
    read_config: Optional[ReadConfig] = None,
) -> bytes:
    """
    Читает request line + заголовки + пустую строку.

    Один таймаут на весь head, а не на каждую строку —
    иначе медленный клиент может тянуть бесконечно.
    """
    read_config = read_config or ReadConfig()
    try:
        return await asyncio.wait_for(
            _collect_head(reader, read_config.max_request_size),
            timeout=read_config.timeout,
        )
    except asyncio.TimeoutError:
        # asyncio.TimeoutError без текста — в логах непонятно, что отвалилось
        raise TimeoutError(f"Timeout during reading request head after {read_config.timeout}s")


async def _read_line(reader: asyncio.StreamReader, max_size: int) -> bytes:
    try:
        return await reader.readline()
    except (asyncio.LimitOverrunError, ValueError):
        # строка длиннее limit'а reader'а: readline() уже выкинул её из буфера
        raise MalformedHeader(f"Request head exceeds {max_size} bytes")


async def _collect_head(reader: asyncio.StreamReader, max_size: int) -> bytes:
    chunks = []
    size = 0
    while True:
        line = await _read_line(reader, max_size)
        if not line:
            if not chunks:
                raise ConnectionError("Empty request")
            raise ConnectionError("Client disconnected while sending headers")

        size += len(line)
        if size > max_size:
            raise MalformedHeader(f"Request head exceeds {max_size} bytes")
        chunks.append(line)

        # пустая строка = конец заголовков (первая строка — request line, не проверяем)
        if len(chunks) > 1 and line in (b"\r\n", b"\n"):
            return b"".join(chunks)


async def read_request(
    reader: asyncio.StreamReader,
    read_config: Optional[ReadConfig] = None,
    parser_config: Optional[ParserConfig] = None,
) -> ParsedRequest:
    """Читает head из потока и парсит его."""
    head = await read_head(reader, read_config)
    request = parse_request(head, parser_config)
    logger.debug(f"{request.method} {request.target} ({len(head)} bytes head)")
    return request
