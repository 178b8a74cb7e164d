"""
Распарсенный HTTP-запрос (без тела).

Жизненный цикл:
    EMPTY --parse() ok--> PARSED
    EMPTY --parse() err-> INVALID (терминальное, запись выбросить)

Поля request line заполняются разом в конце parse(), так что запись
никогда не бывает заполнена наполовину.
"""
from enum import Enum
from typing import Optional, Union

from proxyparse import serializer
from proxyparse.config import ParserConfig
from proxyparse.errors import (
    InvalidHeaderName,
    InvalidHeaderValue,
    ParseError,
    RecordStateError,
)
from proxyparse.headers import HeaderLine, HeaderTable
from proxyparse.logger import trace
from proxyparse.parser import ENCODING, decode, parse_head


class RequestState(Enum):
    EMPTY = "empty"
    PARSED = "parsed"
    INVALID = "invalid"


class ParsedRequest:
    """
    Request line + заголовки + исходный буфер.

    protocol/host/port заполнены только для absolute-URI form
    (GET http://host:port/path HTTP/1.1), для origin-form они None.
    """

    def __init__(self) -> None:
        self.method: Optional[str] = None     # GET, POST, etc
        self.protocol: Optional[str] = None   # "http" или None
        self.host: Optional[str] = None
        self.port: Optional[str] = None       # строкой, как в запросе
        self.path: Optional[str] = None       # /api/users?id=1
        self.version: Optional[str] = None    # HTTP/1.1
        self.headers = HeaderTable()
        self.buf = ""                         # исходный запрос целиком
        self.head_len = 0                     # где в buf начинается тело
        self.port_explicit = False
        self.state = RequestState.EMPTY

    def parse(
        self,
        buffer: Union[str, bytes, bytearray],
        config: Optional[ParserConfig] = None,
    ) -> "ParsedRequest":
        """
        Разбирает буфер с полным запросом (до пустой строки включительно).

        При ошибке запись переходит в INVALID и исключение летит дальше.
        """
        if self.state is not RequestState.EMPTY:
            raise RecordStateError(f"Cannot parse into a {self.state.value} request")

        try:
            text = decode(buffer)
            head = parse_head(text, config)
            # дубли заголовков: последний перезаписывает предыдущий
            headers = HeaderTable()
            for name, value in head.headers:
                headers.set(name, value)
        except (ParseError, InvalidHeaderName, InvalidHeaderValue) as e:
            self.state = RequestState.INVALID
            trace("parse_failed", error=type(e).__name__, detail=str(e))
            raise

        self.method = head.method
        self.protocol = head.protocol
        self.host = head.host
        self.port = head.port
        self.port_explicit = head.port_explicit
        self.path = head.path
        self.version = head.version
        self.headers = headers
        self.buf = text
        self.head_len = head.head_len
        self.state = RequestState.PARSED
        return self

    def _require_parsed(self) -> None:
        if self.state is not RequestState.PARSED:
            raise RecordStateError(f"Request is {self.state.value}, expected parsed")

    @property
    def is_parsed(self) -> bool:
        return self.state is RequestState.PARSED

    @property
    def body(self) -> str:
        """Всё, что лежало в буфере после пустой строки. Не разбираем."""
        return self.buf[self.head_len:]

    # --- заголовки ---

    def set_header(self, name: str, value: str) -> None:
        self._require_parsed()
        self.headers.set(name, value)

    def get_header(self, name: str) -> Optional[HeaderLine]:
        self._require_parsed()
        return self.headers.get(name)

    def remove_header(self, name: str) -> bool:
        self._require_parsed()
        return self.headers.remove(name)

    # --- сериализация ---

    @property
    def target(self) -> str:
        self._require_parsed()
        return serializer.request_target(self)

    def unparse(self) -> str:
        self._require_parsed()
        return serializer.unparse(self)

    def unparse_headers(self) -> str:
        self._require_parsed()
        return serializer.unparse_headers(self)

    def total_len(self) -> int:
        self._require_parsed()
        return serializer.total_len(self)

    def headers_len(self) -> int:
        self._require_parsed()
        return serializer.headers_len(self)

    def to_bytes(self) -> bytes:
        """Готовые байты для upstream'а."""
        return self.unparse().encode(ENCODING)

    def __repr__(self) -> str:
        return (
            f"ParsedRequest(state={self.state.value!r}, method={self.method!r}, "
            f"path={self.path!r}, version={self.version!r})"
        )


def parse_request(
    buffer: Union[str, bytes, bytearray],
    config: Optional[ParserConfig] = None,
) -> ParsedRequest:
    """Создаёт запись и сразу парсит в неё буфер."""
    return ParsedRequest().parse(buffer, config)
