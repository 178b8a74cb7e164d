"""
Сборка запроса обратно в текст для отправки upstream'у.

Формат HTTP/1.1:
GET http://example.com/path HTTP/1.1\r\n
Host: example.com\r\n
\r\n

Длины (total_len/headers_len) и сам текст считаются из одного
генератора кусков — разъехаться они не могут.
"""
from typing import TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from proxyparse.headers import HeaderTable
    from proxyparse.request import ParsedRequest

CRLF = "\r\n"
HEADER_SEPARATOR = ": "


def request_target(request: "ParsedRequest") -> str:
    """
    Target для request line.

    Если запрос пришёл в absolute-URI form — собираем его обратно,
    порт пишем только если он был явно указан.
    """
    if request.protocol is None:
        return request.path
    authority = request.host
    if request.port_explicit:
        authority = f"{authority}:{request.port}"
    return f"{request.protocol}://{authority}{request.path}"


def header_pieces(headers: "HeaderTable") -> Iterator[str]:
    for line in headers:
        yield line.name
        yield HEADER_SEPARATOR
        yield line.value
        yield CRLF


def request_pieces(request: "ParsedRequest") -> Iterator[str]:
    yield request.method
    yield " "
    yield request_target(request)
    yield " "
    yield request.version
    yield CRLF
    yield from header_pieces(request.headers)
    # пустая строка = конец заголовков
    yield CRLF


def unparse_headers(request: "ParsedRequest") -> str:
    """Все заголовки, без завершающей пустой строки."""
    return "".join(header_pieces(request.headers))


def unparse(request: "ParsedRequest") -> str:
    return "".join(request_pieces(request))


def headers_len(request: "ParsedRequest") -> int:
    return sum(len(piece) for piece in header_pieces(request.headers))


def total_len(request: "ParsedRequest") -> int:
    return sum(len(piece) for piece in request_pieces(request))
