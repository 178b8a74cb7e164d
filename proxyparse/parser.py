"""
Парсер HTTP/1.x request line и заголовков.

Только то что нужно для проксирования:
- request line (method, target, version)
- absolute-URI form: http://host:port/path -> protocol/host/port/path
- заголовки до пустой строки

Тело не трогаем — head_len показывает, где оно начинается.
Функции тут чистые: на вход текст, на выход RequestHead или исключение.
Сборкой ParsedRequest занимается request.py.
"""
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from proxyparse.config import ParserConfig, resolve_parser_config
from proxyparse.errors import (
    MalformedHeader,
    MalformedRequestLine,
    MalformedVersion,
    UnencodableRequest,
    UnsupportedProtocol,
)
from proxyparse.logger import trace, trace_enabled

# latin-1 — стандартная кодировка для HTTP/1.x headers, байт == символ
ENCODING = "latin-1"

METHOD_PATTERN = re.compile(r"^[A-Z]+$")
VERSION_PATTERN = re.compile(r"^HTTP/[0-9]\.[0-9]$")
SCHEME_PATTERN = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*)://")
PORT_PATTERN = re.compile(r"^[0-9]{1,5}$")
# RFC 7230 token: tchar = "!" / "#" / "$" / "%" / "&" / "'" / "*" / "+" / "-"
#                       / "." / "^" / "_" / "`" / "|" / "~" / DIGIT / ALPHA
TOKEN_PATTERN = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")

HTTP_SCHEME = "http://"


@dataclass
class RequestHead:
    """Результат разбора: всё, что нужно для заполнения ParsedRequest."""
    method: str
    path: str
    version: str
    protocol: Optional[str] = None
    host: Optional[str] = None
    port: Optional[str] = None
    port_explicit: bool = False
    headers: List[Tuple[str, str]] = field(default_factory=list)
    head_len: int = 0


def decode(buffer: Union[str, bytes, bytearray]) -> str:
    """
    bytes -> str через latin-1.

    Строку проверяем, что она переводится обратно в latin-1 —
    иначе total_len() разойдётся с длиной to_bytes().
    """
    if isinstance(buffer, (bytes, bytearray)):
        return bytes(buffer).decode(ENCODING)
    try:
        buffer.encode(ENCODING)
    except UnicodeEncodeError as e:
        raise UnencodableRequest(
            f"Character {buffer[e.start]!r} at offset {e.start} is not latin-1"
        ) from e
    return buffer


def split_request_line(line: str) -> Tuple[str, str, str]:
    """
    GET /path HTTP/1.1 -> ("GET", "/path", "HTTP/1.1")

    Делим строго по одиночным пробелам: двойной пробел даст пустой токен,
    и такая строка считается битой.
    """
    parts = line.split(" ")
    if len(parts) != 3 or not all(parts):
        raise MalformedRequestLine(f"Malformed request line: {line!r}")
    return parts[0], parts[1], parts[2]


def validate_method(method: str) -> None:
    # без allow-list: новые методы (PURGE, QUERY, ...) пропускаем
    if not METHOD_PATTERN.match(method):
        raise MalformedRequestLine(f"Invalid method: {method!r}")


def validate_version(version: str) -> None:
    if not VERSION_PATTERN.match(version):
        raise MalformedVersion(f"Invalid HTTP version: {version!r}")


def split_authority(authority: str, default_port: str) -> Tuple[str, str, bool]:
    """
    host[:port] -> (host, port, port_explicit)

    IPv6 литерал в квадратных скобках: [::1]:8080 -> ("[::1]", "8080", True)
    """
    if authority.startswith("["):
        close = authority.find("]")
        if close == -1:
            raise MalformedRequestLine(f"Invalid authority: {authority!r}")
        host = authority[:close + 1]
        rest = authority[close + 1:]
        if rest and not rest.startswith(":"):
            raise MalformedRequestLine(f"Invalid authority: {authority!r}")
        port = rest[1:] if rest else None
    else:
        host, sep, port_part = authority.partition(":")
        port = port_part if sep else None

    if not host:
        raise MalformedRequestLine(f"Missing host in authority: {authority!r}")

    if port is None:
        return host, default_port, False

    if not PORT_PATTERN.match(port):
        raise MalformedRequestLine(f"Invalid port: {port!r}")
    return host, port, True


def parse_target(target: str, config: ParserConfig) -> RequestHead:
    """
    Разбирает request-target.

    http://example.com:8080/index.html -> absolute-URI form
    /index.html                        -> origin-form, host/port не трогаем
    ftp://...                          -> UnsupportedProtocol

    Возвращает RequestHead с заполненными protocol/host/port/path
    (method/version заполнит вызывающий).
    """
    scheme = SCHEME_PATTERN.match(target)
    if scheme is None:
        # origin-form (и "*" для OPTIONS) — путь как есть
        return RequestHead(method="", path=target, version="")

    if scheme.group(0).lower() != HTTP_SCHEME:
        raise UnsupportedProtocol(f"Unsupported protocol: {scheme.group(1)!r}")

    rest = target[len(HTTP_SCHEME):]

    # authority заканчивается на первом '/' (или '?', если пути нет)
    boundary = re.search(r"[/?]", rest)
    if boundary is None:
        authority, path = rest, "/"
    else:
        authority, path = rest[:boundary.start()], rest[boundary.start():]
        if path.startswith("?"):
            path = "/" + path

    host, port, port_explicit = split_authority(authority, config.default_port)
    return RequestHead(
        method="",
        path=path,
        version="",
        protocol="http",
        host=host,
        port=port,
        port_explicit=port_explicit,
    )


def split_header_line(line: str) -> Tuple[str, str]:
    """
    Host: example.com -> ("Host", "example.com")

    Делим по первому ':'. Из значения убираем ровно один ведущий пробел
    и хвостовые \\r — остальное оставляем как прислал клиент.
    """
    name, sep, value = line.partition(":")
    if not sep:
        raise MalformedHeader(f"Header line without ':': {line!r}")
    # заодно отсекает obs-fold: строка продолжения начинается с пробела
    if not TOKEN_PATTERN.match(name):
        raise MalformedHeader(f"Invalid header name: {name!r}")

    if value.startswith(" "):
        value = value[1:]
    value = value.rstrip("\r")
    if "\r" in value:
        raise MalformedHeader(f"Bare CR in value of {name!r}")
    return name, value


def _read_line(buffer: str, start: int) -> Tuple[str, int, bool, bool]:
    """
    Строка начиная с start.

    Возвращает (line, next_start, terminated, crlf).
    Последняя строка без терминатора тоже отдаётся (terminated=False).
    """
    end = buffer.find("\n", start)
    if end == -1:
        raw, next_start, terminated = buffer[start:], len(buffer), False
    else:
        raw, next_start, terminated = buffer[start:end], end + 1, True

    crlf = raw.endswith("\r")
    if crlf:
        raw = raw[:-1]
    return raw, next_start, terminated, crlf


def parse_head(buffer: str, config: Optional[ParserConfig] = None) -> RequestHead:
    """
    Разбирает request line и блок заголовков.

    Формат HTTP/1.1:
    GET /path HTTP/1.1\\r\\n
    Host: example.com\\r\\n
    \\r\\n
    <body>

    Тело не читаем — head_len указывает на его начало.
    """
    config = resolve_parser_config(config)

    line, pos, terminated, crlf = _read_line(buffer, 0)
    if not terminated:
        raise MalformedRequestLine("Request line is not terminated")
    if not crlf and not config.accept_bare_lf:
        raise MalformedRequestLine("Request line must end with CRLF")

    method, target, version = split_request_line(line)
    validate_method(method)
    head = parse_target(target, config)
    validate_version(version)

    head.method = method
    head.version = version
    if trace_enabled():
        trace(
            "request_line",
            method=method,
            target=target,
            host=head.host,
            port=head.port,
            path=head.path,
        )

    # читаем заголовки до пустой строки или конца буфера
    while pos < len(buffer):
        line, next_pos, terminated, crlf = _read_line(buffer, pos)
        if terminated and not crlf and not config.accept_bare_lf:
            raise MalformedHeader(f"Header line must end with CRLF: {line!r}")
        pos = next_pos
        if not line:
            break

        if len(head.headers) >= config.max_headers:
            raise MalformedHeader(f"Too many header lines (max {config.max_headers})")

        name, value = split_header_line(line)
        if trace_enabled():
            trace("header", name=name, value=value)
        head.headers.append((name, value))

    head.head_len = pos
    return head
