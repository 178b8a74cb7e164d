"""
Иерархия ошибок парсера.

Всё наследуется от ValueError (кроме RecordStateError), чтобы старый код,
ловивший ValueError от парсера, продолжал работать.
"""


class ProxyParseError(Exception):
    """Базовый класс для всех ошибок библиотеки."""


class ParseError(ProxyParseError, ValueError):
    """
    Буфер не удалось разобрать.

    Из parse() — запись после этого INVALID. MalformedHeader ещё кидает
    stream.read_head() на слишком большой head, до всякой записи.
    """


class MalformedRequestLine(ParseError):
    """Нет первой строки, не три токена, кривой метод или authority."""


class UnsupportedProtocol(ParseError):
    """Absolute-URI со схемой, отличной от http://"""


class MalformedVersion(ParseError):
    """Версия не в формате HTTP/<digit>.<digit>"""


class MalformedHeader(ParseError):
    """Строка заголовка без ':' или с недопустимыми символами."""


class UnencodableRequest(ParseError):
    """str-буфер с символами вне latin-1: в байты для upstream'а его не перевести."""


class InvalidHeaderName(ProxyParseError, ValueError):
    """Пустое или недопустимое имя в set_header()."""


class InvalidHeaderValue(ProxyParseError, ValueError):
    """Значение в set_header() с \\r/\\n или символами вне latin-1. Запись остаётся PARSED."""


class RecordStateError(ProxyParseError, RuntimeError):
    """Операция вызвана на записи в неподходящем состоянии."""
