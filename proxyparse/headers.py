"""
Контейнер HTTP-заголовков.

Ключ — имя в lowercase ("Content-Length" == "content-length"),
но храним оригинальное написание, чтобы отдать upstream'у как было.

Порядок — порядок вставки (dict в Python его сохраняет).
Перезапись существующего имени оставляет заголовок на старом месте.
"""
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from proxyparse.errors import InvalidHeaderName, InvalidHeaderValue

# CR/LF внутри имени или значения = header injection при сериализации
_FORBIDDEN_IN_VALUE = ("\r", "\n")
_FORBIDDEN_IN_NAME = (":", "\r", "\n")


def _is_latin1(text: str) -> bool:
    # сериализуем в latin-1: один символ == один байт
    return all(ord(ch) < 256 for ch in text)


@dataclass(frozen=True)
class HeaderLine:
    """
    Один заголовок: имя и значение.

    frozen — чтобы get() можно было отдавать наружу без копии
    и никто не подсунул \\r\\n в обход set().
    """
    name: str
    value: str

    @property
    def key(self) -> str:
        """Нормализованный ключ для поиска."""
        return self.name.lower()


class HeaderTable:
    """
    Заголовки запроса: максимум одна запись на имя (без учёта регистра).

    Повторный set() того же имени перезаписывает значение —
    так же ведёт себя парсер на дублях (см. DESIGN.md).
    """

    def __init__(self) -> None:
        self._lines: Dict[str, HeaderLine] = {}

    def set(self, name: str, value: str) -> None:
        """Вставить или перезаписать. При ошибке таблица не меняется."""
        if not name:
            raise InvalidHeaderName("Header name must not be empty")
        if any(ch in name for ch in _FORBIDDEN_IN_NAME) or not _is_latin1(name):
            raise InvalidHeaderName(f"Invalid header name: {name!r}")
        if any(ch in value for ch in _FORBIDDEN_IN_VALUE) or not _is_latin1(value):
            raise InvalidHeaderValue(f"Invalid header value for {name!r}: {value!r}")

        self._lines[name.lower()] = HeaderLine(name, value)

    def get(self, name: str) -> Optional[HeaderLine]:
        return self._lines.get(name.lower())

    def remove(self, name: str) -> bool:
        """True если заголовок был и удалён."""
        return self._lines.pop(name.lower(), None) is not None

    def items(self) -> List[Tuple[str, str]]:
        """Пары (name, value) в порядке сериализации."""
        return [(line.name, line.value) for line in self._lines.values()]

    def clear(self) -> None:
        self._lines.clear()

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._lines

    def __iter__(self) -> Iterator[HeaderLine]:
        return iter(list(self._lines.values()))

    def __len__(self) -> int:
        return len(self._lines)

    def __repr__(self) -> str:
        return f"HeaderTable({self.items()!r})"
