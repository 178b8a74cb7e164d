"""
Настройка логирования и отладочный trace-хук.

Каждый разбираемый запрос может получить trace_id, который автоматически
добавляется во все логи через ContextVar + Filter.

trace() — замена сишному debug(format, ...): вместо varargs-форматирования
структурированный вызов event + поля. Пока трейс выключен — ничего
не форматируется и не пишется.
"""
import logging
import uuid
from contextvars import ContextVar
from typing import Optional, TextIO

LOGGER_NAME = "proxyparse"

logger = logging.getLogger(LOGGER_NAME)

# trace_id хранится в contextvars — виден из любой корутины
# в рамках одного запроса без явной передачи
trace_id_var: ContextVar[Optional[str]] = ContextVar("trace_id", default=None)

_trace_enabled = False


def generate_trace_id() -> str:
    """
    Генерирует короткий trace_id.

    Первые 8 символов UUID — для отладки хватает,
    коллизии возможны, но для логов не критично.
    """
    return uuid.uuid4().hex[:8]


def get_trace_id() -> Optional[str]:
    """Текущий trace_id или None."""
    return trace_id_var.get()


def set_trace_id(trace_id: str) -> None:
    """Устанавливает trace_id для текущего контекста."""
    trace_id_var.set(trace_id)


class TraceIdFilter(logging.Filter):
    """
    Добавляет trace_id в каждую запись лога.

    Если trace_id не установлен — ставит "-".
    """
    def filter(self, record: logging.LogRecord) -> bool:
        record.trace_id = trace_id_var.get() or "-"
        return True


def enable_trace(enabled: bool = True) -> None:
    """Включает/выключает trace-хук парсера."""
    global _trace_enabled
    _trace_enabled = enabled


def trace_enabled() -> bool:
    return _trace_enabled


def trace(event: str, **fields: object) -> None:
    """
    Отладочное событие парсера.

        trace("request_line", method="GET", target="/")
        -> "request_line method='GET' target='/'"

    Выключено по умолчанию. Второе условие — уровень логгера,
    чтобы не форматировать строку, которую всё равно отбросят.
    """
    if not _trace_enabled or not logger.isEnabledFor(logging.DEBUG):
        return
    details = " ".join(f"{key}={value!r}" for key, value in fields.items())
    logger.debug(f"{event} {details}" if details else event)


def setup_logger(
    level: str = "info",
    stream: Optional[TextIO] = None,
    trace: bool = False,
) -> logging.Logger:
    """
    Настраивает логгер "proxyparse".

    stream — куда писать (по умолчанию stderr).
    trace=True включает trace-хук и форсит уровень DEBUG.

    Формат: 2025-01-15 12:30:45 | INFO | [abc12345] message
    """
    logger.setLevel(logging.DEBUG if trace else getattr(logging, level.upper()))

    # чистим старые хэндлеры если есть (при повторной настройке)
    logger.handlers.clear()

    handler = logging.StreamHandler(stream)

    # trace_id в квадратных скобках перед сообщением
    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)s | [%(trace_id)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    handler.setFormatter(formatter)
    handler.addFilter(TraceIdFilter())
    logger.addHandler(handler)

    enable_trace(trace)
    return logger
