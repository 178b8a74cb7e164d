"""
Конфигурация парсера.

Все настройки описаны как dataclasses — это проще Pydantic
и не тянет лишние зависимости. YAML читаем через PyYAML.
"""
from dataclasses import dataclass, field
from typing import Optional

import yaml


@dataclass
class ParserConfig:
    """Поведение парсера request line и заголовков."""
    accept_bare_lf: bool = True   # голый \n вместо \r\n — встречается у самописных клиентов
    max_headers: int = 100        # защита от запроса из тысяч заголовков
    default_port: str = "80"      # для http://host/path без порта


@dataclass
class ReadConfig:
    """
    Чтение заголовков из потока (stream.read_request).

    Таймаут храним в миллисекундах (так удобнее в конфиге),
    property возвращает секунды для asyncio.wait_for()
    """
    timeout_ms: int = 15000
    max_request_size: int = 64 * 1024   # request line + заголовки, без тела

    @property
    def timeout(self) -> float:
        return self.timeout_ms / 1000


@dataclass
class LoggingConfig:
    level: str = "info"
    trace: bool = False     # trace-хук парсера, очень шумный


@dataclass
class Settings:
    """
    Корневой конфиг.

    Можно создать через from_yaml() или default().
    """
    parser: ParserConfig = field(default_factory=ParserConfig)
    read: ReadConfig = field(default_factory=ReadConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: str) -> "Settings":
        """
        Парсит YAML-конфиг.

        Пример:
            parser:
              accept_bare_lf: false
              max_headers: 50
            read:
              timeout_ms: 5000
            logging:
              level: debug
              trace: true

        Отсутствующие ключи — дефолты, лишние игнорируем.
        """
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}

        parser_data = data.get("parser", {}) or {}
        parser = ParserConfig(
            accept_bare_lf=bool(parser_data.get("accept_bare_lf", True)),
            max_headers=int(parser_data.get("max_headers", 100)),
            # в YAML `default_port: 80` придёт числом
            default_port=str(parser_data.get("default_port", "80")),
        )

        read_data = data.get("read", {}) or {}
        read = ReadConfig(
            timeout_ms=int(read_data.get("timeout_ms", 15000)),
            max_request_size=int(read_data.get("max_request_size", 64 * 1024)),
        )

        logging_data = data.get("logging", {}) or {}
        logging_config = LoggingConfig(
            level=str(logging_data.get("level", "info")),
            trace=bool(logging_data.get("trace", False)),
        )

        return cls(parser=parser, read=read, logging=logging_config)

    @classmethod
    def default(cls) -> "Settings":
        return cls()


def resolve_parser_config(config: Optional[ParserConfig]) -> ParserConfig:
    """None -> дефолтный ParserConfig."""
    return config if config is not None else ParserConfig()
