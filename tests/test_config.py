"""
Тесты загрузки YAML-конфига.
"""
from proxyparse.config import ParserConfig, ReadConfig, Settings
from proxyparse.request import parse_request


class TestSettings:

    def test_defaults(self):
        settings = Settings.default()

        assert settings.parser.accept_bare_lf is True
        assert settings.parser.max_headers == 100
        assert settings.parser.default_port == "80"
        assert settings.read.timeout == 15.0
        assert settings.logging.level == "info"
        assert settings.logging.trace is False

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "parser:\n"
            "  accept_bare_lf: false\n"
            "  max_headers: 10\n"
            "  default_port: 3128\n"
            "read:\n"
            "  timeout_ms: 2500\n"
            "logging:\n"
            "  level: debug\n"
            "  trace: true\n"
        )

        settings = Settings.from_yaml(str(path))

        assert settings.parser == ParserConfig(
            accept_bare_lf=False, max_headers=10, default_port="3128"
        )
        assert settings.read.timeout == 2.5
        assert settings.read.max_request_size == 64 * 1024
        assert settings.logging.level == "debug"
        assert settings.logging.trace is True

    def test_empty_yaml_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert Settings.from_yaml(str(path)) == Settings.default()

    def test_read_config_seconds(self):
        assert ReadConfig(timeout_ms=500).timeout == 0.5

    def test_default_port_used_by_parser(self):
        config = ParserConfig(default_port="3128")
        request = parse_request(b"GET http://example.com/ HTTP/1.1\r\n\r\n", config)

        assert request.port == "3128"
        # дефолтный порт не явный — в target не попадает
        assert request.target == "http://example.com/"
