"""
Тесты CLI.
"""
import pytest

from proxyparse.main import main, split_assignment

REQUEST = b"GET http://example.com:8080/index.html HTTP/1.1\r\nHost: example.com\r\nConnection: keep-alive\r\n\r\n"


@pytest.fixture
def request_file(tmp_path):
    path = tmp_path / "request.txt"
    path.write_bytes(REQUEST)
    return path


class TestMain:

    def test_fields_output(self, request_file, capsys):
        assert main([str(request_file)]) == 0

        out = capsys.readouterr().out
        assert "method: GET\n" in out
        assert "host: example.com\n" in out
        assert "port: 8080\n" in out
        assert "  Connection: keep-alive\n" in out
        assert f"total_len: {len(REQUEST)}\n" in out

    def test_raw_output_with_mutations(self, request_file, capsys):
        code = main([
            str(request_file),
            "--format", "raw",
            "--remove-header", "Connection",
            "--set-header", "Via=1.1 proxyparse",
        ])

        assert code == 0
        assert capsys.readouterr().out == (
            "GET http://example.com:8080/index.html HTTP/1.1\r\n"
            "Host: example.com\r\n"
            "Via: 1.1 proxyparse\r\n"
            "\r\n"
        )

    def test_parse_error_exit_code(self, tmp_path, capsys):
        path = tmp_path / "bad.txt"
        path.write_bytes(b"GET\r\n\r\n")

        assert main([str(path)]) == 1
        assert "MalformedRequestLine" in capsys.readouterr().err

    def test_config_file(self, tmp_path, request_file, capsys):
        config = tmp_path / "config.yaml"
        config.write_text("parser:\n  max_headers: 1\n")

        assert main([str(request_file), "-c", str(config)]) == 1
        assert "Too many header lines" in capsys.readouterr().err

    def test_bad_assignment(self, request_file):
        assert main([str(request_file), "--set-header", "NoEquals"]) == 1

    def test_split_assignment(self):
        assert split_assignment("Via=1.1 a=b") == ("Via", "1.1 a=b")
