from __future__ import annotations

import logging

import pytest
from google.protobuf.compiler import plugin_pb2

from fixtures_descriptors import foo_file, make_request

from gogapic.cli import build_parser, main
from gogapic.config import CONFIG_ENV


@pytest.fixture(autouse=True)
def _no_env_config(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV, raising=False)


@pytest.fixture
def request_file(tmp_path):
    path = tmp_path / "request.bin"
    request = make_request([foo_file()], ["example/foo/v2/foo.proto"])
    path.write_bytes(request.SerializeToString())
    return path


class TestParser:
    def test_subcommands(self):
        parser = build_parser()
        args = parser.parse_args(["generate", "--request", "r.bin", "--dry-run"])
        assert args.command == "generate"
        assert str(args.request) == "r.bin"
        assert args.dry_run is True
        assert callable(args.handler)
        assert parser.parse_args(["version"]).command == "version"

    def test_command_is_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_verbose_and_quiet_are_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["-v", "-q", "version"])


class TestGenerateCommand:
    def test_writes_response_file(self, request_file, tmp_path):
        output = tmp_path / "response.bin"
        assert main(["generate", "--request", str(request_file), "--output", str(output)]) == 0
        response = plugin_pb2.CodeGeneratorResponse.FromString(output.read_bytes())
        assert [f.name for f in response.file] == ["foo_client.go", ""]

    def test_parameter_overrides_directory(self, request_file, tmp_path):
        output = tmp_path / "response.bin"
        argv = ["generate", "--request", str(request_file), "--output", str(output), "--parameter", "gen/foo"]
        assert main(argv) == 0
        response = plugin_pb2.CodeGeneratorResponse.FromString(output.read_bytes())
        assert response.file[0].name == "gen/foo/foo_client.go"

    def test_dry_run_lists_files(self, request_file, capsys):
        assert main(["-q", "generate", "--request", str(request_file), "--dry-run", "--parameter", "out"]) == 0
        assert capsys.readouterr().out == "out/foo_client.go\n"

    def test_config_file(self, request_file, tmp_path):
        config = tmp_path / "gogapic.yaml"
        config.write_text("package_name: cliapi\ncopyright_holder: CLI Corp\n", encoding="utf-8")
        output = tmp_path / "response.bin"
        argv = ["generate", "--request", str(request_file), "--output", str(output), "--config", str(config)]
        assert main(argv) == 0
        header = plugin_pb2.CodeGeneratorResponse.FromString(output.read_bytes()).file[0].content
        assert "package cliapi\n" in header
        assert "CLI Corp" in header

    def test_invalid_request_creates_no_output(self, tmp_path):
        bad = tmp_path / "bad.bin"
        bad.write_bytes(b"\x0a\x05abc")
        output = tmp_path / "response.bin"
        assert main(["generate", "--request", str(bad), "--output", str(output)]) == 1
        assert not output.exists()

    def test_missing_request_file(self, tmp_path):
        assert main(["generate", "--request", str(tmp_path / "missing.bin"), "--dry-run"]) == 1

    def test_invalid_config_file(self, request_file, tmp_path):
        config = tmp_path / "gogapic.toml"
        config.write_text("", encoding="utf-8")
        assert main(["generate", "--request", str(request_file), "--dry-run", "--config", str(config)]) == 1

    def test_verbose_sets_debug_level(self, request_file):
        assert main(["-v", "generate", "--request", str(request_file), "--dry-run"]) == 0
        assert logging.getLogger("gogapic.plugin").level == logging.DEBUG


def test_version_command(capsys):
    assert main(["version"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert [line.split(" ")[0] for line in lines] == ["protoc-gen-gogapic", "protobuf"]
    assert all(len(line.split(" ")) == 2 for line in lines)
