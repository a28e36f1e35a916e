import pytest
from google.protobuf.compiler import plugin_pb2

from gogapic.codegen.assembler import (
    DEFAULT_PACKAGE_NAME,
    ResponseAssembler,
    client_file_name,
    render_import_block,
    sort_imports,
)
from gogapic.codegen.generators.service import ServiceOutput
from gogapic.codegen.imports import ImportSpec


def _output(name: str, text: str = "// body\n", imports=()) -> ServiceOutput:
    return ServiceOutput(service_name=name, text=text, imports=frozenset(imports))


@pytest.mark.parametrize(
    ("service", "out_dir", "expected"),
    [
        ("FooServiceV2", "", "foo_client.go"),
        ("FooServiceV2", "out/foo", "out/foo/foo_client.go"),
        ("FooServiceV2", "out/foo/", "out/foo/foo_client.go"),
        ("ImageAnnotator", "vision", "vision/image_annotator_client.go"),
        ("LibraryService", "", "library_client.go"),
    ],
)
def test_client_file_name(service: str, out_dir: str, expected: str) -> None:
    assert client_file_name(service, out_dir) == expected


class TestImportBlock:
    def test_groups_are_sorted_and_separated(self) -> None:
        imports = {
            ImportSpec("google.golang.org/grpc"),
            ImportSpec("context"),
            ImportSpec("github.com/googleapis/gax-go/v2", "gax"),
            ImportSpec("runtime"),
        }
        assert render_import_block(imports) == (
            "import (\n"
            '\t"context"\n'
            '\t"runtime"\n'
            "\n"
            '\tgax "github.com/googleapis/gax-go/v2"\n'
            '\t"google.golang.org/grpc"\n'
            ")\n\n"
        )

    def test_no_blank_line_with_a_single_group(self) -> None:
        assert render_import_block({ImportSpec("time"), ImportSpec("context")}) == (
            'import (\n\t"context"\n\t"time"\n)\n\n'
        )
        assert render_import_block({ImportSpec("example.com/a", "apb")}) == (
            'import (\n\tapb "example.com/a"\n)\n\n'
        )

    def test_empty_import_set(self) -> None:
        assert render_import_block(set()) == "import (\n)\n\n"

    def test_custom_classifier(self) -> None:
        standard, others = sort_imports(
            [ImportSpec("b"), ImportSpec("a"), ImportSpec("c")],
            is_standard=lambda path: path != "b",
        )
        assert standard == [ImportSpec("a"), ImportSpec("c")]
        assert others == [ImportSpec("b")]


class TestHeader:
    def test_license_package_and_imports(self) -> None:
        assembler = ResponseAssembler("out/foo", year=2018, copyright_holder="Example Inc.")
        header = assembler.header({ImportSpec("context")})
        assert header.startswith("// Copyright 2018 Example Inc.\n//\n")
        assert "// AUTO-GENERATED CODE. DO NOT EDIT.\n\npackage foo\n\nimport (\n" in header
        assert header.endswith('\t"context"\n)\n\n')

    def test_year_defaults_to_current_year(self) -> None:
        from datetime import datetime

        assert ResponseAssembler().year == datetime.now().year

    @pytest.mark.parametrize(
        ("out_dir", "package_name", "expected"),
        [
            ("out/foo", None, "foo"),
            ("out/foo/", None, "foo"),
            ("", None, DEFAULT_PACKAGE_NAME),
            ("out/foo-bar", None, DEFAULT_PACKAGE_NAME),
            ("internal/type", None, DEFAULT_PACKAGE_NAME),
            ("gen/func/", None, DEFAULT_PACKAGE_NAME),
            ("gen/caf\u00e9", None, DEFAULT_PACKAGE_NAME),
            ("gen/types", None, "types"),
            ("out/foo", "custom", "custom"),
        ],
    )
    def test_package_name(self, out_dir: str, package_name: str | None, expected: str) -> None:
        assert ResponseAssembler(out_dir, package_name=package_name).package_name == expected


class TestResponse:
    def test_commit_appends_header_and_body(self) -> None:
        assembler = ResponseAssembler("out", year=2020)
        header, body = assembler.commit("FooServiceV2", _output("FooServiceV2", "func x() {}\n"))
        assert header.name == body.name == "out/foo_client.go"
        assert body.content == "func x() {}\n"
        assert assembler.files == [header, body]

    def test_only_headers_carry_names(self) -> None:
        assembler = ResponseAssembler(year=2020)
        assembler.commit("AService", _output("AService", "a\n"))
        assembler.commit("BService", _output("BService", "b\n"))
        response = assembler.to_response()
        assert [f.name for f in response.file] == ["a_client.go", "", "b_client.go", ""]
        assert [f.HasField("name") for f in response.file] == [True, False, True, False]
        assert response.file[1].content == "a\n"
        assert response.file[3].content == "b\n"

    def test_pairs_survive_colliding_file_names(self) -> None:
        assembler = ResponseAssembler(year=2020)
        assembler.commit("Foo", _output("Foo"))
        assembler.commit("FooService", _output("FooService"))
        names = [f.name for f in assembler.to_response().file]
        assert names == ["foo_client.go", "", "foo_client.go", ""]

    def test_supported_features(self) -> None:
        response = ResponseAssembler().to_response()
        assert response.supported_features == plugin_pb2.CodeGeneratorResponse.FEATURE_PROTO3_OPTIONAL
        assert len(response.file) == 0
        assert not response.HasField("error")
