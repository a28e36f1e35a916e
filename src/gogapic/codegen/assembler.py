"""Packaging of generated services into CodeGeneratorResponse files."""

from __future__ import annotations

import posixpath
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime

from google.protobuf.compiler import plugin_pb2

from gogapic.codegen.generators.service import ServiceOutput
from gogapic.codegen.imports import ImportSpec, is_standard_library_path
from gogapic.codegen.naming import camel_to_snake, is_go_package_name, reduce_serv_name

__all__ = [
    "DEFAULT_PACKAGE_NAME",
    "LICENSE_TEMPLATE",
    "GeneratedFile",
    "ResponseAssembler",
    "client_file_name",
    "render_import_block",
    "sort_imports",
]

DEFAULT_PACKAGE_NAME = "client"

LICENSE_TEMPLATE = """\
// Copyright %(year)d %(holder)s
//
// Licensed under the Apache License, Version 2.0 (the "License");
// you may not use this file except in compliance with the License.
// You may obtain a copy of the License at
//
//     https://www.apache.org/licenses/LICENSE-2.0
//
// Unless required by applicable law or agreed to in writing, software
// distributed under the License is distributed on an "AS IS" BASIS,
// WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
// See the License for the specific language governing permissions and
// limitations under the License.

// AUTO-GENERATED CODE. DO NOT EDIT.

"""


@dataclass(frozen=True, slots=True)
class GeneratedFile:
    name: str
    content: str


def client_file_name(service_name: str, out_dir: str = "") -> str:
    """Return ``<out_dir>/<snake_case(reduced name)>_client.go``."""
    return posixpath.join(out_dir, camel_to_snake(reduce_serv_name(service_name)) + "_client.go")


def sort_imports(
    imports: Iterable[ImportSpec],
    is_standard: Callable[[str], bool] = is_standard_library_path,
) -> tuple[list[ImportSpec], list[ImportSpec]]:
    """Split imports into sorted (standard, third-party) groups."""
    standard: list[ImportSpec] = []
    others: list[ImportSpec] = []
    for spec in sorted(imports):
        (standard if is_standard(spec.path) else others).append(spec)
    return standard, others


def render_import_block(
    imports: Iterable[ImportSpec],
    is_standard: Callable[[str], bool] = is_standard_library_path,
) -> str:
    standard, others = sort_imports(imports, is_standard)
    lines = ["import ("]
    lines.extend(f"\t{spec.render()}" for spec in standard)
    if standard and others:
        lines.append("")
    lines.extend(f"\t{spec.render()}" for spec in others)
    lines.append(")")
    return "\n".join(lines) + "\n\n"


class ResponseAssembler:
    """Collects the header/body file pairs of every generated service.

    Args:
        out_dir: Directory prefix for file names (the plugin parameter).
        package_name: Go package clause; defaults to the last segment of
            ``out_dir``, or ``client`` when that is empty.
        copyright_holder: Name placed in the license banner.
        year: Banner year; defaults to the current year.
        is_standard: Classifier splitting imports into the standard group.
    """

    def __init__(
        self,
        out_dir: str = "",
        *,
        package_name: str | None = None,
        copyright_holder: str = "Google LLC",
        year: int | None = None,
        is_standard: Callable[[str], bool] = is_standard_library_path,
    ) -> None:
        self.out_dir = out_dir
        self.package_name = package_name or _package_from_dir(out_dir)
        self.copyright_holder = copyright_holder
        self.year = year if year is not None else datetime.now().year
        self._is_standard = is_standard
        self.files: list[GeneratedFile] = []

    def header(self, imports: Iterable[ImportSpec]) -> str:
        parts = [
            LICENSE_TEMPLATE % {"year": self.year, "holder": self.copyright_holder},
            f"package {self.package_name}\n\n",
            render_import_block(imports, self._is_standard),
        ]
        return "".join(parts)

    def commit(self, service_name: str, output: ServiceOutput) -> tuple[GeneratedFile, GeneratedFile]:
        file_name = client_file_name(service_name, self.out_dir)
        header = GeneratedFile(name=file_name, content=self.header(output.imports))
        body = GeneratedFile(name=file_name, content=output.text)
        self.files.append(header)
        self.files.append(body)
        return header, body

    def to_response(self) -> plugin_pb2.CodeGeneratorResponse:
        """Build the response; each body continues the file its header opened."""
        response = plugin_pb2.CodeGeneratorResponse()
        response.supported_features = plugin_pb2.CodeGeneratorResponse.FEATURE_PROTO3_OPTIONAL
        for position, generated in enumerate(self.files):
            entry = response.file.add()
            # Files come in header/body pairs; protoc appends a nameless
            # file to the one before it.
            if position % 2 == 0:
                entry.name = generated.name
            entry.content = generated.content
        return response


def _package_from_dir(out_dir: str) -> str:
    segment = posixpath.basename(out_dir.rstrip("/"))
    if is_go_package_name(segment):
        return segment
    return DEFAULT_PACKAGE_NAME
