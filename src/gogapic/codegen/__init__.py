"""Code generation helpers."""

from __future__ import annotations

from gogapic.codegen.assembler import GeneratedFile, ResponseAssembler, client_file_name
from gogapic.codegen.imports import ImportResolver, ImportSpec, import_spec_for_package
from gogapic.codegen.index import DescriptorIndex
from gogapic.codegen.naming import camel_to_snake, lower_first, reduce_serv_name
from gogapic.codegen.printer import Printer

__all__ = [
    "DescriptorIndex",
    "GeneratedFile",
    "ImportResolver",
    "ImportSpec",
    "Printer",
    "ResponseAssembler",
    "camel_to_snake",
    "client_file_name",
    "import_spec_for_package",
    "lower_first",
    "reduce_serv_name",
]
