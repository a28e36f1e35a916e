"""Public API for gogapic.

A protoc plugin that generates Go API client wrappers from protobuf service
descriptors. This module re-exports the stable surface; import from here
when possible.
"""

from gogapic.codegen import (
    DescriptorIndex,
    GeneratedFile,
    ImportResolver,
    ImportSpec,
    Printer,
    ResponseAssembler,
    camel_to_snake,
    client_file_name,
    import_spec_for_package,
    lower_first,
    reduce_serv_name,
)
from gogapic.codegen.generators import ServiceOutput, generate_service, long_running_predicate
from gogapic.config import GeneratorConfig, RetrySettings
from gogapic.exceptions import GeneratorError
from gogapic.plugin import generate, run

__all__ = [
    # engine
    "DescriptorIndex",
    "ImportResolver",
    "ImportSpec",
    "Printer",
    "ResponseAssembler",
    "GeneratedFile",
    "ServiceOutput",
    "generate_service",
    "long_running_predicate",
    # naming
    "camel_to_snake",
    "client_file_name",
    "import_spec_for_package",
    "lower_first",
    "reduce_serv_name",
    # plugin
    "GeneratorConfig",
    "GeneratorError",
    "RetrySettings",
    "generate",
    "run",
]
