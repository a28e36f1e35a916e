"""Code generation modules for gogapic."""

from __future__ import annotations

from gogapic.codegen.generators.service import (
    DEFAULT_LRO_OUTPUT_TYPE,
    LongRunningPredicate,
    ServiceGenerator,
    ServiceOutput,
    generate_service,
    long_running_predicate,
)

__all__ = [
    "DEFAULT_LRO_OUTPUT_TYPE",
    "LongRunningPredicate",
    "ServiceGenerator",
    "ServiceOutput",
    "generate_service",
    "long_running_predicate",
]
