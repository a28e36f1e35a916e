"""Go import path and alias inference for generated client files."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass

from gogapic.codegen.index import DescriptorIndex
from gogapic.exceptions import MissingGoPackageError

__all__ = [
    "ImportResolver",
    "ImportSpec",
    "import_spec_for_package",
    "is_standard_library_path",
]

_VERSION_SEGMENT = re.compile(r"v[0-9]")
_ALIAS_SUFFIX = "pb"


@dataclass(frozen=True, slots=True, order=True)
class ImportSpec:
    path: str
    name: str = ""

    @property
    def default_name(self) -> str:
        """The name Go assigns to the package when no alias is given."""
        return self.path.rsplit("/", 1)[-1]

    def needs_alias(self) -> bool:
        return bool(self.name) and self.name != self.default_name

    def quoted_path(self) -> str:
        # JSON string escaping is a valid Go interpreted string literal.
        return json.dumps(self.path, ensure_ascii=False)

    def render(self) -> str:
        if self.needs_alias():
            return f"{self.name} {self.quoted_path()}"
        return self.quoted_path()


def import_spec_for_package(go_package: str) -> ImportSpec:
    """Infer the import of a generated protobuf package from its go_package.

    ``path;name`` is an explicit override. Otherwise the alias comes from the
    last path segment that is not a version component, so
    ``example.com/foo/v2`` is imported as ``foopb``.
    """
    if ";" in go_package:
        path, _, name = go_package.partition(";")
        if not name.endswith(_ALIAS_SUFFIX):
            name += _ALIAS_SUFFIX
        return ImportSpec(path=path, name=name)

    pkg = go_package
    while True:
        pos = pkg.rfind("/")
        if pos < 0:
            return ImportSpec(path=pkg, name=pkg + _ALIAS_SUFFIX)
        segment = pkg[pos + 1:]
        if _VERSION_SEGMENT.match(segment):
            pkg = pkg[:pos]
            continue
        return ImportSpec(path=pkg, name=segment + _ALIAS_SUFFIX)


def is_standard_library_path(path: str) -> bool:
    # Go standard library paths have no domain in their first element.
    return "." not in path.split("/", 1)[0]


class ImportResolver:
    """Resolve the import of the file that owns a message or service."""

    def __init__(self, index: DescriptorIndex) -> None:
        self._index = index

    def resolve(self, key: str) -> ImportSpec:
        file = self._index.owner(key)
        if not file.options.HasField("go_package"):
            raise MissingGoPackageError(
                message=f"{file.name} declares no go_package option",
                data={"file": file.name, "key": key},
            )
        return import_spec_for_package(file.options.go_package)

    def package_name(self, key: str) -> str:
        return self.resolve(key).name
