"""Lookup tables over the file descriptors of one generator run."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from google.protobuf import descriptor_pb2

from gogapic.exceptions import (
    IndexAlreadyBuiltError,
    MissingDescriptorsError,
    UnresolvedTypeError,
)

__all__ = [
    "METHOD_FIELD_NUMBER",
    "SERVICE_FIELD_NUMBER",
    "DescriptorIndex",
    "package_prefix",
]

# Field tags used by SourceCodeInfo.Location paths.
SERVICE_FIELD_NUMBER = descriptor_pb2.FileDescriptorProto.SERVICE_FIELD_NUMBER  # 6
METHOD_FIELD_NUMBER = descriptor_pb2.ServiceDescriptorProto.METHOD_FIELD_NUMBER  # 2

FileDescriptor = descriptor_pb2.FileDescriptorProto
MessageDescriptor = descriptor_pb2.DescriptorProto
ServiceDescriptor = descriptor_pb2.ServiceDescriptorProto
MethodDescriptor = descriptor_pb2.MethodDescriptorProto


def package_prefix(file: FileDescriptor) -> str:
    """Return the fully-qualified prefix of names declared in ``file``."""
    # A leading dot marks a name as fully-qualified.
    return f".{file.package}" if file.package else ""


class DescriptorIndex:
    """Type, owner and comment tables for every file in a request.

    Protobuf messages are not hashable, so every table is keyed by the
    fully-qualified name of the element: ``.pkg.Message``, ``.pkg.Service``
    or ``.pkg.Service.Method``. Tables are filled once by :meth:`build` and
    only read afterwards.
    """

    def __init__(self) -> None:
        self._built = False
        self._types: dict[str, MessageDescriptor] = {}
        self._go_names: dict[str, str] = {}
        self._owners: dict[str, FileDescriptor] = {}
        self._comments: dict[str, str] = {}

    @classmethod
    def from_files(cls, files: Sequence[FileDescriptor]) -> DescriptorIndex:
        index = cls()
        index.build(files)
        return index

    def build(self, files: Sequence[FileDescriptor] | None) -> None:
        if self._built:
            raise IndexAlreadyBuiltError()
        if files is None:
            raise MissingDescriptorsError()
        self._built = True

        for file in files:
            prefix = package_prefix(file)
            self._index_messages(file, prefix, "", file.message_type)
            for service in file.service:
                self._owners[self.service_key(file, service)] = file
            self._index_comments(file)

    def _index_messages(
        self,
        file: FileDescriptor,
        prefix: str,
        go_prefix: str,
        messages: Iterable[MessageDescriptor],
    ) -> None:
        for message in messages:
            key = f"{prefix}.{message.name}"
            go_name = f"{go_prefix}{message.name}"
            self._types[key] = message
            self._go_names[key] = go_name
            self._owners[key] = file
            self._index_messages(file, key, f"{go_name}_", message.nested_type)

    def _index_comments(self, file: FileDescriptor) -> None:
        # A path alternates field tag and element index: [6, i] is the
        # i-th service of the file, [6, i, 2, j] the j-th method of it.
        for location in file.source_code_info.location:
            path = location.path
            if len(path) == 2 and path[0] == SERVICE_FIELD_NUMBER:
                service = file.service[path[1]]
                self._comments[self.service_key(file, service)] = location.leading_comments
            elif (
                len(path) == 4
                and path[0] == SERVICE_FIELD_NUMBER
                and path[2] == METHOD_FIELD_NUMBER
            ):
                service = file.service[path[1]]
                method = service.method[path[3]]
                key = self.method_key(self.service_key(file, service), method)
                self._comments[key] = location.leading_comments

    @staticmethod
    def service_key(file: FileDescriptor, service: ServiceDescriptor) -> str:
        return f"{package_prefix(file)}.{service.name}"

    @staticmethod
    def method_key(service_key: str, method: MethodDescriptor) -> str:
        return f"{service_key}.{method.name}"

    @property
    def built(self) -> bool:
        return self._built

    def message(self, type_name: str) -> MessageDescriptor:
        try:
            return self._types[type_name]
        except KeyError as exc:
            raise UnresolvedTypeError(
                message=f"Unresolved type {type_name!r}",
                data={"type_name": type_name},
                cause=exc,
            ) from exc

    def has_message(self, type_name: str) -> bool:
        return type_name in self._types

    def go_name(self, type_name: str) -> str:
        self.message(type_name)
        return self._go_names[type_name]

    def owner(self, key: str) -> FileDescriptor:
        try:
            return self._owners[key]
        except KeyError as exc:
            raise UnresolvedTypeError(
                message=f"No file owns {key!r}",
                data={"key": key},
                cause=exc,
            ) from exc

    def comment(self, key: str) -> str:
        return self._comments.get(key, "")

    def __len__(self) -> int:
        return len(self._types)
