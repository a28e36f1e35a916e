"""Go client generation for a single protobuf service."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from google.protobuf import descriptor_pb2

from gogapic.codegen.imports import ImportResolver, ImportSpec
from gogapic.codegen.index import DescriptorIndex
from gogapic.codegen.naming import lower_first, reduce_serv_name, spaces
from gogapic.codegen.printer import Printer
from gogapic.config.models import RetrySettings

__all__ = [
    "DEFAULT_LRO_OUTPUT_TYPE",
    "LongRunningPredicate",
    "ServiceGenerator",
    "ServiceOutput",
    "generate_service",
    "long_running_predicate",
]

DEFAULT_LRO_OUTPUT_TYPE = ".google.longrunning.Operation"

LongRunningPredicate = Callable[[descriptor_pb2.MethodDescriptorProto], bool]

CONTEXT_IMPORT = ImportSpec("context")
GAX_IMPORT = ImportSpec("github.com/googleapis/gax-go/v2", "gax")
OPTION_IMPORT = ImportSpec("google.golang.org/api/option")
TRANSPORT_IMPORT = ImportSpec("google.golang.org/api/transport")
GRPC_IMPORT = ImportSpec("google.golang.org/grpc")
METADATA_IMPORT = ImportSpec("google.golang.org/grpc/metadata")
RUNTIME_IMPORT = ImportSpec("runtime")
CODES_IMPORT = ImportSpec("google.golang.org/grpc/codes")
TIME_IMPORT = ImportSpec("time")
LONGRUNNING_IMPORT = ImportSpec("cloud.google.com/go/longrunning")
LROAUTO_IMPORT = ImportSpec("cloud.google.com/go/longrunning/autogen", "lroauto")


def long_running_predicate(marker: str = DEFAULT_LRO_OUTPUT_TYPE) -> LongRunningPredicate:
    """Classify methods whose output type is ``marker`` as long-running."""

    def is_long_running(method: descriptor_pb2.MethodDescriptorProto) -> bool:
        return method.output_type == marker

    return is_long_running


@dataclass(frozen=True, slots=True)
class ServiceOutput:
    """Generated body text of one service and the imports it needs."""

    service_name: str
    text: str
    imports: frozenset[ImportSpec]
    long_running_methods: tuple[str, ...] = ()


class ServiceGenerator:
    """Emit the client for one service.

    A generator is used for exactly one service: the printer, import set
    and long-running method list start empty and are handed over in the
    returned :class:`ServiceOutput`.
    """

    def __init__(
        self,
        index: DescriptorIndex,
        file: descriptor_pb2.FileDescriptorProto,
        service: descriptor_pb2.ServiceDescriptorProto,
        *,
        is_long_running: LongRunningPredicate | None = None,
        retry: RetrySettings | None = None,
    ) -> None:
        self._index = index
        self._resolver = ImportResolver(index)
        self._file = file
        self._service = service
        self._service_key = index.service_key(file, service)
        self._is_long_running = is_long_running or long_running_predicate()
        self._retry = retry or RetrySettings()
        self._printer = Printer()
        self._imports: set[ImportSpec] = set()
        self._lro_methods: list[descriptor_pb2.MethodDescriptorProto] = []
        self._serv_name = reduce_serv_name(service.name)
        self._generated = False

    def generate(self) -> ServiceOutput:
        if self._generated:
            raise RuntimeError("ServiceGenerator instances generate a single service")
        self._generated = True

        has_lro = any(self._is_long_running(m) for m in self._service.method)
        self._client_init(has_lro)

        for method in self._service.method:
            self._method_doc(method)
            if self._is_long_running(method):
                self._lro_methods.append(method)
                self._lro_call(method)
            else:
                self._unary_call(method)

        self._lro_methods.sort(key=lambda m: m.name)
        for method in self._lro_methods:
            self._lro_type(method)

        return ServiceOutput(
            service_name=self._service.name,
            text=self._printer.getvalue(),
            imports=frozenset(self._imports),
            long_running_methods=tuple(m.name for m in self._lro_methods),
        )

    def _type_ref(self, type_name: str) -> tuple[ImportSpec, str]:
        spec = self._resolver.resolve(type_name)
        self._imports.add(spec)
        return spec, self._index.go_name(type_name)

    def _client_init(self, has_lro: bool) -> None:
        p = self._printer
        serv_name = self._serv_name
        methods = list(self._service.method)
        serv_spec = self._resolver.resolve(self._service_key)
        self._imports.update(
            {
                serv_spec,
                CONTEXT_IMPORT,
                GAX_IMPORT,
                OPTION_IMPORT,
                TRANSPORT_IMPORT,
                GRPC_IMPORT,
                METADATA_IMPORT,
                RUNTIME_IMPORT,
            }
        )

        p("// %sCallOptions contains the retry settings for each method of %sClient.", serv_name, serv_name)
        p("type %sCallOptions struct {", serv_name)
        width = max((len(m.name) for m in methods), default=0)
        for m in methods:
            p("%s%s []gax.CallOption", m.name, spaces(width - len(m.name)))
        p("}")
        p("")

        p("func default%sCallOptions() *%sCallOptions {", serv_name, serv_name)
        if self._retry.codes and methods:
            self._imports.update({CODES_IMPORT, TIME_IMPORT})
            self._retry_options()
            p("return &%sCallOptions{", serv_name)
            for m in methods:
                p("%s: retry,", m.name)
            p("}")
        else:
            p("return &%sCallOptions{}", serv_name)
        p("}")
        p("")

        p("// %sClient is a client for interacting with %s.", serv_name, self._service.name)
        p("type %sClient struct {", serv_name)
        p("// The connection to the service.")
        p("conn *grpc.ClientConn")
        p("")
        p("// The gRPC API client.")
        p("%sClient %s.%sClient", lower_first(serv_name), serv_spec.name, self._service.name)
        p("")
        if has_lro:
            self._imports.add(LROAUTO_IMPORT)
            p("// LROClient is used internally to handle longrunning operations.")
            p("// It is exposed so that its CallOptions can be modified if required.")
            p("// Users should not Close this client.")
            p("LROClient *lroauto.OperationsClient")
            p("")
        p("// The call options for this service.")
        p("CallOptions *%sCallOptions", serv_name)
        p("")
        p("// The metadata to be sent with each request.")
        p("xGoogMetadata metadata.MD")
        p("}")
        p("")

        p("// New%sClient creates a new %s client.", serv_name, self._service.name)
        doc = self._index.comment(self._service_key).strip()
        if doc:
            p("//")
            p.comment(doc)
        p("func New%sClient(ctx context.Context, opts ...option.ClientOption) (*%sClient, error) {", serv_name, serv_name)
        p("conn, err := transport.DialGRPC(ctx, opts...)")
        p("if err != nil {")
        p("return nil, err")
        p("}")
        p("c := &%sClient{", serv_name)
        p("conn: conn,")
        p("CallOptions: default%sCallOptions(),", serv_name)
        p("")
        p("%sClient: %s.New%sClient(conn),", lower_first(serv_name), serv_spec.name, self._service.name)
        p("}")
        if has_lro:
            p("c.LROClient, err = lroauto.NewOperationsClient(ctx, option.WithGRPCConn(conn))")
            p("if err != nil {")
            p("// Reusing conn never dials, so this is not expected to fail.")
            p("// conn is not closed here: it may have been supplied through option.WithGRPCConn.")
            p("return nil, err")
            p("}")
        p("c.setClientInfo()")
        p("return c, nil")
        p("}")
        p("")

        p("// Connection returns the client's connection to the API service.")
        p("func (c *%sClient) Connection() *grpc.ClientConn {", serv_name)
        p("return c.conn")
        p("}")
        p("")

        p("// Close closes the connection to the API service. The user should invoke this when")
        p("// the client is no longer required.")
        p("func (c *%sClient) Close() error {", serv_name)
        p("return c.conn.Close()")
        p("}")
        p("")

        p("// setClientInfo sets the name and version of the application in")
        p("// the `x-goog-api-client` header passed on each request.")
        p("func (c *%sClient) setClientInfo(keyval ...string) {", serv_name)
        p('kv := append([]string{"gl-go", runtime.Version()}, keyval...)')
        p('kv = append(kv, "gax", gax.Version, "grpc", grpc.Version)')
        p('c.xGoogMetadata = metadata.Pairs("x-goog-api-client", gax.XGoogHeader(kv...))')
        p("}")
        p("")

    def _retry_options(self) -> None:
        p = self._printer
        retry = self._retry
        p("retry := []gax.CallOption{")
        p("gax.WithRetry(func() gax.Retryer {")
        p("return gax.OnCodes([]codes.Code{")
        for code in retry.codes:
            p("codes.%s,", code)
        p("}, gax.Backoff{")
        p("Initial: %d * time.Millisecond,", retry.initial_backoff_ms)
        p("Max: %d * time.Millisecond,", retry.max_backoff_ms)
        p("Multiplier: %r,", retry.multiplier)
        p("})")
        p("}),")
        p("}")

    def _method_doc(self, method: descriptor_pb2.MethodDescriptorProto) -> None:
        doc = self._index.comment(self._index.method_key(self._service_key, method)).strip()
        # Without a comment, a line holding only the method name is noise.
        if not doc:
            return
        self._printer.comment(f"{method.name} {lower_first(doc)}")

    def _invoke(self, method: descriptor_pb2.MethodDescriptorProto, resp_type: str) -> None:
        p = self._printer
        call_opts = f"c.CallOptions.{method.name}"
        p("ctx = insertMetadata(ctx, c.xGoogMetadata)")
        # Cap the slice so appending never writes into the shared defaults.
        p("opts = append(%s[0:len(%s):len(%s)], opts...)", call_opts, call_opts, call_opts)
        p("var resp *%s", resp_type)
        p("err := gax.Invoke(ctx, func(ctx context.Context, settings gax.CallSettings) error {")
        p("var err error")
        p("resp, err = c.%sClient.%s(ctx, req, settings.GRPC...)", lower_first(self._serv_name), method.name)
        p("return err")
        p("}, opts...)")
        p("if err != nil {")
        p("return nil, err")
        p("}")

    def _unary_call(self, method: descriptor_pb2.MethodDescriptorProto) -> None:
        p = self._printer
        in_spec, in_name = self._type_ref(method.input_type)
        out_spec, out_name = self._type_ref(method.output_type)

        p(
            "func (c *%sClient) %s(ctx context.Context, req *%s.%s, opts ...gax.CallOption) (*%s.%s, error) {",
            self._serv_name, method.name, in_spec.name, in_name, out_spec.name, out_name,
        )
        self._invoke(method, f"{out_spec.name}.{out_name}")
        p("return resp, nil")
        p("}")
        p("")

    def _lro_call(self, method: descriptor_pb2.MethodDescriptorProto) -> None:
        p = self._printer
        in_spec, in_name = self._type_ref(method.input_type)
        out_spec, out_name = self._type_ref(method.output_type)
        self._imports.add(LONGRUNNING_IMPORT)

        p(
            "func (c *%sClient) %s(ctx context.Context, req *%s.%s, opts ...gax.CallOption) (*%sOperation, error) {",
            self._serv_name, method.name, in_spec.name, in_name, method.name,
        )
        self._invoke(method, f"{out_spec.name}.{out_name}")
        p("return &%sOperation{", method.name)
        p("lro: longrunning.InternalNewOperation(c.LROClient, resp),")
        p("}, nil")
        p("}")
        p("")

    def _lro_type(self, method: descriptor_pb2.MethodDescriptorProto) -> None:
        p = self._printer
        name = method.name
        op_spec, op_name = self._type_ref(method.output_type)
        self._imports.update({LONGRUNNING_IMPORT, TIME_IMPORT})

        p("// %sOperation manages a long-running operation from %s.", name, name)
        p("type %sOperation struct {", name)
        p("lro *longrunning.Operation")
        p("}")
        p("")

        p("// %sOperation returns a new %sOperation from a given name.", name, name)
        p("// The name must be that of a previously created %sOperation, possibly from a different process.", name)
        p("func (c *%sClient) %sOperation(name string) *%sOperation {", self._serv_name, name, name)
        p("return &%sOperation{", name)
        p("lro: longrunning.InternalNewOperation(c.LROClient, &%s.%s{Name: name}),", op_spec.name, op_name)
        p("}")
        p("}")
        p("")

        p("// Wait blocks until the long-running operation is completed, returning any error encountered.")
        p("func (op *%sOperation) Wait(ctx context.Context, opts ...gax.CallOption) error {", name)
        p("return op.lro.WaitWithInterval(ctx, nil, time.Minute, opts...)")
        p("}")
        p("")

        p("// Poll fetches the latest state of the long-running operation.")
        p("//")
        p("// If Poll fails, the error is returned and op is unmodified.")
        p("// If Poll succeeds and the operation has completed with failure,")
        p("// the error is returned and op.Done will return true.")
        p("func (op *%sOperation) Poll(ctx context.Context, opts ...gax.CallOption) error {", name)
        p("return op.lro.Poll(ctx, nil, opts...)")
        p("}")
        p("")

        p("// Done reports whether the long-running operation has completed.")
        p("func (op *%sOperation) Done() bool {", name)
        p("return op.lro.Done()")
        p("}")
        p("")

        p("// Name returns the name of the long-running operation.")
        p("// The name is assigned by the server and is unique within the service from which the operation is created.")
        p("func (op *%sOperation) Name() string {", name)
        p("return op.lro.Name()")
        p("}")
        p("")


def generate_service(
    index: DescriptorIndex,
    file: descriptor_pb2.FileDescriptorProto,
    service: descriptor_pb2.ServiceDescriptorProto,
    *,
    is_long_running: LongRunningPredicate | None = None,
    retry: RetrySettings | None = None,
) -> ServiceOutput:
    """Generate the client body of ``service`` declared in ``file``."""
    generator = ServiceGenerator(
        index,
        file,
        service,
        is_long_running=is_long_running,
        retry=retry,
    )
    return generator.generate()
