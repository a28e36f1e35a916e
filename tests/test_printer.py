import pytest

from gogapic.codegen.printer import Printer


class TestPrinterIndentation:
    def test_block_is_indented_and_closed_at_outer_level(self) -> None:
        p = Printer()
        p.emit("func f() {")
        p.emit("return 1")
        p.emit("}")
        assert p.getvalue() == "func f() {\n\treturn 1\n}\n"
        assert p.level == 0

    def test_surrounding_whitespace_is_ignored(self) -> None:
        p = Printer()
        p.emit("if x {")
        p.emit("    y()   ")
        p.emit("  }")
        assert p.getvalue() == "if x {\n\ty()\n}\n"

    def test_empty_template_writes_bare_newline(self) -> None:
        p = Printer()
        p.emit("type T struct {")
        p.emit("")
        p.emit("   ")
        assert p.getvalue() == "type T struct {\n\n\n"
        assert p.level == 1

    def test_close_then_open_on_one_line(self) -> None:
        p = Printer()
        p.emit("if a {")
        p.emit("x()")
        p.emit("} else {")
        p.emit("y()")
        p.emit("}")
        assert p.getvalue() == "if a {\n\tx()\n} else {\n\ty()\n}\n"

    def test_multiple_leading_and_trailing_braces(self) -> None:
        p = Printer()
        p.emit("a := []T{{")
        assert p.level == 2
        p.emit("v,")
        p.emit("}}")
        assert p.level == 0
        assert p.getvalue() == "a := []T{{\n\t\tv,\n}}\n"

    def test_braces_inside_line_do_not_change_level(self) -> None:
        p = Printer()
        p.emit('kv := append([]string{"a", "b"}, rest...)')
        assert p.level == 0

    def test_deep_nesting_beyond_tab_cache(self) -> None:
        p = Printer()
        for _ in range(25):
            p.emit("{")
        p.emit("x")
        assert p.getvalue().splitlines()[-1] == "\t" * 25 + "x"

    @pytest.mark.parametrize(
        "lines",
        [
            ["a {", "b {", "c", "}", "}"],
            ["a {", "}, b {", "c", "}"],
            ["x", "y {", "z {", "}", "w", "}"],
        ],
    )
    def test_balanced_sequences_return_to_start(self, lines: list[str]) -> None:
        p = Printer()
        p.level = 3
        for line in lines:
            p.emit(line)
        assert p.level == 3

    def test_net_change_equals_opens_minus_closes(self) -> None:
        lines = ["a {{", "}", "b {", "}}}", "c {"]
        p = Printer()
        for line in lines:
            p.emit(line)
        opens = sum(len(line) - len(line.rstrip("{")) for line in lines)
        closes = sum(len(line) - len(line.lstrip("}")) for line in lines)
        assert p.level == opens - closes

    def test_level_below_zero_writes_no_padding(self) -> None:
        p = Printer()
        p.emit("}")
        p.emit("x")
        assert p.level == -1
        assert p.getvalue() == "}\nx\n"


class TestPrinterFormatting:
    def test_arguments_are_percent_formatted(self) -> None:
        p = Printer()
        p.emit("func (c *%sClient) %s() {", "Foo", "Get")
        assert p.getvalue() == "func (c *FooClient) Get() {\n"
        assert p.level == 1

    def test_template_without_arguments_is_verbatim(self) -> None:
        p = Printer()
        p.emit("x := 100% done")
        assert p.getvalue() == "x := 100% done\n"

    def test_brace_counting_uses_template_not_arguments(self) -> None:
        p = Printer()
        p.emit("// %s", "opens {")
        assert p.level == 0

    def test_call_is_emit(self) -> None:
        p = Printer()
        p("a {")
        p("b")
        assert p.getvalue() == "a {\n\tb\n"

    def test_write_bypasses_indentation(self) -> None:
        p = Printer()
        p.emit("a {")
        p.write("raw\n")
        assert p.getvalue() == "a {\nraw\n"
        assert str(p) == p.getvalue()


class TestPrinterComment:
    def test_multi_line_comment(self) -> None:
        p = Printer()
        p.emit("x {")
        p.comment("  First line.\n   Second line.\n")
        assert p.getvalue() == "x {\n\t// First line.\n\t// Second line.\n"

    def test_blank_comment_lines_have_no_trailing_space(self) -> None:
        p = Printer()
        p.comment("Para one.\n\nPara two.")
        assert p.getvalue() == "// Para one.\n//\n// Para two.\n"

    def test_empty_comment_writes_nothing(self) -> None:
        p = Printer()
        p.comment(" \n ")
        assert p.getvalue() == ""
