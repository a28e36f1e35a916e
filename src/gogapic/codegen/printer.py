"""Indentation-aware text sink for generated Go source."""

from __future__ import annotations

from typing import Any

from gogapic.codegen.naming import tabs

__all__ = ["Printer"]


class Printer:
    """Accumulates the body of one generated file.

    Indentation follows curly braces: every leading ``}`` of a line dedents
    it and every trailing ``{`` indents the lines after it. Surrounding
    whitespace of a template is ignored, so callers can indent templates for
    readability.

    The brace counting is line-local and does not understand string
    literals. When it gets confused, set :attr:`level` or call
    :meth:`write` directly.
    """

    def __init__(self) -> None:
        self._parts: list[str] = []
        self.level = 0

    def emit(self, template: str, *args: Any) -> None:
        template = template.strip()
        if not template:
            self._parts.append("\n")
            return

        for ch in template:
            if ch != "}":
                break
            self.level -= 1

        line = template % args if args else template
        self._parts.append(tabs(self.level))
        self._parts.append(line)
        self._parts.append("\n")

        for ch in reversed(template):
            if ch != "{":
                break
            self.level += 1

    __call__ = emit

    def comment(self, text: str) -> None:
        """Write ``text`` as ``//`` line comments, one per line."""
        text = text.strip()
        if not text:
            return
        for line in text.split("\n"):
            line = line.strip()
            if line:
                self.emit("// %s", line)
            else:
                self.emit("//")

    def write(self, raw: str) -> None:
        self._parts.append(raw)

    def getvalue(self) -> str:
        return "".join(self._parts)

    def __str__(self) -> str:
        return self.getvalue()
