"""
a lossless editor for INI style files such as ~/.aws/config.

every line is kept verbatim (comments, blank lines, spacing, nested
values) so that rendering an unmodified document reproduces it exactly.
only the key lines that are explicitly set get rewritten.
"""
import re
from enum import Enum, auto
from pathlib import Path
from typing import Dict, List, NamedTuple, Optional

from ..domain.errors import ParseError


class LineType(Enum):
    BLANK = auto()
    COMMENT = auto()
    SECTION = auto()
    KEY = auto()
    CONTINUATION = auto()


class Line(NamedTuple):
    type: LineType
    text: str  # raw text including its line ending
    name: Optional[str] = None  # section name or key


SECTION_RE = re.compile(r"^\s*\[([^\]]*)\]\s*(?:[#;].*)?$")
KEY_RE = re.compile(r"^([^=:\s\[][^=:]*?)\s*[=:]\s*(.*)$")
COMMENT_PREFIXES = ("#", ";")


class Section:
    def __init__(self, name: str, lines: List[Line]):
        self.name = name
        self.lines = lines  # header first

    def key_index(self, key: str) -> Optional[int]:
        for i, line in enumerate(self.lines):
            if line.type == LineType.KEY and line.name == key:
                return i
        return None

    def value_end(self, index: int) -> int:
        """index just past a key line and its continuation lines, including comments between them."""
        end = index + 1
        for i in range(index + 1, len(self.lines)):
            line_type = self.lines[i].type
            if line_type == LineType.CONTINUATION:
                end = i + 1
            elif line_type not in (LineType.BLANK, LineType.COMMENT):
                break
        return end

    def in_value(self) -> bool:
        """whether an indented line here would continue the last key's value."""
        for line in reversed(self.lines):
            if line.type in (LineType.BLANK, LineType.COMMENT):
                continue
            return line.type in (LineType.KEY, LineType.CONTINUATION)
        return False

    def insert_index(self) -> int:
        last = 0
        for i, line in enumerate(self.lines):
            if line.type in (LineType.KEY, LineType.CONTINUATION):
                last = i
        return last + 1


class IniDocument:
    """parsed INI text that can be edited and rendered back byte for byte."""

    def __init__(self, preamble: List[Line], sections: List[Section], newline: str = "\n"):
        self.preamble = preamble
        self.sections = sections
        self.newline = newline

    @classmethod
    def parse(cls, text: str, path: Optional[Path] = None) -> "IniDocument":
        """
        parse INI text.

        raises:
            ParseError: on keys outside a section or lines that are not
                a header, key, comment, blank or continuation line
        """
        raw_lines = text.splitlines(keepends=True)
        newline = "\r\n" if raw_lines and raw_lines[0].endswith("\r\n") else "\n"

        preamble: List[Line] = []
        sections: List[Section] = []
        current: Optional[Section] = None

        for number, raw in enumerate(raw_lines, start=1):
            content = raw.rstrip("\r\n")
            stripped = content.strip()

            if not stripped:
                line = Line(LineType.BLANK, raw)
            elif stripped.startswith(COMMENT_PREFIXES):
                line = Line(LineType.COMMENT, raw)
            elif content[0].isspace() and current is not None and current.in_value():
                line = Line(LineType.CONTINUATION, raw)
            elif stripped.startswith("["):
                match = SECTION_RE.match(content)
                if not match or not match.group(1).strip():
                    raise ParseError(f"Malformed section header {stripped!r}", path, number)
                current = Section(match.group(1).strip(), [Line(LineType.SECTION, raw, match.group(1).strip())])
                sections.append(current)
                continue
            else:
                match = KEY_RE.match(stripped)
                if not match:
                    raise ParseError(f"Expected 'key = value', got {stripped!r}", path, number)
                if current is None:
                    raise ParseError(f"Key {match.group(1)!r} appears before any section", path, number)
                line = Line(LineType.KEY, raw, match.group(1))

            if current is None:
                preamble.append(line)
            else:
                current.lines.append(line)

        return cls(preamble, sections, newline)

    def render(self) -> str:
        parts = [line.text for line in self.preamble]
        for section in self.sections:
            parts.extend(line.text for line in section.lines)
        return "".join(parts)

    def section_names(self) -> List[str]:
        return [s.name for s in self.sections]

    def has_section(self, name: str) -> bool:
        return any(s.name == name for s in self.sections)

    def get(self, section: str, key: str) -> Optional[str]:
        """value of key in section, or None. continuation lines are joined with newlines."""
        for s in self._matching(section):
            index = s.key_index(key)
            if index is None:
                continue
            first = KEY_RE.match(s.lines[index].text.strip())
            values = [first.group(2).strip()]
            values.extend(
                line.text.strip()
                for line in s.lines[index + 1:s.value_end(index)]
                if line.type == LineType.CONTINUATION
            )
            return "\n".join(values)
        return None

    def items(self, section: str) -> Dict[str, str]:
        result: Dict[str, str] = {}
        for s in self._matching(section):
            for line in s.lines:
                if line.type == LineType.KEY and line.name not in result:
                    result[line.name] = self.get(section, line.name)
        return result

    def set(self, section: str, key: str, value: str) -> None:
        """set key in section, creating the section at the end of the document if needed."""
        if "\n" in value or "\r" in value:
            raise ValueError(f"value for {key!r} must be a single line")

        new_line = Line(LineType.KEY, f"{key} = {value}{self.newline}", key)

        for s in self._matching(section):
            index = s.key_index(key)
            if index is not None:
                s.lines[index:s.value_end(index)] = [new_line]
                return

        matching = self._matching(section)
        if matching:
            target = matching[0]
            position = target.insert_index()
            self._terminate_before(target, position)
            target.lines.insert(position, new_line)
            return

        self._terminate_last()
        if self.render() and not self._ends_with_blank():
            self._last_lines().append(Line(LineType.BLANK, self.newline))
        header = Line(LineType.SECTION, f"[{section}]{self.newline}", section)
        self.sections.append(Section(section, [header, new_line]))

    def _matching(self, name: str) -> List[Section]:
        return [s for s in self.sections if s.name == name]

    def _last_lines(self) -> List[Line]:
        return self.sections[-1].lines if self.sections else self.preamble

    def _ends_with_blank(self) -> bool:
        lines = self._last_lines()
        return bool(lines) and lines[-1].type == LineType.BLANK

    def _terminate_before(self, section: Section, position: int) -> None:
        # a final line without a line ending would swallow the inserted line
        previous = section.lines[position - 1]
        if not previous.text.endswith(("\n", "\r")):
            section.lines[position - 1] = previous._replace(text=previous.text + self.newline)

    def _terminate_last(self) -> None:
        lines = self._last_lines()
        if lines and not lines[-1].text.endswith(("\n", "\r")):
            lines[-1] = lines[-1]._replace(text=lines[-1].text + self.newline)


def set_section_key(document: str, section: str, key: str, value: str, path: Optional[Path] = None) -> str:
    """return document with key set to value inside section."""
    doc = IniDocument.parse(document, path)
    doc.set(section, key, value)
    return doc.render()
