"""Exception types raised while parsing inputs and evaluating queries."""


class IfadError(Exception):
    """Base exception for all pipeline errors."""


class ParseError(IfadError):
    """An input line could not be turned into a record.

    Attributes:
        line_number: 1-based line number of the offending line
        line: The offending line, without its line terminator
        source: Name of the file being parsed, if known
    """

    def __init__(self, message: str, line_number: int = 0, line: str = "", source: str = ""):
        super().__init__(message)
        self.message = message
        self.line_number = line_number
        self.line = line
        self.source = source

    def __str__(self):
        location = f" in {self.source}" if self.source else ""
        if self.line_number:
            text = f"Parse error{location} at line {self.line_number}: {self.message}"
            if self.line:
                text += f" (line: {self.line!r})"
            return text
        return f"Parse error{location}: {self.message}"


class MalformedRecordError(ParseError):
    """Line does not match the expected record layout."""


class UnknownAspectError(ParseError):
    """Aspect column holds a code outside the recognized set."""


class DuplicateGeneError(ParseError):
    """Same gene ID appears twice in a gene list."""

    def __init__(
        self,
        gene_id: str,
        line_number: int,
        first_line_number: int,
        line: str = "",
        source: str = "",
    ):
        super().__init__(
            f"duplicate gene ID {gene_id!r} (first seen at line {first_line_number})",
            line_number=line_number,
            line=line,
            source=source,
        )
        self.gene_id = gene_id
        self.first_line_number = first_line_number


class EmptyQueryError(IfadError):
    """Query was submitted without any segments."""


class InvalidSegmentError(IfadError, ValueError):
    """Segment text is not a valid ASPECT,STATUS pair."""
