from __future__ import annotations


class ParseError(ValueError):
    """Base class for every failure to turn one event document into a record."""


class MalformedDocument(ParseError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"Malformed event document: {reason}")
        self.reason = reason


class MissingSection(ParseError):
    def __init__(self, name: str) -> None:
        super().__init__(f"No {name} node")
        self.name = name


class MissingField(ParseError):
    def __init__(self, name: str, message: str | None = None) -> None:
        super().__init__(message or f"No {name}")
        self.name = name


class MissingAttribute(ParseError):
    def __init__(self, name: str, element: str | None = None) -> None:
        where = f"{element} has no" if element else "Missing"
        super().__init__(f"{where} {name} attribute")
        self.name = name
        self.element = element


class InvalidEventId(MissingField):
    """EventID text that is not a positive unsigned 8-bit numeral.

    It is also a ``MissingField("EventID")`` so that callers which only care
    whether an identity was obtained can catch the broader class.
    """

    reason = "Invalid EventID"

    def __init__(self, text: object) -> None:
        super().__init__("EventID", f"{self.reason}: {text!r}")
        self.text = text


class NotANumber(InvalidEventId):
    reason = "EventID is not an unsigned 8-bit number"


class ZeroNotAllowed(InvalidEventId):
    reason = "EventID must not be zero"


class InvalidTimestamp(MissingField):
    def __init__(self, text: object) -> None:
        super().__init__("TimeCreated", f"Invalid TimeCreated SystemTime: {text!r}")
        self.text = text
