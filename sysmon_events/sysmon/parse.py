from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple, Union

from lxml import etree

from sysmon_events.errors import (
    InvalidEventId,
    InvalidTimestamp,
    MalformedDocument,
    MissingAttribute,
    MissingField,
    MissingSection,
)
from sysmon_events.sysmon.event_id import SysmonEventId
from sysmon_events.utils.timeutil import parse_rfc3339, to_rfc3339

# Strict: no recovery, internal entities only, no network fetches.
_PARSER_OPTIONS = dict(
    recover=False,
    resolve_entities="internal",
    no_network=True,
    load_dtd=False,
    huge_tree=False,
)


class EventFields(dict):
    """Read-only field mapping. Pickles, copies and compares as a plain dict."""

    def _readonly(self, *args: Any, **kwargs: Any) -> None:
        raise TypeError("EventFields is read-only")

    __setitem__ = _readonly
    __delitem__ = _readonly
    __ior__ = _readonly
    clear = _readonly
    pop = _readonly
    popitem = _readonly
    setdefault = _readonly
    update = _readonly

    def __reduce__(self) -> Tuple[Any, ...]:
        return (type(self), (dict(self),))

    def __copy__(self) -> "EventFields":
        return self

    def __deepcopy__(self, memo: Dict[int, Any]) -> "EventFields":
        return self

    def __repr__(self) -> str:
        return f"EventFields({dict.__repr__(self)})"


@dataclass(frozen=True)
class SysmonEvent:
    event_id: SysmonEventId
    time_created: datetime
    event_data: Mapping[str, str]

    def __post_init__(self) -> None:
        if self.time_created.tzinfo is None:
            raise InvalidTimestamp(self.time_created)
        object.__setattr__(self, "event_data", EventFields(self.event_data))

    @classmethod
    def from_xml(cls, xml: Union[str, bytes]) -> "SysmonEvent":
        return parse_sysmon_event(xml)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_id": self.event_id.code,
            "time_created": to_rfc3339(self.time_created),
            "event_data": dict(self.event_data),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SysmonEvent":
        for key in ("event_id", "time_created", "event_data"):
            if key not in data:
                raise MissingField(key)

        raw_id = data["event_id"]
        event_id = SysmonEventId.from_str(raw_id) if isinstance(raw_id, str) else SysmonEventId(raw_id)

        raw_ts = data["time_created"]
        try:
            time_created = parse_rfc3339(raw_ts)
        except ValueError as exc:
            raise InvalidTimestamp(raw_ts) from exc

        event_data = data["event_data"]
        if not isinstance(event_data, Mapping):
            raise MissingField("event_data", "event_data must be an object")
        for key, value in event_data.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise MissingField("event_data", f"event_data[{key!r}] is not text")
        return cls(event_id=event_id, time_created=time_created, event_data=event_data)


def _local_name(node: Any) -> Optional[str]:
    # Comments and processing instructions carry a non-string tag.
    if not isinstance(node.tag, str):
        return None
    return etree.QName(node).localname


def _children(node: Any, name: str) -> Iterator[Any]:
    for child in node:
        if _local_name(child) == name:
            yield child


def _first_child(node: Any, name: str) -> Any:
    found = next(_children(node, name), None)
    if found is None:
        raise MissingSection(name)
    return found


def _text(node: Any) -> Optional[str]:
    # Unresolved (external) entity references would split the text in two.
    for child in node:
        if isinstance(child, etree._Entity):
            raise MalformedDocument(f"unresolved entity {child.text} in {_local_name(node)}")
    return node.text


def _load_document(xml: Union[str, bytes]) -> Any:
    if isinstance(xml, str):
        # Already decoded: the XML declaration's encoding does not apply.
        payload = xml.encode("utf-8")
        parser = etree.XMLParser(encoding="utf-8", **_PARSER_OPTIONS)
    else:
        payload = xml
        parser = etree.XMLParser(**_PARSER_OPTIONS)
    try:
        return etree.fromstring(payload, parser=parser)
    except (etree.XMLSyntaxError, ValueError) as exc:
        raise MalformedDocument(str(exc) or type(exc).__name__) from exc


def parse_sysmon_event(xml: Union[str, bytes]) -> SysmonEvent:
    """
    Parse one <Event> document into a SysmonEvent.

    Raises a ParseError subclass on any failure; nothing partial is returned.
    Unparseable EventID/SystemTime values do not fail immediately: a later
    valid occurrence still wins. If none ever parses, the last bad value is
    reported (InvalidEventId / InvalidTimestamp, both MissingField).
    """
    root = _load_document(xml)
    system = _first_child(root, "System")
    event_data_node = _first_child(root, "EventData")

    event_id: Optional[SysmonEventId] = None
    time_created: Optional[datetime] = None
    event_id_error: Optional[InvalidEventId] = None
    time_error: Optional[InvalidTimestamp] = None

    for node in system:
        name = _local_name(node)
        if name == "EventID":
            text = _text(node)
            if text is None:
                raise MissingField("EventID text", "EventID is empty")
            try:
                event_id = SysmonEventId.from_str(text)
            except InvalidEventId as exc:
                event_id_error = exc
        elif name == "TimeCreated":
            system_time = node.get("SystemTime")
            if system_time is None:
                raise MissingAttribute("SystemTime", "TimeCreated")
            try:
                time_created = parse_rfc3339(system_time)
            except ValueError as exc:
                time_error = InvalidTimestamp(system_time)
                time_error.__cause__ = exc

    if event_id is None:
        if event_id_error is not None:
            raise event_id_error
        raise MissingField("EventID")
    if time_created is None:
        if time_error is not None:
            raise time_error
        raise MissingField("TimeCreated")

    fields: Dict[str, str] = {}
    for node in _children(event_data_node, "Data"):
        field_name = node.get("Name")
        if field_name is None:
            raise MissingAttribute("Name", "EventData/Data")
        text = _text(node)
        if text is None:
            raise MissingField("Data text", "EventData/Data has no text")
        fields[field_name] = text

    return SysmonEvent(event_id=event_id, time_created=time_created, event_data=fields)
