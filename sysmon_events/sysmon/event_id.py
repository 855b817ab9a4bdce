from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List

from sysmon_events.errors import NotANumber, ZeroNotAllowed

# Unsigned integer syntax: optional "+", ASCII digits only, no whitespace.
_U8_RE = re.compile(r"\+?[0-9]+")

UNKNOWN_EVENT_NAME = "Unknown event"


@dataclass(frozen=True)
class SysmonEventId:
    """Sysmon event code, 1..255.

    Any code in range is a valid identity; the catalog below only decides
    what label it is displayed with.
    """

    code: int

    def __post_init__(self) -> None:
        if isinstance(self.code, bool) or not isinstance(self.code, int):
            raise NotANumber(self.code)
        if self.code == 0:
            raise ZeroNotAllowed(self.code)
        if not 0 < self.code <= 255:
            raise NotANumber(self.code)

    @classmethod
    def from_str(cls, text: str) -> "SysmonEventId":
        if not isinstance(text, str) or not _U8_RE.fullmatch(text):
            raise NotANumber(text)
        value = int(text)
        if value > 255:
            raise NotANumber(text)
        if value == 0:
            raise ZeroNotAllowed(text)
        return cls(value)

    @property
    def name(self) -> str:
        return EVENT_NAMES.get(self.code, UNKNOWN_EVENT_NAME)

    @property
    def is_known(self) -> bool:
        return self.code in EVENT_NAMES

    def __int__(self) -> int:
        return self.code

    def __str__(self) -> str:
        return f"{self.code} {self.name}"


PROCESS_CREATE = SysmonEventId(1)
FILE_CREATE_TIME = SysmonEventId(2)
NETWORK_CONNECT = SysmonEventId(3)
PROCESS_TERMINATE = SysmonEventId(5)
DRIVER_LOAD = SysmonEventId(6)
IMAGE_LOAD = SysmonEventId(7)
CREATE_REMOTE_THREAD = SysmonEventId(8)
RAW_ACCESS_READ = SysmonEventId(9)
PROCESS_ACCESS = SysmonEventId(10)
FILE_CREATE = SysmonEventId(11)
REGISTRY_EVENT_ADD_DELETE = SysmonEventId(12)
REGISTRY_EVENT_SET = SysmonEventId(13)
REGISTRY_EVENT_RENAME = SysmonEventId(14)
FILE_CREATE_STREAM_HASH = SysmonEventId(15)
PIPE_EVENT_CREATE = SysmonEventId(17)
PIPE_EVENT_CONNECT = SysmonEventId(18)
WMI_EVENT_FILTER = SysmonEventId(19)
WMI_EVENT_CONSUMER = SysmonEventId(20)
WMI_EVENT_CONSUMER_FILTER = SysmonEventId(21)
DNS_QUERY = SysmonEventId(22)
FILE_DELETE = SysmonEventId(23)
CLIPBOARD_CHANGE = SysmonEventId(24)
PROCESS_TAMPERING = SysmonEventId(25)
FILE_DELETE_DETECTED = SysmonEventId(26)

EVENT_NAMES: Dict[int, str] = {
    PROCESS_CREATE.code: "Process Create",
    FILE_CREATE_TIME.code: "File creation time changed",
    NETWORK_CONNECT.code: "Network connection detected",
    PROCESS_TERMINATE.code: "Process terminated",
    DRIVER_LOAD.code: "Driver loaded",
    IMAGE_LOAD.code: "Image loaded",
    CREATE_REMOTE_THREAD.code: "CreateRemoteThread detected",
    RAW_ACCESS_READ.code: "RawAccessRead detected",
    PROCESS_ACCESS.code: "Process accessed",
    FILE_CREATE.code: "File created",
    REGISTRY_EVENT_ADD_DELETE.code: "Registry object added or deleted",
    REGISTRY_EVENT_SET.code: "Registry value set",
    REGISTRY_EVENT_RENAME.code: "Registry object renamed",
    FILE_CREATE_STREAM_HASH.code: "File stream created",
    PIPE_EVENT_CREATE.code: "Pipe Created",
    PIPE_EVENT_CONNECT.code: "Pipe Connected",
    WMI_EVENT_FILTER.code: "WmiEventFilter activity detected",
    WMI_EVENT_CONSUMER.code: "WmiEventConsumer activity detected",
    WMI_EVENT_CONSUMER_FILTER.code: "WmiEventConsumerToFilter activity detected",
    DNS_QUERY.code: "Dns query",
    FILE_DELETE.code: "File Delete archived",
    CLIPBOARD_CHANGE.code: "Clipboard changed",
    PROCESS_TAMPERING.code: "Process Tampering",
    FILE_DELETE_DETECTED.code: "File Delete logged",
}

NAMED_EVENT_IDS: List[SysmonEventId] = [SysmonEventId(code) for code in sorted(EVENT_NAMES)]


def event_catalog() -> List[dict]:
    return [{"event_id": eid.code, "name": eid.name} for eid in NAMED_EVENT_IDS]
