"""
pbbp2: the binary envelope carried over the long-lived event connection.

The wire schema lives in pbbp2.proto (proto2; tag numbers are fixed by the
server and must never change) and is compiled into pbbp2_pb2. Frame and
Header here are plain dataclasses over those protobuf messages, so the rest
of the package never touches the generated classes directly:

    message Header { required string key = 1; required string value = 2; }

    message Frame {
        required uint64 SeqID = 1;   required uint64 LogID = 2;
        required int32 service = 3;  required int32 method = 4;
        repeated Header headers = 5;
        optional string payloadEncoding = 6;  optional string payloadType = 7;
        optional bytes payload = 8;           optional string LogIDNew = 9;
    }

Decoding is strict: anything the protobuf runtime rejects, and any missing
required field, raises ProtocolError. Unknown field numbers are skipped.
split_u64/join_u64 convert SeqID/LogID to and from the {low, high} form
used by peers that cannot hold 64-bit integers.

Example:
    frame = Frame(seq_id=1, log_id=2, service=3, method=4)
    data = frame.encode()            # b"\\x08\\x01\\x10\\x02\\x18\\x03\\x20\\x04"
    assert Frame.decode(data) == frame
"""

from __future__ import annotations

import base64
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar, TypeVar

from google.protobuf import json_format
from google.protobuf import message as proto_message
from google.protobuf.descriptor import Descriptor, FieldDescriptor
from google.protobuf.internal.decoder import _DecodeVarint32
from google.protobuf.internal.encoder import _VarintBytes

from larkit.errors import ProtocolError
from larkit.ws import pbbp2_pb2

M = TypeVar("M", bound="Message")

U32_MAX = 0xFFFF_FFFF
U64_MAX = 0xFFFF_FFFF_FFFF_FFFF
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

DEFAULT_TYPE_URL_PREFIX = "type.googleapis.com"


def split_u64(value: int) -> tuple[int, int]:
    """Split an unsigned 64-bit integer into (low, high) 32-bit halves."""
    if not 0 <= value <= U64_MAX:
        raise ValueError(f"{value} is outside the uint64 range")
    return value & U32_MAX, value >> 32


def join_u64(low: int, high: int) -> int:
    """Join (low, high) 32-bit halves into an unsigned 64-bit integer."""
    return ((high & U32_MAX) << 32) | (low & U32_MAX)


def _is_required(descriptor: FieldDescriptor) -> bool:
    return descriptor.label == FieldDescriptor.LABEL_REQUIRED


def _is_repeated(descriptor: FieldDescriptor) -> bool:
    return descriptor.label == FieldDescriptor.LABEL_REPEATED


# =============================================================================
# Messages
# =============================================================================


_MESSAGE_TYPES: dict[str, type["Message"]] = {}


class Message:
    """
    Behaviour shared by the dataclass views of the pbbp2 messages.

    Subclasses set `proto_type` to the protobuf class and `field_names` to
    (attribute, proto field name) pairs.
    """

    __slots__ = ()

    proto_type: ClassVar[type[proto_message.Message]]
    field_names: ClassVar[tuple[tuple[str, str], ...]]

    def __init_subclass__(cls, **kwargs: Any):
        super().__init_subclass__(**kwargs)
        _MESSAGE_TYPES[cls.descriptor().full_name] = cls

    @classmethod
    def descriptor(cls) -> Descriptor:
        return cls.proto_type.DESCRIPTOR

    @classmethod
    def get_type_url(cls, prefix: str = DEFAULT_TYPE_URL_PREFIX) -> str:
        """Default type URL, e.g. `type.googleapis.com/pbbp2.Frame`."""
        return f"{prefix}/{cls.descriptor().full_name}"

    # -------------------------------------------------------------------------
    # Protobuf conversion
    # -------------------------------------------------------------------------

    def to_proto(self) -> proto_message.Message:
        """
        Build the protobuf message. Unset (None) fields stay unset.

        Raises:
            ValueError: If a value is outside its field's range
        """
        message = self.proto_type()
        fields = self.descriptor().fields_by_name
        for attr, name in self.field_names:
            value = getattr(self, attr)
            if value is None:
                continue
            if _is_repeated(fields[name]):
                getattr(message, name).extend(item.to_proto() for item in value)
            else:
                setattr(message, name, value)
        return message

    @classmethod
    def from_proto(cls: type[M], message: proto_message.Message) -> M:
        fields = cls.descriptor().fields_by_name
        values: dict[str, Any] = {}
        for attr, name in cls.field_names:
            descriptor = fields[name]
            if _is_repeated(descriptor):
                item_type = _MESSAGE_TYPES[descriptor.message_type.full_name]
                values[attr] = [item_type.from_proto(item) for item in getattr(message, name)]
            elif _is_required(descriptor) or message.HasField(name):
                values[attr] = getattr(message, name)
        return cls(**values)

    # -------------------------------------------------------------------------
    # Binary encoding
    # -------------------------------------------------------------------------

    def encode(self) -> bytes:
        """
        Serialize to protobuf wire format.

        Raises:
            ValueError: If a required field is unset or a value is out of range
        """
        message = self.to_proto()
        missing = message.FindInitializationErrors()
        if missing:
            raise ValueError(f"{message.DESCRIPTOR.full_name}: missing required '{missing[0]}'")
        return message.SerializeToString()

    def encode_delimited(self) -> bytes:
        """Serialize with a varint length prefix."""
        body = self.encode()
        return _VarintBytes(len(body)) + body

    @classmethod
    def decode(cls: type[M], data: bytes | bytearray | memoryview) -> M:
        """
        Decode a message.

        Raises:
            ProtocolError: On malformed input or a missing required field.
                For a missing field, `instance` holds the fields that were read.
        """
        message = cls.proto_type()
        try:
            message.ParseFromString(bytes(data))
        except proto_message.DecodeError as e:
            raise ProtocolError(f"malformed {cls.descriptor().full_name}: {e}") from e

        missing = message.FindInitializationErrors()
        if missing:
            raise ProtocolError(
                f"missing required '{missing[0]}'",
                instance=_export_message(message, int, bytes, defaults=False, arrays=False),
            )
        return cls.from_proto(message)

    @classmethod
    def decode_delimited(
        cls: type[M], data: bytes | bytearray | memoryview, offset: int = 0
    ) -> tuple[M, int]:
        """
        Decode one length-prefixed message starting at `offset`.

        Returns:
            The message and the offset just past it, so consecutive
            messages can be read in a loop
        """
        buffer = bytes(data)
        try:
            length, start = _DecodeVarint32(buffer, offset)
        except (proto_message.DecodeError, IndexError) as e:
            raise ProtocolError(f"malformed length prefix at offset {offset}") from e
        end = start + length
        if end > len(buffer):
            raise ProtocolError(f"index out of range: {end} > {len(buffer)}")
        return cls.decode(buffer[start:end]), end

    # -------------------------------------------------------------------------
    # Plain-object conversion
    # -------------------------------------------------------------------------

    @classmethod
    def verify(cls, obj: Any) -> str | None:
        """
        Check a plain object against the message descriptor.

        Returns:
            None if valid, otherwise the reason for the first violation
        """
        return _verify_message(cls.descriptor(), obj)

    @classmethod
    def from_object(cls: type[M], obj: Any) -> M:
        """
        Build a message from a plain object keyed by proto field names.

        64-bit fields accept ints, decimal strings and {"low", "high"} dicts.
        `payload` accepts bytes or a base64 string. Absent required fields
        take their zero value.

        Raises:
            TypeError: If the object, a repeated field or one of its items
                has the wrong shape
            json_format.ParseError: If a value does not fit its field
        """
        if isinstance(obj, cls):
            return obj
        message = cls.proto_type()
        json_format.ParseDict(
            _json_ready(cls.descriptor(), obj, f".{cls.descriptor().full_name}"),
            message,
            ignore_unknown_fields=True,
        )
        return cls.from_proto(message)

    def to_object(
        self,
        *,
        longs: type = int,
        bytes_as: type = bytes,
        defaults: bool = False,
        arrays: bool = False,
    ) -> dict[str, Any]:
        """
        Convert to a plain dict keyed by proto field names.

        Args:
            longs: `int` or `str` representation for 64-bit fields
            bytes_as: `bytes`, `str` (base64) or `list` for bytes fields
            defaults: Include unset fields with their zero values
            arrays: Include empty repeated fields
        """
        return _export_message(self.to_proto(), longs, bytes_as, defaults=defaults, arrays=arrays)

    def to_json(self) -> dict[str, Any]:
        """JSON-safe dict: 64-bit fields as strings, bytes as base64."""
        return json_format.MessageToDict(self.to_proto(), preserving_proto_field_name=True)


@dataclass(frozen=True, slots=True)
class Header(Message):
    """A key/value pair attached to a Frame."""

    proto_type: ClassVar[type[proto_message.Message]] = pbbp2_pb2.Header
    field_names: ClassVar[tuple[tuple[str, str], ...]] = (("key", "key"), ("value", "value"))

    key: str
    value: str


@dataclass(slots=True)
class Frame(Message):
    """One request, response or push on the multiplexed connection."""

    proto_type: ClassVar[type[proto_message.Message]] = pbbp2_pb2.Frame
    field_names: ClassVar[tuple[tuple[str, str], ...]] = (
        ("seq_id", "SeqID"),
        ("log_id", "LogID"),
        ("service", "service"),
        ("method", "method"),
        ("headers", "headers"),
        ("payload_encoding", "payloadEncoding"),
        ("payload_type", "payloadType"),
        ("payload", "payload"),
        ("log_id_new", "LogIDNew"),
    )

    seq_id: int
    log_id: int
    service: int
    method: int
    headers: list[Header] = field(default_factory=list)
    payload_encoding: str | None = None
    payload_type: str | None = None
    payload: bytes | None = None
    log_id_new: str | None = None

    def header(self, key: str) -> str | None:
        """Value of the first header with this key."""
        for item in self.headers:
            if item.key == key:
                return item.value
        return None

    def header_map(self) -> dict[str, str]:
        """Headers as a dict; later duplicates win."""
        return {item.key: item.value for item in self.headers}


# =============================================================================
# Descriptor-driven helpers
# =============================================================================


def _is_integer(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def _in_range(value: Any, low: int, high: int) -> bool:
    return _is_integer(value) and low <= value <= high


def _verify_message(descriptor: Descriptor, obj: Any) -> str | None:
    if not isinstance(obj, Mapping):
        return "object expected"
    for spec in descriptor.fields:
        value = obj.get(spec.name)
        if value is None and not _is_required(spec):
            continue
        if _is_repeated(spec):
            if not isinstance(value, (list, tuple)):
                return f"{spec.name}: array expected"
            for item in value:
                error = _verify_value(spec, item)
                if error:
                    return f"{spec.name}.{error}"
            continue
        error = _verify_value(spec, value)
        if error:
            return error
    return None


def _verify_value(spec: FieldDescriptor, value: Any) -> str | None:
    if spec.type == FieldDescriptor.TYPE_UINT64:
        if _in_range(value, 0, U64_MAX):
            return None
        if (
            isinstance(value, Mapping)
            and _in_range(value.get("low"), 0, U32_MAX)
            and _in_range(value.get("high"), 0, U32_MAX)
        ):
            return None
        return f"{spec.name}: integer|Long expected"
    if spec.type == FieldDescriptor.TYPE_INT32:
        return None if _in_range(value, INT32_MIN, INT32_MAX) else f"{spec.name}: integer expected"
    if spec.type == FieldDescriptor.TYPE_STRING:
        return None if isinstance(value, str) else f"{spec.name}: string expected"
    if spec.type == FieldDescriptor.TYPE_BYTES:
        if isinstance(value, (bytes, bytearray, memoryview, str)):
            return None
        return f"{spec.name}: buffer expected"
    return _verify_message(spec.message_type, value)


def _json_ready(descriptor: Descriptor, obj: Any, path: str) -> dict[str, Any]:
    """Rewrite a plain object into the shape json_format.ParseDict accepts."""
    if isinstance(obj, Message):
        return obj.to_json()
    if not isinstance(obj, Mapping):
        raise TypeError(f"{path}: object expected")
    ready: dict[str, Any] = {}
    for spec in descriptor.fields:
        value = obj.get(spec.name)
        if value is None:
            continue
        if _is_repeated(spec):
            if not isinstance(value, (list, tuple)):
                raise TypeError(f"{path}.{spec.name}: array expected")
            ready[spec.name] = [
                _json_ready(spec.message_type, item, f"{path}.{spec.name}") for item in value
            ]
        elif spec.type == FieldDescriptor.TYPE_UINT64 and isinstance(value, Mapping):
            ready[spec.name] = join_u64(value["low"], value["high"])
        elif spec.type == FieldDescriptor.TYPE_BYTES and not isinstance(value, str):
            ready[spec.name] = base64.b64encode(bytes(value)).decode("ascii")
        else:
            ready[spec.name] = value
    return ready


def _export_value(spec: FieldDescriptor, value: Any, longs: type, bytes_as: type) -> Any:
    if spec.type == FieldDescriptor.TYPE_UINT64:
        return str(value) if longs is str else value
    if spec.type == FieldDescriptor.TYPE_BYTES:
        if bytes_as is str:
            return base64.b64encode(value).decode("ascii")
        if bytes_as is list:
            return list(value)
        return bytes(value)
    return value


def _export_message(
    message: proto_message.Message,
    longs: type,
    bytes_as: type,
    *,
    defaults: bool,
    arrays: bool,
) -> dict[str, Any]:
    obj: dict[str, Any] = {}
    for spec in message.DESCRIPTOR.fields:
        value = getattr(message, spec.name)
        if _is_repeated(spec):
            if value:
                obj[spec.name] = [
                    _export_message(item, longs, bytes_as, defaults=defaults, arrays=arrays)
                    for item in value
                ]
            elif arrays or defaults:
                obj[spec.name] = []
        elif message.HasField(spec.name) or defaults:
            obj[spec.name] = _export_value(spec, value, longs, bytes_as)
    return obj


# =============================================================================
# Module-level shortcuts for the Frame envelope
# =============================================================================


def encode(frame: Frame | Mapping[str, Any]) -> bytes:
    """Encode a Frame (or a plain object convertible to one)."""
    if not isinstance(frame, Frame):
        frame = Frame.from_object(frame)
    return frame.encode()


def decode(data: bytes | bytearray | memoryview) -> Frame:
    """Decode a Frame."""
    return Frame.decode(data)
