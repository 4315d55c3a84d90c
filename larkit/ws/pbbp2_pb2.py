# Protocol buffer classes for larkit/ws/pbbp2.proto.
# Keep the descriptor below in sync with the .proto file.
"""Protocol buffer classes for pbbp2.proto."""

from google.protobuf import descriptor_pb2 as _descriptor_pb2
from google.protobuf import descriptor_pool as _descriptor_pool
from google.protobuf.internal import builder as _builder

_FieldProto = _descriptor_pb2.FieldDescriptorProto


def _field(name, number, label, type_, type_name=None):
    field = _FieldProto(name=name, number=number, label=label, type=type_)
    if type_name is not None:
        field.type_name = type_name
    return field


_FILE = _descriptor_pb2.FileDescriptorProto(
    name="larkit/ws/pbbp2.proto",
    package="pbbp2",
    syntax="proto2",
)
_FILE.message_type.add(name="Header").field.extend(
    [
        _field("key", 1, _FieldProto.LABEL_REQUIRED, _FieldProto.TYPE_STRING),
        _field("value", 2, _FieldProto.LABEL_REQUIRED, _FieldProto.TYPE_STRING),
    ]
)
_FILE.message_type.add(name="Frame").field.extend(
    [
        _field("SeqID", 1, _FieldProto.LABEL_REQUIRED, _FieldProto.TYPE_UINT64),
        _field("LogID", 2, _FieldProto.LABEL_REQUIRED, _FieldProto.TYPE_UINT64),
        _field("service", 3, _FieldProto.LABEL_REQUIRED, _FieldProto.TYPE_INT32),
        _field("method", 4, _FieldProto.LABEL_REQUIRED, _FieldProto.TYPE_INT32),
        _field("headers", 5, _FieldProto.LABEL_REPEATED, _FieldProto.TYPE_MESSAGE, ".pbbp2.Header"),
        _field("payloadEncoding", 6, _FieldProto.LABEL_OPTIONAL, _FieldProto.TYPE_STRING),
        _field("payloadType", 7, _FieldProto.LABEL_OPTIONAL, _FieldProto.TYPE_STRING),
        _field("payload", 8, _FieldProto.LABEL_OPTIONAL, _FieldProto.TYPE_BYTES),
        _field("LogIDNew", 9, _FieldProto.LABEL_OPTIONAL, _FieldProto.TYPE_STRING),
    ]
)

DESCRIPTOR = _descriptor_pool.Default().AddSerializedFile(_FILE.SerializeToString())

_globals = globals()
_builder.BuildMessageAndEnumDescriptors(DESCRIPTOR, _globals)
_builder.BuildTopDescriptorsAndMessages(DESCRIPTOR, "larkit.ws.pbbp2_pb2", _globals)
