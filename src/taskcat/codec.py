"""Binary encode/decode between TaskStore and the data file layout.

The file is a sequence of category records, terminated only by end of input::

    category_record := task_count:u8 name_len:u8 name:bytes[name_len] task_record{task_count}
    task_record     := status:u8 name_len:u8 name:bytes[name_len] due_len:u8 due:bytes[due_len]

There is no header, magic number or version tag.
"""

from taskcat.errors import CorruptFormatError, StorageError, ValidationError
from taskcat.models import Category, Task, TaskStatus
from taskcat.store import TaskStore
from taskcat.validation import MAX_FIELD_BYTES, decode_field, encode_field


class _ByteReader:
    """Cursor over input bytes that fails on reads past the end."""

    def __init__(self, data: bytes) -> None:
        self._data = memoryview(data)
        self.offset = 0

    def at_end(self) -> bool:
        return self.offset >= len(self._data)

    def read_u8(self, what: str) -> int:
        if self.offset >= len(self._data):
            raise CorruptFormatError(f"Unexpected end of data reading {what} at byte {self.offset}")
        value = self._data[self.offset]
        self.offset += 1
        return value

    def read_bytes(self, length: int, what: str) -> bytes:
        end = self.offset + length
        if end > len(self._data):
            raise CorruptFormatError(
                f"{what} at byte {self.offset} declares {length} bytes, "
                f"only {len(self._data) - self.offset} remain"
            )
        raw = bytes(self._data[self.offset:end])
        self.offset = end
        return raw

    def read_field(self, what: str) -> str:
        length = self.read_u8(f"{what} length")
        return decode_field(self.read_bytes(length, what))


def _read_task(reader: _ByteReader) -> Task:
    status_offset = reader.offset
    code = reader.read_u8("task status")
    try:
        status = TaskStatus(code)
    except ValueError:
        raise CorruptFormatError(f"Unknown task status {code} at byte {status_offset}") from None
    name = reader.read_field("task name")
    due_date = reader.read_field("due date")
    return Task(name=name, status=status, due_date=due_date)


def _read_category(reader: _ByteReader) -> Category:
    task_count = reader.read_u8("task count")
    name = reader.read_field("category name")
    tasks = [_read_task(reader) for _ in range(task_count)]
    return Category(name=name, tasks=tasks)


def decode(data: bytes) -> TaskStore:
    """Decode file bytes into a TaskStore.

    Raises:
        CorruptFormatError: If the data is truncated, declares lengths past
            the end of input, has an unknown status byte, or describes a
            store that breaks its invariants (duplicate or empty categories,
            too many categories)
    """
    store = TaskStore()
    reader = _ByteReader(data)

    while not reader.at_end():
        record_offset = reader.offset
        category = _read_category(reader)
        try:
            store.insert_category(category)
        except ValidationError as e:
            raise CorruptFormatError(f"Invalid category record at byte {record_offset}: {e}") from e

    return store


def _write_field(out: bytearray, text: str) -> None:
    raw = encode_field(text)
    if len(raw) > MAX_FIELD_BYTES:
        raise StorageError(f"Field too long to encode: {len(raw)} bytes")
    out.append(len(raw))
    out.extend(raw)


def encode(store: TaskStore) -> bytes:
    """Encode a TaskStore into file bytes. An empty store encodes to b''."""
    out = bytearray()
    for category in store.categories:
        out.append(len(category.tasks))
        _write_field(out, category.name)
        for task in category.tasks:
            out.append(int(task.status))
            _write_field(out, task.name)
            _write_field(out, task.due_date)
    return bytes(out)
