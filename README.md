# redtypes

Building blocks for talking to a Redis server: reply values, conversion of
replies into Python types, encoding of command arguments, error kinds, and
parsing of the stream command replies (`XREAD`, `XRANGE`, `XCLAIM`,
`XPENDING`, `XINFO`).

The package has no run-time dependencies and supports Python 3.10 and later.

## What it does not do

There is no networking here: no connection, no client, no protocol reader or
writer, no command set, no pipelines, no pub/sub and no cluster support. The
package works on `Value` objects that a protocol reader has already produced,
and on argument lists that a writer will send.

## Reply values (`redtypes.values`)

The reply types are `Nil`, `Int`, `Data`, `Bulk`, `Status` and `Okay`, all
derived from `Value`. They are frozen dataclasses.

- `Int` holds a signed 64-bit integer; other integers raise `ValueError`,
  non-integers `TypeError`.
- `Data` holds `bytes` (a `bytearray` or `memoryview` is copied to `bytes`).
- `Bulk` holds a tuple of values; any iterable of values is accepted.
- `Status` holds a `str`.

```python
from redtypes.values import Bulk, Data

reply = Bulk([Data(b"0"), Bulk([Data(b"a"), Data(b"b")])])
reply.looks_like_cursor()   # True: a Data cursor followed by a Bulk
reply.as_sequence()         # the two items, as a tuple
```

- `as_sequence()` gives the items of a `Bulk`, an empty tuple for `Nil`, and
  `None` for anything else.
- `as_map_items()` walks a `Bulk` as consecutive key/value pairs (a trailing
  odd item is dropped), and gives `None` for anything else.
- `repr()` shows values as `nil`, `int(42)`, `string-data('"abc"')`,
  `binary-data([255])`, `bulk(...)`, `status("...")` and `ok`.

## Converting replies (`redtypes.convert`)

`from_redis_value(value, target)` turns a reply into the type you ask for.
`target` may be:

- `int`, `float`, `bool`, `str`, `bytes`;
- a `Value` class (the reply must already be of that class);
- `list[...]`, `tuple[...]` (fixed or `tuple[X, ...]`), `dict[..., ...]`,
  `set[...]`, `frozenset[...]`, or the bare `list`, `dict`, `set`,
  `frozenset` (elements stay `Value`);
- `X | None` / `Optional[X]`, which gives `None` for a `Nil` reply;
- `typing.Any` to get the value back unchanged, or `None` to discard it;
- any class with a `from_redis_value` class method, such as `InfoDict` and the
  stream reply classes.

When the reply does not fit, `RedisError` with kind `ErrorKind.TYPE_ERROR` is
raised; an unsupported `target` raises `TypeError`.

```python
from redtypes.convert import from_redis_value
from redtypes.values import Bulk, Data, Int, Nil

from_redis_value(Int(42), int)                                  # 42
from_redis_value(Data(b"3.5"), float)                           # 3.5
from_redis_value(Bulk([Data(b"f1"), Int(1)]), dict[str, int])   # {"f1": 1}
from_redis_value(Nil(), int | None)                             # None
from_redis_value(Bulk([Data(b"a"), Int(1), Data(b"b"), Int(2)]),
                 list[tuple[str, int]])                         # [("a", 1), ("b", 2)]
```

Numbers are read from `Int`, `Status` or `Data`; booleans from `Nil` (false),
`Int` (non-zero), `Okay` (true), and `"1"`/`"0"` as `Status` or `Data`;
strings from `Data`, `Status` and `Okay` (`"OK"`). A list of fixed-size tuples
is read from a flat bulk in chunks of the tuple's width.

## Encoding arguments (`redtypes.args`)

`to_redis_args(value)` turns a Python value into the list of byte strings that
make up command arguments:

- `str` is UTF-8 encoded, `bytes`-like values are taken as they are;
- `int` is written in decimal, `bool` as `1` or `0`;
- `float` is written in its shortest round-tripping form (`1.5`, `0.0`,
  `1e20`, `inf`, `NaN`);
- `None` yields nothing;
- lists, tuples and sets are flattened;
- mappings are flattened as key, value, key, value in sorted key order, and
  each key and value must be a single argument (`ValueError` otherwise);
- any other object with a `redis_args()` method contributes what it returns,
  such as the stream option classes below.

```python
from redtypes.args import to_redis_args

to_redis_args(["key", 42, True, None])   # [b"key", b"42", b"1"]
to_redis_args({"b": 2, "a": 1})          # [b"a", b"1", b"b", b"2"]
```

`is_single_arg(value)` reports whether a value stands for exactly one
argument, and `describe_numeric_behavior(value)` returns a `NumericBehavior`
(`NON_NUMERIC`, `NUMBER_IS_INTEGER` or `NUMBER_IS_FLOAT`).

`Expiry(kind, value)` describes an expiry option: `EX`, `PX`, `EXAT` or
`PXAT` with a non-negative integer, or `PERSIST` with no value. The kind is
upper-cased; an unknown kind or a bad value raises `ValueError`.

## Errors (`redtypes.errors`)

`RedisError(kind, description, detail=None)` is an `Exception` carrying an
`ErrorKind`, a description and an optional detail. It offers:

- `code()`: the server error code for the kind (`ERR`, `MOVED`,
  `READONLY`, ...), or the code of an extension error;
- `category()`: a readable name such as `"type error"` or `"key moved"`;
- `is_cluster_error()`: true for `MOVED`, `ASK`, `TRY_AGAIN` and
  `CLUSTER_DOWN`;
- `redirect_node()`: `(address, slot)` from the detail of a `MOVED` or `ASK`
  error, e.g. `"3999 127.0.0.1:6381"` gives `("127.0.0.1:6381", 3999)`;
- `is_io_error()`, `is_connection_refusal()`, `is_timeout()` and
  `is_connection_dropped()` for errors that wrap an `OSError`.

`from_io_error(err)` wraps an `OSError` as an `IO_ERROR`.
`make_extension_error(code, detail=None)` builds an `EXTENSION_ERROR` for a
server code the package does not know; its `str()` is `"CODE: detail"`.

## The INFO reply (`redtypes.info`)

`InfoDict` parses the text of the INFO reply. Blank lines and lines starting
with `#` are skipped, as are lines without a colon; every field is kept as a
`Status` value.

```python
from redtypes.info import InfoDict

info = InfoDict("# Server\nrole:master\nloading:0\n")
info.get("role")           # "master"
info.get("loading", bool)  # False
info.find("role")          # status("master")
"role" in info             # True
len(info)                  # 2
```

`get` returns `None` when the field is missing or cannot be converted.
`InfoDict.from_redis_value(value)` builds one from a reply holding the text.

## Streams

### Options (`redtypes.stream_options`)

The option classes are frozen; every builder method returns a new object.
Their `redis_args()` give the argument lists.

```python
from redtypes.stream_options import StreamClaimOptions, StreamMaxlen, StreamReadOptions

StreamMaxlen.approximate(1000).redis_args()   # [b"MAXLEN", b"~", b"1000"]
StreamMaxlen.equals(10).redis_args()          # [b"MAXLEN", b"=", b"10"]

StreamClaimOptions().idle(5000).retry(3).with_justid().redis_args()
# [b"IDLE", b"5000", b"RETRYCOUNT", b"3", b"JUSTID"]

opts = StreamReadOptions().count(10).block(500).group("workers", "alice")
opts.redis_args()
# [b"BLOCK", b"500", b"COUNT", b"10", b"GROUP", b"workers", b"alice"]
opts.read_only()   # False
```

`StreamClaimOptions` also has `time()` and `with_force()`. `NOACK` from
`StreamReadOptions.noack()` is written only when a group is set. Counts and
times must be non-negative integers.

### Replies (`redtypes.stream_replies`)

Each reply class is built with its `from_redis_value` class method (or through
`from_redis_value(value, ReplyClass)`):

- `StreamReadReply` (`keys`: `StreamKey` objects with `key` and `ids`);
- `StreamRangeReply` and `StreamClaimReply` (`ids`: `StreamId` objects);
- `StreamPendingReply`: `data` is `None` when nothing is pending, otherwise a
  `StreamPendingData` with `count`, `start_id`, `end_id` and `consumers`;
  `count()` gives the pending count. A non-zero count without a start or end
  id raises an `IO_ERROR`;
- `StreamPendingCountReply` (`ids`: `StreamPendingId` objects);
- `StreamInfoStreamReply`, `StreamInfoConsumersReply` (`StreamInfoConsumer`
  objects) and `StreamInfoGroupsReply` (`StreamInfoGroup` objects).

A `StreamId` has an `id` and a `map` of field names to `Value`; `get(key,
target=str)` converts a field or returns `None`, and `in` and `len()` work on
its fields.

## Tests

The `test` extra installs pytest and hypothesis; the tests live in `tests/`.