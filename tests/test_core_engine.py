"""Tests for core.engine module."""

import io
import json
import re

from cloudline.core.engine import (
    LogEngine,
    StreamEngine,
    encode_key,
    epoch_time,
    iso_time,
    no_time,
    serialize_bindings,
    unix_time,
)
from cloudline.core.serializer import RecordSerializer
from cloudline.core.severity import SeverityTable


class TestStreamEngine:
    """Tests for StreamEngine class."""

    def test_is_log_engine(self) -> None:
        """Test that StreamEngine satisfies the LogEngine protocol."""
        assert isinstance(StreamEngine(), LogEngine)

    def test_level_gating(self) -> None:
        """Test that ranks below the threshold are disabled."""
        engine = StreamEngine(level_rank=30)

        assert not engine.is_level_enabled(20)
        assert engine.is_level_enabled(30)
        assert engine.is_level_enabled(80)

    def test_disabled(self) -> None:
        """Test that a disabled engine rejects every rank."""
        engine = StreamEngine(level_rank=10, enabled=False)

        assert not engine.is_level_enabled(80)

    def test_write(self) -> None:
        """Test that lines are written verbatim."""
        stream = io.StringIO()
        engine = StreamEngine(stream)

        engine.write('{"a":1}\n')
        engine.write('{"b":2}\n')

        assert stream.getvalue() == '{"a":1}\n{"b":2}\n'

    def test_write_defaults_to_stdout(self, capsys) -> None:
        """Test that the default destination is stdout."""
        StreamEngine().write("line\n")

        assert capsys.readouterr().out == "line\n"

    def test_with_level_shares_stream(self) -> None:
        """Test that derived engines share output but not level."""
        stream = io.StringIO()
        parent = StreamEngine(stream, level_rank=30)
        child = parent.with_level(30)

        child.level_rank = 10
        child.write("x\n")

        assert parent.level_rank == 30
        assert stream.getvalue() == "x\n"


class TestTimeFunctions:
    """Tests for timestamp fragment providers."""

    def test_epoch_time(self) -> None:
        """Test the millisecond epoch fragment."""
        assert re.fullmatch(r',"time":\d{13}', epoch_time())

    def test_unix_time(self) -> None:
        """Test the second epoch fragment."""
        assert re.fullmatch(r',"time":\d{10}', unix_time())

    def test_iso_time(self) -> None:
        """Test the ISO 8601 fragment."""
        fragment = iso_time()

        assert re.fullmatch(r',"time":"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z"', fragment)

    def test_no_time(self) -> None:
        """Test the empty fragment."""
        assert no_time() == ""

    def test_fragments_splice_into_json(self) -> None:
        """Test that every fragment produces valid JSON after a severity."""
        for fn in (epoch_time, unix_time, iso_time, no_time):
            json.loads('{"severity":"INFO"' + fn() + "}")


class TestSerializeBindings:
    """Tests for serialize_bindings function."""

    def test_fragment(self) -> None:
        """Test the rendered bindings fragment."""
        serializer = RecordSerializer(SeverityTable.standard())

        fragment = serialize_bindings(
            {"request": "r-1", "attempt": 2}, serializer.encode_field
        )

        assert fragment == ',"request":"r-1","attempt":2'

    def test_omitted_values_are_dropped(self) -> None:
        """Test that values which cannot be encoded are skipped."""
        serializer = RecordSerializer(SeverityTable.standard())

        fragment = serialize_bindings(
            {"fn": len, "err": ValueError("x"), "ok": True}, serializer.encode_field
        )

        assert fragment == ',"ok":true'

    def test_empty(self) -> None:
        """Test that no bindings render as an empty string."""
        serializer = RecordSerializer(SeverityTable.standard())

        assert serialize_bindings({}, serializer.encode_field) == ""

    def test_encode_key(self) -> None:
        """Test key escaping."""
        assert encode_key('a"b') == '"a\\"b"'
