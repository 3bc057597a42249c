"""Tests for command records and the line-oriented log codec."""

from __future__ import annotations

import pytest

from graphlog.domain.commands import (
    AddEdge,
    AddVertex,
    RemoveEdge,
    RemoveVertex,
    check_command,
    decode_commands,
    encode_commands,
    format_command,
    parse_line,
)
from graphlog.domain.errors import InvalidCommand, LogParseError


class TestFormat:
    def test_default_weight_is_omitted(self) -> None:
        assert format_command(AddEdge(1, 2)) == "AddEdge 1 2"

    def test_explicit_weight_is_written(self) -> None:
        assert format_command(AddEdge(1, 2, 7)) == "AddEdge 1 2 7"

    def test_every_record_kind(self) -> None:
        text = encode_commands([AddVertex(3), AddEdge(1, 2), RemoveEdge(1, 2), RemoveVertex(3)])
        assert text == "AddVertex 3\nAddEdge 1 2\nRemoveEdge 1 2\nRemoveVertex 3\n"


class TestDecode:
    def test_empty_log(self) -> None:
        assert decode_commands("") == []

    def test_preserves_order_and_duplicates(self) -> None:
        text = "AddVertex 1\nAddVertex 1\nRemoveVertex 1\nAddVertex 1\n"
        assert decode_commands(text) == [
            AddVertex(1),
            AddVertex(1),
            RemoveVertex(1),
            AddVertex(1),
        ]

    def test_skips_comments_and_blank_lines(self) -> None:
        text = "# seeded by hand\n\nAddEdge 1 2 3\n   \n# done\n"
        assert decode_commands(text) == [AddEdge(1, 2, 3)]

    def test_mixed_log_survives_reencoding(self) -> None:
        commands = [AddVertex(9), AddEdge(9, 4, 2), RemoveEdge(9, 4), RemoveVertex(9)]
        assert decode_commands(encode_commands(commands)) == commands

    def test_tolerates_extra_whitespace(self) -> None:
        assert parse_line("  AddEdge   4   5  ") == AddEdge(4, 5)

    def test_truncated_last_record(self) -> None:
        with pytest.raises(LogParseError) as info:
            decode_commands("AddVertex 1\nAddEdge 1")
        assert info.value.line_number == 2
        assert info.value.code == "PARSE_ERROR"

    def test_truncated_even_if_syntactically_complete(self) -> None:
        with pytest.raises(LogParseError):
            decode_commands("AddVertex 1\nAddVertex 2")

    def test_unknown_record(self) -> None:
        with pytest.raises(LogParseError) as info:
            decode_commands("AddVertex 1\nAddNode 2\n")
        assert info.value.line_number == 2
        assert info.value.line == "AddNode 2"

    def test_zero_id_is_rejected(self) -> None:
        with pytest.raises(LogParseError, match="line 1"):
            decode_commands("AddVertex 0\n")

    def test_zero_weight_is_rejected(self) -> None:
        with pytest.raises(LogParseError):
            decode_commands("AddEdge 1 2 0\n")

    def test_negative_id_does_not_parse(self) -> None:
        with pytest.raises(LogParseError):
            parse_line("RemoveVertex -3", line_number=5)


class TestCheckCommand:
    def test_accepts_positive(self) -> None:
        cmd = AddEdge(1, 2, 5)
        assert check_command(cmd) is cmd

    @pytest.mark.parametrize(
        "cmd",
        [AddVertex(0), AddEdge(-1, 2), AddEdge(1, 2, 0), RemoveEdge(1, 0), RemoveVertex(-5)],
    )
    def test_rejects_non_positive(self, cmd: object) -> None:
        with pytest.raises(InvalidCommand):
            check_command(cmd)  # type: ignore[arg-type]

    def test_rejects_non_commands(self) -> None:
        with pytest.raises(TypeError):
            check_command("AddVertex 1")  # type: ignore[arg-type]

    def test_bytes_decode_like_text(self) -> None:
        assert decode_commands(b"# seed\nAddEdge 1 2 3\n") == [AddEdge(1, 2, 3)]

    def test_invalid_utf8_line(self) -> None:
        with pytest.raises(LogParseError, match="not valid UTF-8") as info:
            decode_commands(b"AddVertex 1\n\n# caf\xe9\nAddVertex 2\n")
        assert info.value.line_number == 3
        assert info.value.code == "PARSE_ERROR"
        assert "�" in info.value.line
