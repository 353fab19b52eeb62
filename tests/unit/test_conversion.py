from __future__ import annotations

import pytest

from complaints.conversion import convert_csv, csv_to_rows, rows_to_complaints
from core.errors import ConversionError, MalformedRowError

HEADER = "ticket_id,address,star,state,type"


def test_rows_match_header_width_and_count():
    text = "\n".join(
        [
            HEADER,
            "2024-AAA1,Soi 1,5,finish,{flooding}",
            "2024-AAA2,Soi 2,,start,{road}",
            "2024-AAA3,Soi 3,3,inprogress,{}",
        ]
    )

    rows = csv_to_rows(text)

    assert len(rows) == 3
    assert all(len(row) == 5 for row in rows)
    assert rows[1] == {
        "ticket_id": "2024-AAA2",
        "address": "Soi 2",
        "star": "",
        "state": "start",
        "type": "{road}",
    }


def test_values_are_kept_as_text():
    rows = csv_to_rows("count_reopen,star\n3,4.5\n")

    assert rows == [{"count_reopen": "3", "star": "4.5"}]


@pytest.mark.parametrize("text", ["", "   \n", HEADER, HEADER + "\n"])
def test_empty_or_header_only_input_gives_no_rows(text):
    assert csv_to_rows(text) == []
    assert convert_csv(text) == []


@pytest.mark.parametrize(
    "bad_row",
    [
        "2024-AAA2,Soi 2,5",
        "2024-AAA2,Soi 2,5,finish,{road},extra",
    ],
)
def test_row_width_mismatch_fails(bad_row):
    text = "\n".join([HEADER, "2024-AAA1,Soi 1,5,finish,{flooding}", bad_row])

    with pytest.raises(MalformedRowError) as excinfo:
        csv_to_rows(text)

    assert "line 3" in (excinfo.value.details or "")


def test_quoted_cells_with_commas_and_newlines():
    text = 'ticket_id,comment\nT1,"broken, again"\nT2,"line one\nline two"\n'

    rows = csv_to_rows(text)

    assert rows == [
        {"ticket_id": "T1", "comment": "broken, again"},
        {"ticket_id": "T2", "comment": "line one\nline two"},
    ]


def test_blank_lines_are_skipped():
    text = "ticket_id,state\n\nT1,finish\n\nT2,start\n"

    assert [row["ticket_id"] for row in csv_to_rows(text)] == ["T1", "T2"]


def test_unterminated_quote_is_malformed():
    with pytest.raises(MalformedRowError):
        csv_to_rows('ticket_id,comment\nT1,"oops\n')


def test_complaints_fill_missing_columns_and_ignore_unknown_ones():
    records = convert_csv("ticket_id,province,not_a_field\nT1,Bangkok,x\n")

    assert len(records) == 1
    record = records[0]
    assert record.ticket_id == "T1"
    assert record.province == "Bangkok"
    assert record.comment == ""
    assert "not_a_field" not in record.to_document()


def test_non_text_values_are_rejected():
    with pytest.raises(ConversionError):
        rows_to_complaints([{"ticket_id": "T1", "star": 5}])


def test_repeated_header_name_fails_instead_of_dropping_a_column():
    with pytest.raises(MalformedRowError) as excinfo:
        csv_to_rows("a,a,b\n1,2,3\n")

    assert "line 1" in (excinfo.value.details or "")
