import datetime as dt
from decimal import Decimal

from app.db.models.wbs import WbsType
from app.services.etl.parsers.wbs_csv import generate_csv_template, parse_wbs_csv

HEADER = "wbsCode,wbsName,wbsType,amount,startDate,endDate,duration"


def test_template_parses_without_errors():
    text = generate_csv_template()
    result = parse_wbs_csv(text)
    assert result.errors == []
    assert len(result.rows) == len(text.splitlines()) - 1 == 7
    assert [r.line for r in result.rows] == list(range(2, 9))
    first = result.rows[0]
    assert (first.code, first.name, first.type, first.amount) == ("1", "Engineering & Design", WbsType.summary, Decimal("5000"))
    activity = result.rows[2]
    assert activity.type == WbsType.activity
    assert activity.start_date == dt.date(2024, 1, 8)
    assert activity.duration == 12
    assert activity.amount == 0


def test_bom_and_crlf_are_tolerated():
    text = "\ufeff" + generate_csv_template().replace("\n", "\r\n")
    result = parse_wbs_csv(text)
    assert result.errors == []
    assert len(result.rows) == 7


def test_missing_required_column_is_fail_fast():
    result = parse_wbs_csv("wbsCode,wbsName,amount\n1,Site,100\n2,Works,200\n")
    assert result.rows == []
    assert len(result.errors) == 1
    assert "wbsType" in str(result.errors[0])
    assert str(result.errors[0]).startswith("Missing required columns")


def test_empty_input():
    result = parse_wbs_csv("\n  \n")
    assert result.rows == []
    assert result.messages == ["CSV file is empty or contains no valid data"]


def test_bad_row_is_skipped_and_others_kept():
    text = "\n".join([
        "wbsCode,wbsName,wbsType,amount",
        "1,Site Works,Summary,1000",
        "2,Structure,Summary",
        "3,Finishes,Summary,500",
    ])
    result = parse_wbs_csv(text)
    assert [r.code for r in result.rows] == ["1", "3"]
    assert result.messages == ["Line 3: Column count mismatch (expected 4, got 3)"]


def test_line_numbers_skip_blank_lines():
    text = "wbsCode,wbsName,wbsType,amount\n\n1,Site,Summary,10\n\n2,,Summary,10\n"
    result = parse_wbs_csv(text)
    assert result.rows[0].line == 2
    assert result.messages == ["Line 3: Missing WBS name"]


def test_leading_blank_line_does_not_shift_numbering():
    text = "\nwbsCode,wbsName,wbsType,amount\n1,A,Summary,1\n2,B,Summary\n3,C,Summary,1\n"
    result = parse_wbs_csv(text)
    assert [r.code for r in result.rows] == ["1", "3"]
    assert result.messages == ["Line 3: Column count mismatch (expected 4, got 3)"]


def test_impossible_calendar_date():
    text = HEADER + "\n1.1.1,Pour slab,Activity,0,2023-02-30,2023-03-10,5"
    result = parse_wbs_csv(text)
    assert result.rows == []
    assert result.messages == ["Line 2: Invalid startDate format (expected YYYY-MM-DD)"]


def test_row_rules():
    lines = [
        HEADER,
        ",No code,Summary,10,,,",
        "2,Bad type,Milestone,10,,,",
        "3,Dated summary,Summary,10,2024-01-01,,",
        "4,No budget,WorkPackage,,,,",
        "5,Text budget,WorkPackage,lots,,,",
        "6,Undated,Activity,,,,",
        "7,Priced,Activity,250,2024-01-01,2024-01-02,2",
        "8,US date,Activity,,01/02/2024,2024-01-05,",
        "9,Long,Activity,,2024-01-01,2024-01-05,five",
        "10,Fine,Activity,0,2024-01-01,2024-01-05,",
    ]
    result = parse_wbs_csv("\n".join(lines))
    assert [r.code for r in result.rows] == ["10"]
    assert result.rows[0].duration is None
    assert result.messages == [
        "Line 2: Missing WBS code",
        "Line 3: Invalid WBS type - must be Summary, WorkPackage, or Activity",
        "Line 4: Summary type should not have dates or duration (startDate)",
        "Line 5: WorkPackage type must have a valid budget amount",
        "Line 6: WorkPackage type must have a valid budget amount",
        "Line 7: Activity type must have a start date and an end date",
        "Line 8: Activity type cannot have a budget amount (must be 0 or empty)",
        "Line 9: Invalid startDate format (expected YYYY-MM-DD)",
        "Line 10: duration must be a number",
    ]


def test_errors_carry_column():
    result = parse_wbs_csv(HEADER + "\n1,Dated,Summary,10,,2024-01-01,")
    assert result.errors[0].column == "endDate"
    assert result.errors[0].row_num == 2


def test_quoted_fields_and_optional_columns():
    text = "\n".join([
        "wbsCode,wbsName,wbsType,wbsDescription,amount,createDate",
        '1,"Design, Build",Summary,"Phase one, all trades",1200.50,2024-05-01',
    ])
    result = parse_wbs_csv(text)
    assert result.errors == []
    row = result.rows[0]
    assert row.name == "Design, Build"
    assert row.description == "Phase one, all trades"
    assert row.amount == Decimal("1200.50")
    assert row.create_date == dt.date(2024, 5, 1)
    assert row.as_dict()["wbsType"] == "Summary"


def test_fractional_duration_rounds_up():
    result = parse_wbs_csv(HEADER + "\n1.1.1,Cure,Activity,,2024-01-01,2024-01-03,2.5")
    assert result.rows[0].duration == 3
