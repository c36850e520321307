import io
import json

import pytest

from consequencekit.results import Result
from consequencekit.writers import (
    AggregatedStageDamageWriter,
    JsonResultsWriter,
    StreamingResultsWriter,
    SummaryResultsWriter,
    VirtualResultsWriter,
    format_money,
)


def damage_result(category, structure, content, name="1"):
    return Result(
        ["fd_id", "damage category", "structure damage", "content damage"],
        [name, category, structure, content],
    )


def test_format_money_thousands_and_decimals():
    assert format_money(1234.5) == "$1,234.50"
    assert format_money(0) == "$0.00"
    assert format_money(-1234.5) == "$-1,234.50"


def test_json_writer_wraps_results():
    stream = io.StringIO()
    writer = JsonResultsWriter(stream)
    first = damage_result("RES", 10.0, 5.0)
    second = damage_result("COM", 1.0, 2.0, name="2")
    writer.write(first)
    writer.write(second)
    writer.close()
    text = stream.getvalue()
    assert text.startswith('{"consequences":[')
    assert text.endswith(",]}")
    body = text[len('{"consequences":[') : -len(",]}")]
    parsed = json.loads("[" + body + "]")
    assert parsed == [first.to_dict(), second.to_dict()]
    assert not stream.closed


def test_json_writer_close_without_results():
    stream = io.StringIO()
    writer = JsonResultsWriter(stream)
    writer.close()
    assert stream.getvalue() == "]}"


def test_json_writer_from_path_appends(tmp_path):
    path = tmp_path / "out.json"
    path.write_text("x", encoding="utf-8")
    with JsonResultsWriter.from_path(path) as writer:
        writer.write(damage_result("RES", 1.0, 2.0))
    text = path.read_text(encoding="utf-8")
    assert text.startswith('x{"consequences":[')
    assert text.endswith("]}")
    assert writer.stream.closed


def test_streaming_writer_one_line_per_result():
    stream = io.StringIO()
    writer = StreamingResultsWriter(stream)
    results = [damage_result("RES", 1.0, 2.0), damage_result("IND", 3.0, 4.0, name="9")]
    for result in results:
        writer.write(result)
    writer.close()
    lines = stream.getvalue().splitlines()
    assert [json.loads(line) for line in lines] == [r.to_dict() for r in results]
    assert stream.getvalue().endswith("\n")


def test_streaming_writer_from_path(tmp_path):
    path = tmp_path / "out.jsonl"
    writer = StreamingResultsWriter.from_path(path)
    result = damage_result("RES", 7.0, 8.0)
    writer.write(result)
    writer.close()
    assert json.loads(path.read_text(encoding="utf-8")) == result.to_dict()


def test_summary_writer_totals():
    stream = io.StringIO()
    writer = SummaryResultsWriter(stream)
    writer.write(damage_result("RES", 100.0, 50.0))
    writer.write(damage_result("RES", 200.0, 25.0))
    writer.write(damage_result("COM", 1000.0, 0.0))
    assert writer.grand_total == pytest.approx(1375.0)
    assert writer.totals == {"RES": pytest.approx(375.0), "COM": pytest.approx(1000.0)}
    writer.close()
    text = stream.getvalue()
    assert text.startswith(f"Grand Total is {format_money(1375.0)}\n")
    assert f"Damages for RES were {format_money(375.0)}\n" in text
    assert f"Damages for COM were {format_money(1000.0)}\n" in text
    assert "Histogram for RES:\n" in text
    assert "Histogram for COM:\n" in text


def test_summary_writer_first_observation_only_opens_histogram():
    writer = SummaryResultsWriter(io.StringIO())
    writer.write(damage_result("RES", 100.0, 50.0))
    assert writer.histograms["RES"].count == 0
    writer.write(damage_result("RES", 100.0, 50.0))
    assert writer.histograms["RES"].count == 1


def test_virtual_writer_collects_json():
    writer = VirtualResultsWriter()
    result = damage_result("RES", 3.0, 4.0)
    writer.write(result)
    data = writer.getvalue()
    text = data.decode("utf-8")
    assert text.startswith('{"consequences":[')
    assert text.endswith(",]}")
    assert json.loads(text[len('{"consequences":[') : -len(",]}")]) == result.to_dict()
    assert writer.getvalue() == data


def test_virtual_writer_rejects_write_after_close():
    writer = VirtualResultsWriter()
    writer.close()
    with pytest.raises(ValueError):
        writer.write(damage_result("RES", 1.0, 1.0))


def test_aggregated_writer_groups_by_category_and_elevation(tmp_path):
    path = tmp_path / "stage.txt"
    writer = AggregatedStageDamageWriter.from_path(path)
    writer.set_aggregation_elevation(10.0)
    writer.write(Result(["damage category", "damage"], ["RES", 100.0]))
    writer.write(Result(["damage category", "damage"], ["RES", 150.0]))
    writer.set_aggregation_elevation(12.0)
    writer.write(Result(["damage category", "damage"], ["RES", 300.0]))
    writer.write(Result(["damage category", "damage"], ["COM", 50.0]))
    assert set(writer.histograms) == {"RES", "COM"}
    assert set(writer.histograms["RES"]) == {10.0, 12.0}
    assert writer.histograms["RES"][10.0].count == 2
    assert writer.histograms["RES"][12.0].count == 1
    assert writer.histograms["COM"][12.0].count == 1
    writer.close()
    assert writer.stream.closed
    assert path.exists()


def test_aggregated_writer_missing_fields(tmp_path):
    writer = AggregatedStageDamageWriter.from_path(tmp_path / "stage.txt")
    with pytest.raises(ValueError, match="damage category"):
        writer.write(Result(["damage"], [1.0]))
    with pytest.raises(ValueError, match="couldnt find the damage"):
        writer.write(Result(["damage category"], ["RES"]))
    writer.close()
    assert writer.histograms == {}