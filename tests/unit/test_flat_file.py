from __future__ import annotations

import logging
import os
import random
import stat
from pathlib import Path

import pytest

from sales_insight.domain.errors import RecordFormatError
from sales_insight.index.avl import ProductIndex
from sales_insight.storage.flat_file import (
    format_line,
    load_index,
    parse_line,
    read_records,
    save_index,
)

ROUND_TRIP_SEED = 99
ROUND_TRIP_COUNT = 60


def _snapshot(index: ProductIndex) -> list[tuple]:
    return [
        (
            r.id,
            r.name,
            r.weight,
            r.color,
            r.location,
            r.units_sold,
            r.price,
            tuple(r.past_sales.values),
        )
        for r in index
    ]


class TestLineCodec:
    def test_format_line_pads_window_with_sentinel(self, make_record):
        record = make_record(
            7,
            name="Mug",
            weight=0.3,
            color="red",
            location="South",
            units_sold=40,
            price=4.5,
            past_sales=[10, 20],
        )

        assert format_line(record) == "7,Mug,0.30,red,South,40,4.50,10,20,-1,-1,-1,2"

    def test_parse_line_restores_window_raw(self):
        record = parse_line("10,Mug,0.30,red,South,40,4.50,10,20,30,-1,-1,3\n")

        assert record.id == 10
        assert record.name == "Mug"
        assert record.weight == pytest.approx(0.3)
        assert record.units_sold == 40
        assert record.price == pytest.approx(4.5)
        assert record.past_sales.values == [10, 20, 30]

    def test_parse_line_uses_only_counted_slots(self):
        record = parse_line("1,A,1.00,c,L,0,1.00,5,6,7,8,9,2")

        assert record.past_sales.values == [5, 6]

    @pytest.mark.parametrize(
        "line",
        [
            "1,Mug,0.30,red,South,40,4.50",
            "x,Mug,0.30,red,South,40,4.50,-1,-1,-1,-1,-1,0",
            "1,Mug,heavy,red,South,40,4.50,-1,-1,-1,-1,-1,0",
            "1,Mug,0.30,red,South,40,4.50,-1,-1,-1,-1,-1,6",
            "1,Mug,0.30,red,South,40,4.50,-1,-1,-1,-1,-1,-1",
            "1,Big, Mug,0.30,red,South,40,4.50,-1,-1,-1,-1,-1,0",
        ],
    )
    def test_parse_line_rejects_malformed(self, line):
        with pytest.raises(RecordFormatError):
            parse_line(line)

    def test_format_line_warns_on_embedded_separator(self, make_record, caplog):
        record = make_record(1, name="Big, Mug")

        with caplog.at_level(logging.WARNING, logger="sales_insight.storage.flat_file"):
            format_line(record)

        assert any(getattr(r, "field", None) == "name" for r in caplog.records)


class TestReadRecords:
    def test_skips_malformed_and_blank_lines(self, caplog):
        lines = [
            "1,A,1.00,c,L,0,1.00,-1,-1,-1,-1,-1,0\n",
            "\n",
            "garbage\n",
            "2,B,1.00,c,L,0,1.00,-1,-1,-1,-1,-1,0\n",
        ]

        with caplog.at_level(logging.WARNING):
            records, skipped = read_records(lines)

        assert [r.id for r in records] == [1, 2]
        assert skipped == 1
        assert [getattr(r, "line_number", None) for r in caplog.records] == [3]

    def test_skips_line_that_is_not_utf8(self, caplog):
        lines = [
            b"1,Mug,1.00,c,L,0,1.00,-1,-1,-1,-1,-1,0\n",
            b"2,Caf\xe9,1.00,c,L,0,1.00,-1,-1,-1,-1,-1,0\n",
        ]

        with caplog.at_level(logging.WARNING):
            records, skipped = read_records(lines)

        assert [r.id for r in records] == [1]
        assert skipped == 1
        assert "UTF-8" in getattr(caplog.records[0], "reason", "")

    def test_load_index_skips_undecodable_line(self, data_file: Path):
        data_file.write_bytes(
            b"1,Mug,1.00,c,L,0,1.00,-1,-1,-1,-1,-1,0\n"
            b"2,Caf\xe9,1.00,c,L,0,1.00,-1,-1,-1,-1,-1,0\n"
        )

        index, report = load_index(data_file)

        assert index.ids() == [1]
        assert report.skipped == 1


class TestLoadSave:
    def test_missing_file_is_empty_index(self, tmp_path: Path):
        index, report = load_index(tmp_path / "absent.txt")

        assert len(index) == 0
        assert report.loaded == 0
        assert report.skipped == 0

    def test_load_builds_balanced_index(self, data_file: Path, sample_lines):
        data_file.write_text("\n".join(sample_lines) + "\n", encoding="utf-8")

        index, report = load_index(data_file)

        assert report.loaded == 3
        assert index.ids() == [10, 20, 30]
        assert index.search(10).past_sales.values == [10, 20, 30]
        assert index.search(30).past_sales.values == []
        index.check_invariants()

    def test_load_keeps_first_of_duplicate_ids(self, data_file: Path):
        data_file.write_text(
            "1,First,1.00,c,L,5,1.00,-1,-1,-1,-1,-1,0\n"
            "1,Second,1.00,c,L,9,1.00,3,-1,-1,-1,-1,1\n",
            encoding="utf-8",
        )

        index, report = load_index(data_file)

        assert report.duplicates == 1
        assert len(index) == 1
        assert index.search(1).name == "First"
        assert index.search(1).past_sales.values == []

    def test_save_writes_ascending_ids(self, data_file: Path, build_index):
        index = build_index([30, 10, 50, 20, 40])

        written = save_index(index, data_file)

        lines = data_file.read_text(encoding="utf-8").splitlines()
        assert written == 5
        assert [int(line.split(",")[0]) for line in lines] == [10, 20, 30, 40, 50]

    def test_save_empty_index_writes_empty_file(self, data_file: Path):
        assert save_index(ProductIndex(), data_file) == 0
        assert data_file.read_text(encoding="utf-8") == ""

    def test_save_leaves_no_temp_files(self, data_file: Path, build_index):
        save_index(build_index([1, 2]), data_file)

        assert sorted(p.name for p in data_file.parent.iterdir()) == [data_file.name]

    @pytest.mark.skipif(os.name != "posix", reason="POSIX permission bits")
    def test_save_keeps_existing_file_mode(self, data_file: Path, build_index):
        data_file.write_text("", encoding="utf-8")
        data_file.chmod(0o644)

        save_index(build_index([1]), data_file)

        assert oct(stat.S_IMODE(data_file.stat().st_mode)) == oct(0o644)

    @pytest.mark.skipif(os.name != "posix", reason="POSIX permission bits")
    def test_save_new_file_uses_umask_default(self, data_file: Path, build_index):
        old_umask = os.umask(0o022)
        try:
            save_index(build_index([1]), data_file)
        finally:
            os.umask(old_umask)

        assert oct(stat.S_IMODE(data_file.stat().st_mode)) == oct(0o644)

    def test_round_trip_preserves_records(self, data_file: Path, make_record):
        rng = random.Random(ROUND_TRIP_SEED)
        index = ProductIndex()
        for product_id in rng.sample(range(1, 1_000), ROUND_TRIP_COUNT):
            history = [rng.randint(0, 100) for _ in range(rng.randint(0, 5))]
            index.insert(
                make_record(
                    product_id,
                    past_sales=history,
                    units_sold=rng.randint(0, 500),
                    price=round(rng.uniform(1, 100), 2),
                    weight=round(rng.uniform(0.1, 9.9), 2),
                    location=rng.choice(["North", "South"]),
                )
            )

        save_index(index, data_file)
        loaded, report = load_index(data_file)

        assert report.loaded == ROUND_TRIP_COUNT
        assert _snapshot(loaded) == _snapshot(index)
        loaded.check_invariants()
