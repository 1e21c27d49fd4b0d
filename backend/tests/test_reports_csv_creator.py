import csv
import importlib.util
from pathlib import Path

import pytest

pytest.importorskip("pandas")

SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "datasets" / "reports_csv_creator.py"


@pytest.fixture(scope="module")
def creator():
    spec = importlib.util.spec_from_file_location("reports_csv_creator", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_map_header_accepts_aliases(creator):
    assert creator.map_header("  Pessoas  Atendidas ") == "people_helped"
    assert creator.map_header("Mês") == "month"
    assert creator.map_header("funds_utilized") == "funds_utilized"
    assert creator.map_header("Notes") is None


def test_convert_tsv_export(creator, tmp_path):
    source = tmp_path / "export.tsv"
    source.write_text(
        "ONG\tMês\tPessoas Atendidas\tEventos\tRecursos Utilizados\tObs\n"
        "NGO1\tOct 2025\t10\t1\t100\tfirst\n"
        "\t\t\t\t\t\n"
        "NGO2\t10/1/2025\t5\t2\t50\t\n"
        "NGO1\tOct 2025\t12\t1\t120\tfixed\n",
        encoding="utf-8",
    )
    output = tmp_path / "upload.csv"

    creator.convert(source, output)

    with output.open(newline="", encoding="utf-8") as handle:
        rows = list(csv.DictReader(handle))
    assert list(rows[0]) == creator.OUTPUT_COLUMNS
    assert [(r["ngo_id"], r["people_helped"]) for r in rows] == [("NGO2", "5"), ("NGO1", "12")]


def test_convert_reports_missing_columns(creator, tmp_path):
    source = tmp_path / "partial.tsv"
    source.write_text("ONG\tMês\nNGO1\tOct 2025\n", encoding="utf-8")
    with pytest.raises(ValueError, match="people_helped, events_conducted, funds_utilized"):
        creator.convert(source, tmp_path / "out.csv")
