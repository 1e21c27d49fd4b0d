# -*- coding: utf-8 -*-
"""
Converts an NGO activity spreadsheet (.xlsx / .xlsm / .csv / .tsv / .txt)
into the CSV accepted by POST /api/v1/reports/upload.

- header names are matched loosely (accents, case, spacing, known aliases)
- blank lines are dropped
- for repeated (ngo_id, month) pairs the LAST line of the sheet wins,
  the same rule the upsert applies server side

Usage:
python scripts/datasets/reports_csv_creator.py \
  --input "relatorio_ongs_2025.xlsx" \
  --output "reports_upload.csv"

Requires: pandas, openpyxl
"""

from __future__ import annotations

import argparse
import re
import unicodedata
from pathlib import Path
from typing import Dict, Optional

import pandas as pd


OUTPUT_COLUMNS = [
    "ngo_id",
    "month",
    "people_helped",
    "events_conducted",
    "funds_utilized",
]

HEADER_ALIASES: Dict[str, str] = {
    "NGO ID": "ngo_id",
    "NGO": "ngo_id",
    "ONG": "ngo_id",
    "ORGANIZATION ID": "ngo_id",
    "MONTH": "month",
    "MES": "month",
    "REPORTING MONTH": "month",
    "PEOPLE HELPED": "people_helped",
    "BENEFICIARIES": "people_helped",
    "PESSOAS ATENDIDAS": "people_helped",
    "EVENTS CONDUCTED": "events_conducted",
    "EVENTS": "events_conducted",
    "EVENTOS": "events_conducted",
    "FUNDS UTILIZED": "funds_utilized",
    "FUNDS": "funds_utilized",
    "RECURSOS UTILIZADOS": "funds_utilized",
}


def strip_accents(text: str) -> str:
    text = unicodedata.normalize("NFKD", text or "")
    return "".join(ch for ch in text if not unicodedata.combining(ch))


def normalize_spaces(text: str) -> str:
    return re.sub(r"\s+", " ", (text or "")).strip()


def normalize_header_token(token: str) -> str:
    token = strip_accents(str(token)).upper().replace("_", " ")
    return normalize_spaces(token)


def map_header(token: str) -> Optional[str]:
    norm = normalize_header_token(token)
    if norm in HEADER_ALIASES:
        return HEADER_ALIASES[norm]
    snake = norm.lower().replace(" ", "_")
    return snake if snake in OUTPUT_COLUMNS else None


def to_str(v) -> str:
    if v is None:
        return ""
    if isinstance(v, float) and pd.isna(v):
        return ""
    return str(v).strip()


def load_table(input_path: Path) -> pd.DataFrame:
    suffix = input_path.suffix.lower()

    if suffix in [".xlsx", ".xlsm", ".xls"]:
        return pd.read_excel(input_path, dtype=str)

    if suffix == ".csv":
        # ';' first (spreadsheet exports in pt-BR locales), then ','
        df = pd.read_csv(input_path, dtype=str, sep=";")
        if len(df.columns) == 1:
            df = pd.read_csv(input_path, dtype=str, sep=",")
        return df

    if suffix in [".tsv", ".txt"]:
        return pd.read_csv(input_path, dtype=str, sep="\t")

    raise ValueError(f"Unsupported format: {suffix}")


def convert(input_path: Path, output_path: Path) -> pd.DataFrame:
    df = load_table(input_path)

    renamed = {}
    for col in df.columns:
        target = map_header(col)
        if target and target not in renamed.values():
            renamed[col] = target
    missing = [c for c in OUTPUT_COLUMNS if c not in renamed.values()]
    if missing:
        raise ValueError(f"Missing required columns: {', '.join(missing)}")

    df = df.rename(columns=renamed)[OUTPUT_COLUMNS]
    df = df.apply(lambda col: col.map(to_str))
    df = df[(df != "").any(axis=1)]
    df = df.drop_duplicates(subset=["ngo_id", "month"], keep="last")

    df.to_csv(output_path, index=False, encoding="utf-8")
    return df


def main() -> None:
    parser = argparse.ArgumentParser(description="Builds an upload-ready NGO reports CSV")
    parser.add_argument("--input", required=True, help="Spreadsheet or tabular text export")
    parser.add_argument("--output", required=True, help="CSV to write")
    args = parser.parse_args()

    input_path = Path(args.input)
    if not input_path.exists():
        raise FileNotFoundError(f"Input file not found: {input_path}")

    df = convert(input_path, Path(args.output))
    print(f"CSV written: {args.output}")
    print(f"Rows: {len(df)}")


if __name__ == "__main__":
    main()
