"""
Exportación e importación de tablas (xlsx / csv) con pandas.
"""
import io
import json
import logging
from pathlib import Path

import pandas as pd
from openpyxl.utils import get_column_letter

from core import errors

logger = logging.getLogger(__name__)

FORMATS = {
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "csv": "text/csv",
}

# encabezados legibles para las columnas conocidas
COLUMN_LABELS = {
    "date": "Date",
    "branch": "Branch",
    "itemName": "Item",
    "itemType": "Item Type",
    "returned": "Returned",
    "sold": "Sold",
    "sales": "Sales",
    "expected": "Expected",
    "actualCash": "Actual Cash",
    "cardPayment": "Card Payment",
    "actual": "Actual",
    "difference": "Difference",
    "status": "Status",
    "senderBranch": "Sender",
    "receiverBranch": "Receiver",
    "itemCode": "Item Code",
    "quantity": "Quantity",
}


def rows_to_frame(rows, columns=None) -> pd.DataFrame:
    df = pd.DataFrame(list(rows), columns=columns)
    return df.rename(columns=COLUMN_LABELS)


def export_rows(rows, fmt="xlsx", sheet_name="Report", columns=None) -> bytes:
    if fmt not in FORMATS:
        raise errors.ValidationError(f"Unsupported export format: {fmt!r}")

    df = rows_to_frame(rows, columns)
    if fmt == "csv":
        return df.to_csv(index=False).encode("utf-8")

    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name)
        ws = writer.sheets[sheet_name]
        # ancho de columna según el contenido más largo
        for idx, col in enumerate(df.columns, start=1):
            values = [str(col)] + [str(v) for v in df[col].tolist()]
            ws.column_dimensions[get_column_letter(idx)].width = min(60, max(len(v) for v in values) + 2)
    logger.info("Export %s: %d filas", fmt, len(df))
    return buf.getvalue()


def read_records(path, sheet=None):
    """
    Lee una lista de dicts desde JSON, CSV o Excel.
    Las celdas vacías se devuelven como None.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(p)

    suffix = p.suffix.lower()
    if suffix == ".json":
        with open(p, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, list):
            raise ValueError("El JSON debe ser una lista de objetos.")
        return data

    if suffix in (".xlsx", ".xlsm"):
        df = pd.read_excel(p, sheet_name=sheet if sheet not in (None, "") else 0, engine="openpyxl")
    elif suffix in (".csv", ".tsv", ".txt"):
        df = pd.read_csv(p, sep="\t" if suffix == ".tsv" else ",")
    else:
        raise ValueError(f"Formato no soportado: {suffix}")

    df = df.astype(object).where(pd.notna(df), None)
    return df.to_dict(orient="records")
