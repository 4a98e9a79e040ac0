import csv
import io
import warnings
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import pandas as pd

from dashboard_engine.config import settings
from dashboard_engine.core.coercion import is_missing
from dashboard_engine.models import Column, ColumnType, Dataset, RowRecord
from dashboard_engine.utils.exceptions import DatasetError, FileProcessingError
from dashboard_engine.utils.logger import get_logger

logger = get_logger(__name__)


def _parse_dates(series: pd.Series) -> Optional[pd.Series]:
    """Parse an object column as dates; None if any value does not parse."""
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", UserWarning)
            return pd.to_datetime(series, dayfirst=settings.DATE_DAYFIRST)
    except (ValueError, TypeError, OverflowError):
        return None


def infer_column_type(series: pd.Series) -> ColumnType:
    """
    Map a pandas column to a dashboard column type.

    Booleans and low-cardinality strings are categories, numbers stay
    numbers, datetimes (or strings that all parse as dates) are dates.
    """
    if pd.api.types.is_bool_dtype(series):
        return ColumnType.CATEGORY
    if pd.api.types.is_numeric_dtype(series):
        return ColumnType.NUMBER
    if pd.api.types.is_datetime64_any_dtype(series):
        return ColumnType.DATE

    values = series.dropna()
    if values.empty:
        return ColumnType.TEXT
    if _parse_dates(values.astype(str)) is not None:
        return ColumnType.DATE

    unique = values.astype(str).nunique()
    if unique <= settings.CATEGORY_MAX_UNIQUE and unique / len(values) <= settings.CATEGORY_MAX_UNIQUE_RATIO:
        return ColumnType.CATEGORY
    return ColumnType.TEXT


def _cell(value: Any) -> Any:
    if is_missing(value):
        return None
    if hasattr(value, "item") and not isinstance(value, pd.Timestamp):
        # numpy scalar -> python scalar
        return value.item()
    return value


def dataset_from_frame(df: pd.DataFrame, name: str = "Untitled", file_name: Optional[str] = None) -> Dataset:
    """
    Build a Dataset from a DataFrame: one Column per frame column with an
    inferred type, one RowRecord per frame row (id = row position).
    """
    if df.columns.empty:
        raise DatasetError("The table has no columns.")

    frame = df.copy()
    frame.columns = [str(c).strip() for c in frame.columns]
    if frame.columns.duplicated().any():
        dupes = sorted(set(frame.columns[frame.columns.duplicated()]))
        raise DatasetError(f"Duplicate column names: {', '.join(dupes)}")

    columns = []
    for col in frame.columns:
        col_type = infer_column_type(frame[col])
        if col_type == ColumnType.DATE and not pd.api.types.is_datetime64_any_dtype(frame[col]):
            frame[col] = _parse_dates(frame[col])
        columns.append(Column(name=col, type=col_type))

    rows = [
        RowRecord(id=str(position), data={k: _cell(v) for k, v in record.items()})
        for position, record in enumerate(frame.to_dict(orient="records"))
    ]

    logger.info(f"Built dataset '{name}': {len(rows)} rows, {len(columns)} columns.")
    return Dataset(name=name, file_name=file_name, columns=columns, rows=rows)


def load_csv(file_content: bytes, filename: str, name: Optional[str] = None) -> Dataset:
    """
    Read uploaded CSV bytes into a Dataset.

    Raises:
        FileProcessingError: If the file is too large, empty or unreadable.
    """
    logger.info(f"Starting ingestion for file: {filename}")

    try:
        # 1. Validate File Size
        size_mb = len(file_content) / (1024 * 1024)
        if size_mb > settings.MAX_UPLOAD_SIZE_MB:
            raise FileProcessingError(f"File exceeds {settings.MAX_UPLOAD_SIZE_MB}MB limit.")

        # 2. Detect Separator
        # We decode a small chunk to sniff the delimiter
        try:
            decoded_chunk = file_content[:1024].decode('utf-8')
            delimiter = csv.Sniffer().sniff(decoded_chunk, delimiters=",;\t|").delimiter
        except (UnicodeDecodeError, csv.Error):
            delimiter = ','  # Fallback to comma

        logger.info(f"Detected delimiter: '{delimiter}'")

        # 3. Read CSV with detected delimiter
        df = pd.read_csv(io.BytesIO(file_content), sep=delimiter, on_bad_lines='warn', encoding='utf-8')

        # 4. Basic Validation
        if df.empty:
            raise FileProcessingError("The uploaded file contains no data.")

        dataset = dataset_from_frame(df, name=name or filename.rsplit(".", 1)[0], file_name=filename)
        logger.info(f"Ingestion successful. Shape: {df.shape}")
        return dataset

    except FileProcessingError:
        raise
    except Exception as e:
        logger.error(f"Error during ingestion: {str(e)}")
        raise FileProcessingError(f"Failed to parse CSV: {str(e)}")


def export_csv(
    rows: Sequence[Union[Mapping[str, Any], RowRecord]],
    columns: Iterable[Union[Column, str]],
) -> str:
    """CSV text of the given rows, columns in dataset order."""
    names: List[str] = [c.name if isinstance(c, Column) else str(c) for c in columns]
    records: List[Dict[str, Any]] = [
        dict(row.data if isinstance(row, RowRecord) else row) for row in rows
    ]
    return pd.DataFrame(records, columns=names).to_csv(index=False)
