"""
資料模型模組
"""

from slowlog_csv.models.schemas import CSV_COLUMNS, ConversionState, SlowQueryEntry

__all__ = ['SlowQueryEntry', 'ConversionState', 'CSV_COLUMNS']
