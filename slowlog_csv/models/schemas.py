"""
資料結構定義
"""

from typing import List, Optional
from dataclasses import dataclass


# CSV 欄位順序 (固定)
CSV_COLUMNS = [
    "time",
    "user",
    "host",
    "thread_id",
    "schema",
    "qc_hit",
    "set_timestamp",
    "use_schema",
    "query",
    "query_time",
    "lock_time",
    "rows_sent",
    "rows_examined",
    "rows_affected",
    "bytes_sent",
]


@dataclass
class SlowQueryEntry:
    """單個慢查詢記錄，數值欄位保留原始文字"""
    time: Optional[str] = None
    user: str = ""
    host: str = ""
    thread_id: str = ""
    schema: Optional[str] = None
    qc_hit: str = ""
    set_timestamp: Optional[str] = None
    use_schema: Optional[str] = None
    query: str = ""
    query_time: Optional[str] = None
    lock_time: Optional[str] = None
    rows_sent: Optional[str] = None
    rows_examined: Optional[str] = None
    rows_affected: Optional[str] = None
    bytes_sent: Optional[str] = None

    def single_line_query(self) -> str:
        """將多行 SQL 壓成單行：逐行去除空白、略過空行、以單一空格連接"""
        return " ".join(
            line.strip() for line in self.query.splitlines() if line.strip()
        )

    def to_row(self, single_line: bool = False) -> List[str]:
        """
        依 CSV_COLUMNS 順序輸出欄位

        Args:
            single_line: 是否將 query 壓成單行

        Returns:
            List[str]: 欄位字串列表，缺少的值為空字串
        """
        row = []
        for column in CSV_COLUMNS:
            if column == "query" and single_line:
                value = self.single_line_query()
            else:
                value = getattr(self, column)
            row.append("" if value is None else value)
        return row


@dataclass
class ConversionState:
    """單次轉換的狀態，跨記錄沿用最後一次出現的時間"""
    last_time: Optional[str] = None
    entry_count: int = 0
    warning_count: int = 0
