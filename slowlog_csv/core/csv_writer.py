"""
CSV 輸出
"""

import csv
import logging
from typing import Iterable, Optional, TextIO

from slowlog_csv.core.log_parser import LogParser
from slowlog_csv.models.schemas import CSV_COLUMNS, ConversionState, SlowQueryEntry

logger = logging.getLogger(__name__)


class SlowLogCsvWriter:
    """將查詢記錄寫成 RFC 4180 格式的 CSV"""

    def __init__(self, stream: TextIO, quote_all: bool = False, single_line: bool = False):
        self.single_line = single_line
        self.writer = csv.writer(
            stream,
            quoting=csv.QUOTE_ALL if quote_all else csv.QUOTE_MINIMAL,
            lineterminator="\r\n",
        )

    def write_header(self):
        self.writer.writerow(CSV_COLUMNS)

    def write_entry(self, entry: SlowQueryEntry):
        self.writer.writerow(entry.to_row(single_line=self.single_line))


def convert(
    lines: Iterable[str],
    stream: TextIO,
    quote_all: bool = False,
    single_line: bool = False,
    parser: Optional[LogParser] = None,
) -> ConversionState:
    """
    單次轉換：先寫標題列，再逐區塊寫出一列

    Args:
        lines: LOG 行
        stream: 輸出的文字串流 (開啟時需指定 newline="")
        quote_all: 是否所有欄位都加上引號
        single_line: 是否將 query 壓成單行
        parser: 自訂解析器，未提供時使用預設

    Returns:
        ConversionState: 轉換結束時的狀態 (記錄數、警告數、最後時間)
    """
    parser = parser or LogParser()
    state = ConversionState()
    writer = SlowLogCsvWriter(stream, quote_all=quote_all, single_line=single_line)

    writer.write_header()
    for entry in parser.parse_lines(lines, state):
        writer.write_entry(entry)

    logger.info("已轉換 %d 筆記錄 (警告 %d 筆)", state.entry_count, state.warning_count)
    return state
