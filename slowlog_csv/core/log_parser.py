"""
MariaDB 慢查詢 LOG 解析器

將 LOG 行切割為查詢記錄區塊，再從每個區塊擷取中繼資料欄位與 SQL 內容。
"""

import logging
import re
from datetime import datetime
from typing import Iterable, Iterator, List, Optional

from slowlog_csv.core.errors import MalformedRecord, UnparsableNumericField
from slowlog_csv.models.schemas import ConversionState, SlowQueryEntry

logger = logging.getLogger(__name__)

TIME_PREFIX = "# Time:"
USER_HOST_PREFIX = "# User@Host:"

# 標籤名稱 -> 欄位名稱 (不分大小寫)
LABELED_FIELDS = {
    "thread_id": "thread_id",
    "id": "thread_id",
    "schema": "schema",
    "qc_hit": "qc_hit",
    "query_time": "query_time",
    "lock_time": "lock_time",
    "rows_sent": "rows_sent",
    "rows_examined": "rows_examined",
    "rows_affected": "rows_affected",
    "bytes_sent": "bytes_sent",
}

DECIMAL_FIELDS = {"query_time", "lock_time"}
INTEGER_FIELDS = {"rows_sent", "rows_examined", "rows_affected", "bytes_sent"}

DECIMAL_VALUE = re.compile(r"^\d+(?:\.\d+)?$")
INTEGER_VALUE = re.compile(r"^-?\d+$")


def is_record_start(line: str) -> bool:
    return line.startswith(TIME_PREFIX) or line.startswith(USER_HOST_PREFIX)


def _only_time_header(block: List[str]) -> bool:
    return all(line.startswith(TIME_PREFIX) or not line.strip() for line in block)


def iter_record_blocks(lines: Iterable[str]) -> Iterator[List[str]]:
    """
    將 LOG 行切割為查詢記錄區塊

    每個區塊從 `# Time:` 或 `# User@Host:` 行開始，到下一個起始行之前結束。
    緊接在 `# Time:` 之後的 `# User@Host:` 屬於同一個區塊。
    第一個起始行之前的內容 (伺服器啟動訊息等) 直接捨棄。

    Args:
        lines: LOG 行 (檔案物件、StringIO 或字串列表)

    Returns:
        Iterator[List[str]]: 依序產生的區塊，每行已去除換行字元
    """
    block: List[str] = []
    for raw_line in lines:
        line = raw_line.rstrip("\r\n")
        if is_record_start(line):
            joins_time = line.startswith(USER_HOST_PREFIX) and block and _only_time_header(block)
            if block and not joins_time:
                yield block
                block = []
            block.append(line)
        elif block:
            block.append(line)
    if block:
        yield block


def format_log_time(raw_time: str) -> str:
    """
    將 MariaDB 的 "yymmdd H:M:S" 時間轉為 "YYYY-MM-DD HH:MM:SS"，其他格式原樣保留
    """
    combined = " ".join(raw_time.split())
    try:
        return datetime.strptime(combined, "%y%m%d %H:%M:%S").strftime("%Y-%m-%d %H:%M:%S")
    except ValueError:
        return raw_time


class LogParser:
    """MariaDB 慢查詢 LOG 解析器"""

    def __init__(self):
        self.user_host_pattern = re.compile(
            r"^# User@Host:\s*(?P<user>[^\[]*)\[(?P<priv>[^\]]*)\]"
            r"\s*@\s*(?P<host>[^\[\s]*)\s*\[(?P<ip>[^\]]*)\]"
            r"(?:\s+Id:\s*(?P<id>\S+))?"
        )
        self.loose_user_host_pattern = re.compile(r"^# User@Host:\s*(?P<user>.*?)\s*@\s*(?P<host>.*?)\s*$")
        # 中繼資料行的第一個標籤
        self.metadata_line_pattern = re.compile(r"^#\s*([A-Za-z_]+):")
        # `Key: value` 配對，值不得為下一個標籤
        self.label_pattern = re.compile(r"([A-Za-z_]+):(?:[ \t]+(?![A-Za-z_]+:)(\S+))?")
        # 陳述式須位於行首或緊接在 `;` 之後
        self.set_timestamp_pattern = re.compile(
            r"(?:^|(?<=;))[ \t]*SET\s+timestamp\s*=\s*(\d+)\s*;[ \t]*", re.IGNORECASE
        )
        self.use_schema_pattern = re.compile(
            r"(?:^|(?<=;))[ \t]*use\s+`?([^`;\s]+)`?\s*;[ \t]*", re.IGNORECASE
        )
        self.banner_patterns = [
            re.compile(r"^\S.*, Version: .*started with:\s*$"),
            re.compile(r"^Tcp port: \d+"),
            re.compile(r"^Time\s+Id\s+Command\s+Argument\s*$"),
        ]

    def parse_lines(self, lines: Iterable[str], state: Optional[ConversionState] = None) -> Iterator[SlowQueryEntry]:
        """
        逐區塊解析 LOG 行

        Args:
            lines: LOG 行
            state: 轉換狀態，未提供時建立新的狀態

        Returns:
            Iterator[SlowQueryEntry]: 每個區塊一筆記錄
        """
        if state is None:
            state = ConversionState()
        for block in iter_record_blocks(lines):
            yield self.parse_block(block, state)

    def parse_block(self, block: List[str], state: ConversionState) -> SlowQueryEntry:
        """
        解析單個記錄區塊

        第一個 SQL 行之前的 `#` 行視為中繼資料；之後的 `#` 行與空行都屬於 SQL 內容。

        Args:
            block: 區塊內的 LOG 行
            state: 轉換狀態，讀取並更新最後出現的時間

        Returns:
            SlowQueryEntry: 解析後的查詢記錄
        """
        state.entry_count += 1
        ordinal = state.entry_count
        parsed = SlowQueryEntry()
        own_time = None
        seen_user_host = False
        body: List[str] = []
        pending_blank: List[str] = []
        in_body = False

        for line in block:
            if not in_body and line.startswith("#"):
                # 中繼資料行之間的空行不屬於 SQL
                pending_blank = []
                if line.startswith(TIME_PREFIX):
                    raw_time = line[len(TIME_PREFIX):].strip()
                    if raw_time:
                        own_time = format_log_time(raw_time)
                elif line.startswith(USER_HOST_PREFIX):
                    seen_user_host = True
                    self._parse_user_host(line, parsed, state, ordinal)
                else:
                    self._parse_metadata_line(line, parsed, state, ordinal)
            elif not in_body and not line.strip():
                pending_blank.append(line)
            elif any(p.match(line) for p in self.banner_patterns):
                continue
            else:
                if not in_body:
                    body.extend(pending_blank)
                    in_body = True
                body.append(line)

        # 自身的時間優先，並更新沿用值
        if own_time is not None:
            state.last_time = own_time
        parsed.time = state.last_time

        parsed.set_timestamp, body = self._extract_statement(self.set_timestamp_pattern, body)
        parsed.use_schema, body = self._extract_statement(self.use_schema_pattern, body)
        parsed.query = "\n".join(body)

        if not seen_user_host:
            self._warn(state, ordinal, MalformedRecord("缺少 # User@Host: 行"))

        return parsed

    def _parse_user_host(self, line: str, parsed: SlowQueryEntry, state: ConversionState, ordinal: int):
        """解析 `# User@Host: user[user] @ host [ip]  Id: n`"""
        if m := self.user_host_pattern.match(line):
            parsed.user = m.group("user").strip() or m.group("priv").strip()
            parsed.host = m.group("host").strip() or m.group("ip").strip()
            if m.group("id"):
                parsed.thread_id = m.group("id")
            return

        m = self.loose_user_host_pattern.match(line)
        if m:
            parsed.user = m.group("user").split("[")[0].strip()
            parsed.host = m.group("host").strip("[] ")
        self._warn(state, ordinal, MalformedRecord(f"無法完整解析 User@Host 行: {line!r}"))

    def _parse_metadata_line(self, line: str, parsed: SlowQueryEntry, state: ConversionState, ordinal: int):
        """
        依標籤名稱擷取欄位，與欄位位置無關

        只處理第一個標籤為已知欄位的行，`# explain:`、`# Full_scan:` 等行略過。
        """
        m = self.metadata_line_pattern.match(line)
        if not m or m.group(1).lower() not in LABELED_FIELDS:
            return
        for label, value in self.label_pattern.findall(line):
            field = LABELED_FIELDS.get(label.lower())
            if field is None:
                continue
            try:
                setattr(parsed, field, self._check_value(field, value))
            except UnparsableNumericField as e:
                setattr(parsed, field, None)
                self._warn(state, ordinal, e)

    @staticmethod
    def _check_value(field: str, value: str) -> str:
        if not value:
            return value
        if field in DECIMAL_FIELDS and not DECIMAL_VALUE.match(value):
            raise UnparsableNumericField(field, value)
        if field in INTEGER_FIELDS and not INTEGER_VALUE.match(value):
            raise UnparsableNumericField(field, value)
        return value

    @staticmethod
    def _extract_statement(pattern, body: List[str]):
        """
        移出第一個符合的陳述式

        Returns:
            擷取的值 (無則 None) 與移除後的 SQL 行；整行只有該陳述式時整行移除
        """
        for i, line in enumerate(body):
            m = pattern.search(line)
            if m:
                rest = line[:m.start()] + line[m.end():]
                kept = [rest] if rest.strip() else []
                return m.group(1), body[:i] + kept + body[i + 1:]
        return None, body

    @staticmethod
    def _warn(state: ConversionState, ordinal: int, error: Exception):
        state.warning_count += 1
        logger.warning("第 %d 筆記錄: %s", ordinal, error)
