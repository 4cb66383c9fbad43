"""
命令列介面

    slowlog-csv --input mysql-slow.log --output slow.csv
    slowlog-csv -i mysql-slow.log > slow.csv
"""

import argparse
import logging
import sys
from contextlib import nullcontext
from typing import List, Optional

from slowlog_csv import __version__, config
from slowlog_csv.core.csv_writer import convert
from slowlog_csv.core.errors import InputUnavailable, OutputUnwritable, SlowLogError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="slowlog-csv",
        description="將 MariaDB 慢查詢 LOG 轉換為 CSV，每筆查詢一列，多行 SQL 以引號保留。",
    )
    parser.add_argument("-i", "--input", required=True, help="慢查詢 LOG 檔案路徑 (- 表示標準輸入)")
    parser.add_argument("-o", "--output", help="輸出 CSV 檔案路徑，未指定時輸出到標準輸出")
    parser.add_argument("--quote-all", action="store_true", help="所有欄位都加上引號")
    parser.add_argument("--single-line", action="store_true", help="將 query 欄位壓成單行")
    parser.add_argument("--encoding", default=config.INPUT_ENCODING, help="輸入檔案編碼 (預設: %(default)s)")
    parser.add_argument("-v", "--verbose", action="store_true", help="顯示詳細訊息")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def open_input(path: str, encoding: str):
    if path == "-":
        try:
            sys.stdin.reconfigure(encoding=encoding, errors="ignore")
        except LookupError as e:
            raise InputUnavailable(f"無法讀取標準輸入: {e}") from e
        return nullcontext(sys.stdin)
    try:
        return open(path, "r", encoding=encoding, errors="ignore")
    except (OSError, LookupError) as e:
        raise InputUnavailable(f"無法讀取輸入檔案 {path}: {e}") from e


def open_output(path: Optional[str]):
    if path is None:
        # 與檔案輸出相同，不轉換 CSV 的 \r\n
        sys.stdout.reconfigure(newline="")
        return nullcontext(sys.stdout)
    try:
        return open(path, "w", encoding="utf-8", newline="")
    except OSError as e:
        raise OutputUnwritable(f"無法寫入輸出檔案 {path}: {e}") from e


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else config.LOG_LEVEL,
        format="%(asctime)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    to_stdout = args.output is None
    if not to_stdout:
        print("開始轉換...", file=sys.stderr)
    print(f"輸入檔案: {args.input}", file=sys.stderr)
    if not to_stdout:
        print(f"輸出檔案: {args.output}", file=sys.stderr)

    try:
        with open_input(args.input, args.encoding) as infile, open_output(args.output) as outfile:
            state = convert(infile, outfile, quote_all=args.quote_all, single_line=args.single_line)
            outfile.flush()
    except SlowLogError as e:
        print(f"錯誤: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"錯誤: 轉換時發生 I/O 錯誤: {e}", file=sys.stderr)
        return 1

    if not to_stdout:
        print(f"✅ 已完成轉換，共 {state.entry_count} 筆慢查詢記錄", file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
