"""
LOG 轉 CSV 相關 API 路由
"""

import io
from pathlib import Path
from urllib.parse import quote

from fastapi import APIRouter, UploadFile, File, Form, HTTPException
from fastapi.responses import Response

from slowlog_csv import config
from slowlog_csv.core.csv_writer import convert
from slowlog_csv.core.log_parser import LogParser
from slowlog_csv.models.schemas import CSV_COLUMNS

router = APIRouter(prefix="/api", tags=["convert"])


def create_convert_routes(log_parser: LogParser):
    """創建轉換相關路由"""

    @router.post("/convert")
    async def convert_log(
        file: UploadFile = File(...),
        quote_all: bool = Form(False),
        single_line: bool = Form(False)
    ):
        """上傳慢查詢 LOG 並回傳 CSV"""

        content = await file.read()
        if not content:
            raise HTTPException(status_code=400, detail="上傳的檔案沒有內容")

        if len(content) > config.MAX_UPLOAD_MB * 1024 * 1024:
            raise HTTPException(status_code=413, detail=f"檔案超過 {config.MAX_UPLOAD_MB} MB 上限")

        # 確保檔案名稱不為 None
        filename = file.filename or "unknown_file"

        try:
            log_content = content.decode("utf-8", errors="ignore")
            output = io.StringIO()
            state = convert(
                io.StringIO(log_content),
                output,
                quote_all=quote_all,
                single_line=single_line,
                parser=log_parser,
            )
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"處理檔案時發生錯誤: {str(e)}")

        csv_name = f"{Path(filename).stem or 'slow_log'}.csv"
        return Response(
            content=output.getvalue(),
            media_type="text/csv",
            headers={
                "Content-Disposition": f"attachment; filename*=UTF-8''{quote(csv_name)}",
                "X-Entry-Count": str(state.entry_count),
                "X-Warning-Count": str(state.warning_count),
            },
        )

    @router.get("/columns")
    async def get_columns():
        """CSV 欄位名稱"""
        return CSV_COLUMNS

    return router
