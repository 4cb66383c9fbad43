from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from slowlog_csv import __version__
from slowlog_csv.api.convert import create_convert_routes
from slowlog_csv.core.log_parser import LogParser
from slowlog_csv.models.schemas import CSV_COLUMNS

app = FastAPI(title="MariaDB Slow Query LOG → CSV", version=__version__)

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

app.include_router(create_convert_routes(LogParser()))


@app.get("/", response_class=HTMLResponse)
async def read_root(request: Request):
    return templates.TemplateResponse(request, "index.html", {
        "columns": CSV_COLUMNS,
        "version": __version__,
    })


if __name__ == "__main__":
    import uvicorn
    print("🚀 啟動慢查詢 LOG 轉 CSV 服務...")
    print("📊 服務器地址: http://localhost:8000")
    uvicorn.run(app, host="0.0.0.0", port=8000)
