"""
環境變數設定
"""

import os

# 輸入檔案編碼
INPUT_ENCODING = os.getenv("SLOWLOG_ENCODING", "utf-8")

# 預設日誌等級
LOG_LEVEL = os.getenv("SLOWLOG_LOG_LEVEL", "WARNING").upper()

# 上傳檔案大小上限 (MB)
MAX_UPLOAD_MB = int(os.getenv("SLOWLOG_MAX_UPLOAD_MB", "200"))
