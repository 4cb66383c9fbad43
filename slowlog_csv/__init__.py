"""
MariaDB 慢查詢 LOG 轉 CSV 工具
"""

__version__ = "1.0.0"
