"""
錯誤類型
"""


class SlowLogError(Exception):
    """轉換錯誤基底類別"""


class InputUnavailable(SlowLogError):
    """輸入檔案不存在或無法讀取 (致命)"""


class OutputUnwritable(SlowLogError):
    """輸出位置無法建立或寫入 (致命)"""


class MalformedRecord(SlowLogError):
    """記錄缺少預期的中繼資料，欄位以空字串輸出"""


class UnparsableNumericField(SlowLogError):
    """數值欄位無法解析，欄位以空字串輸出"""

    def __init__(self, field: str, value: str):
        super().__init__(f"{field} 無法解析為數值: {value!r}")
        self.field = field
        self.value = value
