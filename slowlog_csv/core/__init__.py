"""
核心解析模組
"""
