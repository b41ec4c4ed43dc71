"""
qbank - 题库管理后端

题库、题目录入与导入（手动 / CSV / AI 解析）、练习与错题本。
"""

__version__ = "0.1.0"
