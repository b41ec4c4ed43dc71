"""
键值设置模型
"""
from sqlalchemy import Column, String, Text

from .base import Base


class Setting(Base):
    """应用设置（错题本阈值、AI 接口配置等），值统一存字符串"""
    __tablename__ = "settings"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)

    def __repr__(self):
        return f"<Setting(key='{self.key}')>"
