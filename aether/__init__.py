"""Aether Packet Manager (apm) - Aether 框架包管理器"""

__version__ = "0.1.0"
