"""
RandomnessWTF - 链上随机数演示服务
"""

__version__ = "1.0.0"
