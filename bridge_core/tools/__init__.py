"""工具系统：定义规范化、内置处理器与执行器。"""
