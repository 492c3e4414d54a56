from bridge_core.config.settings import settings

# 测试期间只保留控制台行为，不在工作目录生成 logs/bridge.log
settings.log_to_file = False
