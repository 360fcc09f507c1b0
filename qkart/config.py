"""配置"""

import os

# 后端地址，所有接口路径都基于它
ENDPOINT = os.getenv('QKART_ENDPOINT', 'http://localhost:8082/api/v1').rstrip('/')

# 交给 HTTP 客户端的超时（秒）
TIMEOUT = float(os.getenv('QKART_TIMEOUT', '30'))

# 日志文件目录，设为空字符串时不写日志文件
LOG_DIR = os.getenv('QKART_LOG_DIR', 'logs')
LOG_LEVEL = os.getenv('QKART_LOG_LEVEL', 'DEBUG')
