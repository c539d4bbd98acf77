"""
异常定义
"""


class ConfigurationError(RuntimeError):
    """缺少必需配置（启动即失败）"""


class UpstreamServiceError(RuntimeError):
    """外部服务调用失败: embedding / 向量检索 / 分类 / 转写"""
