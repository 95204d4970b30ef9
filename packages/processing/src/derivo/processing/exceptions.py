"""Processing 异常体系

校验类错误（InvalidReference / InvalidArgument / NotFound）在任何网络请求之前同步抛出；
远端拒绝（非 303）在 resolve() 中转为 None + 日志，不以异常形式暴露。
"""


class ProcessingError(Exception):
    """Processing 包基础异常"""

    def __init__(self, message: str, recoverable: bool = False) -> None:
        """
        Args:
            message: 错误描述
            recoverable: 是否可通过重试恢复（调用方错误一律为 False）
        """
        super().__init__(message)
        self.recoverable = recoverable


class InvalidReferenceError(ProcessingError):
    """标识符或必填枚举参数缺失（None）"""

    def __init__(self, parameter: str) -> None:
        super().__init__(f"缺少必填参数: {parameter}")
        self.parameter = parameter


class InvalidArgumentError(ProcessingError):
    """参数非法：尺寸/时间越界，或媒体类型与操作不匹配"""


class ResourceNotFoundError(InvalidArgumentError):
    """引用的文档或附件不存在

    继承 InvalidArgumentError，捕获 InvalidArgumentError 的调用方同样能处理此情况。
    """

    def __init__(self, resource_id: str, resource_type: str = "document") -> None:
        super().__init__(f"{resource_type} 不存在: {resource_id}")
        self.resource_id = resource_id
        self.resource_type = resource_type


class RemoteRejectedError(ProcessingError):
    """处理服务返回非 303 响应（通常为 400 / 404）"""

    def __init__(self, url: str, status_code: int) -> None:
        super().__init__(f"处理服务拒绝请求 ({status_code}): {url}")
        self.url = url
        self.status_code = status_code


class TransportError(ProcessingError):
    """处理服务不可达（连接失败、超时、DNS 解析失败等）"""

    def __init__(self, url: str, original_error: Exception) -> None:
        """
        Args:
            url: 请求地址
            original_error: 原始异常
        """
        super().__init__(
            f"处理服务不可达: {url} -- {original_error}",
            recoverable=True,
        )
        self.url = url
        self.original_error = original_error


class InternalFaultError(ProcessingError):
    """URL 构造或编码失败 -- 属于本模块缺陷，调用方无法修正"""
