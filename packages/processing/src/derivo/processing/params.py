"""请求参数构造 -- resolution token 与处理服务请求 URL

纯函数，相同输入总是产生相同字符串（无时间戳、无随机数、参数顺序固定）。
"""

from urllib.parse import quote_plus

from .exceptions import InternalFaultError
from .models import FixedAxis, OperationKind

# 操作类型 -> 处理服务端点路径
ENDPOINT_PATHS: dict[OperationKind, str] = {
    OperationKind.THUMBNAIL: "/process/generic/thumbnail",
    OperationKind.IMAGE: "/process/image/resized",
    OperationKind.VIDEO_SNAPSHOT: "/process/video/still",
}


def build_resolution_token(size: int, axis: FixedAxis) -> str:
    """构造 resolution 参数值

    WIDTH 固定宽度: "{size}xY"；HEIGHT 固定高度: "Xx{size}"。
    未固定的一边由处理服务按原始比例计算。
    """
    if axis == FixedAxis.WIDTH:
        return f"{size}xY"
    return f"Xx{size}"


def encode_item(unique_resource_url: str) -> str:
    """UTF-8 表单编码资源 URL，作为 item 参数值

    保留字符集与处理服务端一致：仅 字母数字 和 ".-*_" 不编码，"~" 编码为 %7E，空格为 "+"。
    """
    try:
        encoded = quote_plus(unique_resource_url, safe="*", encoding="utf-8")
    except (TypeError, UnicodeEncodeError) as e:
        raise InternalFaultError(f"资源 URL 编码失败: {unique_resource_url!r}") from e
    # quote_plus 总是保留 "~"
    return encoded.replace("~", "%7E")


def format_timecode(time_fraction: float) -> str:
    # 总以浮点文本输出：1 -> "1.0"
    return repr(float(time_fraction))


def compose_request_url(
    service_url: str,
    operation: OperationKind,
    unique_resource_url: str,
    size_or_token: int | str,
    time_fraction: float | None = None,
) -> str:
    """拼装处理服务请求 URL

    Args:
        service_url: 服务基础 URL（不含结尾 "/"）
        operation: 操作类型
        unique_resource_url: 目标资源的唯一 URL
        size_or_token: 缩略图边长，或 image / video 的 resolution token
        time_fraction: 视频截帧时间点，仅 VIDEO_SNAPSHOT 使用

    Returns:
        形如 {service_url}/process/{domain}/{op}?item=...&async=false&... 的 URL 字符串
    """
    query = f"item={encode_item(unique_resource_url)}&async=false"

    if operation == OperationKind.THUMBNAIL:
        query += f"&size={size_or_token}"
    else:
        query += f"&resolution={size_or_token}"

    if operation == OperationKind.VIDEO_SNAPSHOT:
        if time_fraction is None:
            raise InternalFaultError("视频截帧请求缺少 timecode")
        query += f"&timecode={format_timecode(time_fraction)}"

    return f"{service_url}{ENDPOINT_PATHS[operation]}?{query}"
