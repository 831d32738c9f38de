import csv
import io
import json
import math
from datetime import datetime
from typing import Any, Dict, List, Optional

import pytz


def utcnow() -> datetime:
    """当前UTC时间（带时区）"""
    return datetime.now(pytz.utc)


def format_timestamp(dt: datetime = None) -> str:
    """格式化时间戳"""
    if not dt:
        dt = utcnow()
    if dt.tzinfo is None:
        dt = pytz.utc.localize(dt)
    return dt.astimezone(pytz.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


def round_half_up(value: float) -> int:
    """四舍五入（0.5 向上取整），与前端 Math.round 一致"""
    return int(math.floor(value + 0.5))


def percent(part: float, total: float) -> int:
    """百分比，total为0时返回0"""
    if not total:
        return 0
    return round_half_up(part / total * 100)


def average_percentage(values: List[float]) -> int:
    """平均分，空列表返回0"""
    if not values:
        return 0
    return round_half_up(sum(values) / len(values))


def to_csv(rows: List[Dict[str, Any]]) -> str:
    """
    将字典列表转换为CSV文本

    表头取第一行的键顺序，所有字段加双引号，None输出为空字符串。
    空列表返回空字符串。
    """
    if not rows:
        return ""

    headers = list(rows[0].keys())
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow([_csv_value(row.get(header)) for header in headers])
    return buffer.getvalue().rstrip("\n")


def _csv_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def clamp(value: Optional[int], low: int, high: int) -> Optional[int]:
    """将数值限制在 [low, high] 区间"""
    if value is None:
        return None
    return max(low, min(high, value))
