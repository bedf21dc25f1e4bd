"""
参数校验基础函数

只依赖基本类型解析，供工具输入 schema 和有序集合协调器共用。
所有函数在校验失败时抛出 ArgumentError（ValueError 子类），
pydantic 校验器会将其包装为 ValidationError
"""

from collections.abc import Iterable
from typing import Any, Collection, List, Optional

# 数据库整型列上限（64 位有符号）
MAX_ID = 2**63 - 1


class ArgumentError(ValueError):
    """参数不合法"""


def coerce_int(value: Any) -> Optional[int]:
    """
    将值转换为整数，无法无损转换时返回 None

    接受 int、整数值的 float、以及去除空白后为整数的字符串；
    bool 不视为整数
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text[0] in "+-":
            sign, digits = text[0], text[1:]
        else:
            sign, digits = "", text
        if digits.isascii() and digits.isdigit():
            return int(sign + digits)
    return None


def parse_positive_int(value: Any, field: str) -> int:
    """解析严格正整数"""
    if value is None:
        raise ArgumentError(f"{field} is required")

    number = coerce_int(value)
    if number is None:
        raise ArgumentError(f"{field} must be an integer, got {value!r}")
    if number <= 0:
        raise ArgumentError(f"{field} must be a positive integer, got {number}")
    if number > MAX_ID:
        raise ArgumentError(f"{field} must not exceed {MAX_ID}, got {number}")
    return number


def parse_non_negative_int(value: Any, field: str) -> int:
    """解析非负整数（如 task_limit，0 表示不限）"""
    number = coerce_int(value)
    if number is None:
        raise ArgumentError(f"{field} must be an integer, got {value!r}")
    if number < 0:
        raise ArgumentError(f"{field} must not be negative, got {number}")
    if number > MAX_ID:
        raise ArgumentError(f"{field} must not exceed {MAX_ID}, got {number}")
    return number


def parse_enum_int(value: Any, field: str, allowed: Collection[int]) -> int:
    """解析取值受限的整数枚举"""
    number = coerce_int(value)
    if number is None:
        raise ArgumentError(f"{field} must be an integer, got {value!r}")
    if number not in allowed:
        choices = ", ".join(str(choice) for choice in sorted(allowed))
        raise ArgumentError(f"{field} must be one of [{choices}], got {number}")
    return number


def parse_required_text(value: Any, field: str) -> str:
    """解析必填字符串（去除首尾空白后不能为空）"""
    if not isinstance(value, str):
        raise ArgumentError(f"{field} must be a string")
    text = value.strip()
    if not text:
        raise ArgumentError(f"{field} must not be empty")
    return text


def parse_id_sequence(value: Any, field: str) -> List[int]:
    """
    解析 ID 序列

    接受 list/tuple、逗号分隔字符串或任意可迭代对象，
    每个元素必须是严格正整数，不能为空，不能重复
    """
    if value is None:
        raise ArgumentError(f"{field} is required")

    if isinstance(value, str):
        items: List[Any] = [part.strip() for part in value.split(",")]
        if not any(items):
            items = []
    elif isinstance(value, (bytes, dict)) or not isinstance(value, Iterable):
        raise ArgumentError(f"{field} must be a list of positive integers")
    else:
        items = list(value)

    if not items:
        raise ArgumentError(f"{field} must not be empty")

    ids: List[int] = []
    for index, item in enumerate(items):
        number = coerce_int(item)
        if number is None or number <= 0 or number > MAX_ID:
            raise ArgumentError(
                f"{field}[{index}] must be a positive integer, got {item!r}"
            )
        ids.append(number)

    seen = set()
    duplicates = set()
    for number in ids:
        if number in seen:
            duplicates.add(number)
        seen.add(number)
    if duplicates:
        raise ArgumentError(f"{field} contains duplicate ids: {sorted(duplicates)}")

    return ids
