"""
安全模块

MCP 能力令牌（capability token）的生成与比对
"""

import hmac
import secrets

TOKEN_BYTES = 32


def generate_capability_token() -> str:
    """生成 64 位十六进制随机令牌"""
    return secrets.token_hex(TOKEN_BYTES)


def tokens_match(candidate: str, expected: str) -> bool:
    """常量时间比较令牌"""
    if not candidate or not expected:
        return False
    return hmac.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))
