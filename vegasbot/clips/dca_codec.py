"""
DCA 帧编解码 - 处理长度前缀的 Opus 帧序列

每一帧由一个小端序 16 位有符号长度前缀和等长的负载组成。
输入恰好在长度前缀边界处结束即表示片段结束。
"""

import struct
from typing import Iterable, List, Optional

from vegasbot.core.errors import LoadError

_LENGTH_PREFIX = struct.Struct("<h")
MAX_FRAME_SIZE = 32767


def decode_frames(data: bytes, clip_name: Optional[str] = None) -> List[bytes]:
    """
    将 DCA 字节流解码为帧列表

    Args:
        data: 原始字节数据
        clip_name: 片段名称（用于错误信息）

    Returns:
        按播放顺序排列的帧列表

    Raises:
        LoadError: 长度前缀或负载被截断，或长度为负数
    """
    frames: List[bytes] = []
    offset = 0
    total = len(data)

    while offset < total:
        if total - offset < _LENGTH_PREFIX.size:
            raise LoadError(
                f"帧 {len(frames)} 的长度前缀被截断 (偏移 {offset})",
                clip_name=clip_name
            )

        (frame_length,) = _LENGTH_PREFIX.unpack_from(data, offset)
        offset += _LENGTH_PREFIX.size

        if frame_length < 0:
            raise LoadError(
                f"帧 {len(frames)} 的长度无效: {frame_length}",
                clip_name=clip_name
            )

        end = offset + frame_length
        if end > total:
            raise LoadError(
                f"帧 {len(frames)} 的负载被截断: 需要 {frame_length} 字节, 实际 {total - offset} 字节",
                clip_name=clip_name
            )

        frames.append(data[offset:end])
        offset = end

    return frames


def encode_frames(frames: Iterable[bytes]) -> bytes:
    """
    将帧序列编码为 DCA 字节流

    Args:
        frames: 帧序列

    Returns:
        编码后的字节数据

    Raises:
        ValueError: 帧长度超过 16 位有符号整数范围
    """
    chunks = []
    for frame in frames:
        if len(frame) > MAX_FRAME_SIZE:
            raise ValueError(f"帧长度 {len(frame)} 超过最大值 {MAX_FRAME_SIZE}")
        chunks.append(_LENGTH_PREFIX.pack(len(frame)))
        chunks.append(bytes(frame))
    return b"".join(chunks)
