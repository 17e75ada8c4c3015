"""
播放列表编排器 - 按循环规则为每个索引选出下一个片段

索引 0 播放开场片段；能被 5 整除时播放随机过渡；能被 4 整除时播放随机故事；
其余位置优先播放过渡片段指定的歌曲，否则播放随机歌曲。
"""

import logging
import random
import time
from typing import Optional

from vegasbot.clips.clip_library import ClipLibrary
from vegasbot.clips.link_table import TransitionLinkTable
from vegasbot.core.interfaces import Clip, ClipCategory
from .playback_state import PlaybackState


def category_for_index(index: int) -> Optional[ClipCategory]:
    """
    返回索引对应的片段分类

    Args:
        index: 播放索引（从 0 开始）

    Returns:
        片段分类，索引 0（开场片段）返回 None
    """
    if index == 0:
        return None
    if index % 5 == 0:
        return ClipCategory.TRANSITION
    if index % 4 == 0:
        return ClipCategory.STORY
    return ClipCategory.SONG


class PlaylistSequencer:
    """
    播放列表编排器

    随机源默认在每次选择前用当前时间重新播种。
    """

    def __init__(
        self,
        library: ClipLibrary,
        link_table: TransitionLinkTable,
        state: PlaybackState,
        rng: Optional[random.Random] = None,
        reseed_each_iteration: bool = True
    ):
        """
        初始化编排器

        Args:
            library: 片段库
            link_table: 过渡-歌曲关联表
            state: 共享播放状态（读写指定歌曲槽位）
            rng: 随机源，默认使用当前时间播种的 Random
            reseed_each_iteration: 每次选择前是否重新播种
        """
        self.logger = logging.getLogger("vegasbot.playback.sequencer")
        self.library = library
        self.link_table = link_table
        self.state = state
        self.rng = rng or random.Random(time.time_ns())
        self.reseed_each_iteration = reseed_each_iteration

    def select(self, index: int) -> Clip:
        """
        选出索引对应的片段

        选中带关联的过渡片段时，会把关联的歌曲写入指定歌曲槽位。

        Args:
            index: 播放索引

        Returns:
            要播放的片段
        """
        if self.reseed_each_iteration:
            self.rng.seed(time.time_ns())

        category = category_for_index(index)

        if category is None:
            clip = self.library.opening
        elif category is ClipCategory.TRANSITION:
            clip = self.rng.choice(self.library.transitions)
            linked_song = self.link_table.lookup(clip.name)
            if linked_song:
                self.state.force_next_song(linked_song)
        elif category is ClipCategory.STORY:
            clip = self.rng.choice(self.library.stories)
        else:
            forced_song = self.state.take_forced_song()
            if forced_song:
                clip = self.library.get_song(forced_song)
            else:
                clip = self.rng.choice(self.library.songs)

        self.logger.debug(f"🎲 索引 {index}: {clip.name}")
        return clip
