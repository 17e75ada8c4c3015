"""
过渡-歌曲关联表 - 指定某些过渡片段之后必须播放的歌曲
"""

import logging
from typing import Dict, Mapping, Optional

from vegasbot.core.errors import LoadError


DEFAULT_TRANSITION_LINKS: Dict[str, str] = {
    "BlueMoonTransition.dca": "BlueMoon.dca",
    "HeartacheTrans.dca": "Heartaches.dca",
    "JingleTrans.dca": "JingleJangle.dca",
    "JohnnyTrans.dca": "JohnnyGuitar.dca",
    "KickTrans.dca": "AintThat.dca",
    "LoveMeTrans.dca": "LoveMe.dca",
    "MadAboutTrans.dca": "MadAbout.dca",
    "SinTrans.dca": "SinLie.dca",
    "SomethingsTrans.dca": "SomethingsGotta.dca",
}


class TransitionLinkTable:
    """
    过渡片段到歌曲的静态映射

    构建后只读，查询未命中是合法结果。
    """

    def __init__(self, links: Optional[Mapping[str, str]] = None):
        self.logger = logging.getLogger("vegasbot.clips.links")
        self._links: Dict[str, str] = dict(DEFAULT_TRANSITION_LINKS if links is None else links)

    def lookup(self, transition_name: str) -> Optional[str]:
        """返回过渡片段关联的歌曲名，未关联时返回 None"""
        return self._links.get(transition_name)

    def validate(self, library) -> None:
        """
        校验每个键都是已存在的过渡片段，每个值都是已存在的歌曲

        Args:
            library: 已加载的片段库

        Raises:
            LoadError: 关联表引用了不存在的片段
        """
        for transition_name, song_name in self._links.items():
            if not library.has_transition(transition_name):
                raise LoadError(
                    f"关联表引用了不存在的过渡片段: {transition_name}",
                    clip_name=transition_name
                )
            if not library.has_song(song_name):
                raise LoadError(
                    f"过渡片段 {transition_name} 关联了不存在的歌曲: {song_name}",
                    clip_name=song_name
                )

        self.logger.info(f"✅ 过渡关联表校验通过: {len(self._links)} 条")
