"""Configuration manager for VegasBot."""
import logging
import os
from typing import Any, Dict, Optional
import yaml

from vegasbot.clips.clip_library import DEFAULT_OPENING_CLIP
from vegasbot.clips.link_table import DEFAULT_TRANSITION_LINKS


class ConfigManager:
    """
    Configuration manager for VegasBot.

    Handles loading and accessing configuration values from the config file.
    """

    def __init__(self, config_path: str = "config/config.yaml"):
        """
        Initialize the ConfigManager.

        Args:
            config_path: Path to the configuration file

        Raises:
            FileNotFoundError: If the configuration file does not exist
            yaml.YAMLError: If the configuration file is not valid YAML
        """
        self.logger = logging.getLogger("vegasbot.config")
        self.config_path = config_path
        self.config: Dict[str, Any] = {}

        self._load_config()

    def _load_config(self) -> None:
        """
        Load the configuration from the config file.

        Raises:
            FileNotFoundError: If the configuration file does not exist
            yaml.YAMLError: If the configuration file is not valid YAML
        """
        if not os.path.exists(self.config_path):
            example_path = f"{self.config_path}.example"
            if os.path.exists(example_path):
                self.logger.error(
                    f"Configuration file {self.config_path} not found. "
                    f"Please copy {example_path} to {self.config_path} and update it."
                )
            else:
                self.logger.error(f"Configuration file {self.config_path} not found.")
            raise FileNotFoundError(f"Configuration file {self.config_path} not found")

        try:
            with open(self.config_path, 'r', encoding='utf-8') as config_file:
                self.config = yaml.safe_load(config_file) or {}
                self.logger.debug(f"Loaded configuration from {self.config_path}")
        except yaml.YAMLError as e:
            self.logger.error(f"Error parsing configuration file: {e}")
            raise

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value.

        Args:
            key: The configuration key (dot notation for nested keys)
            default: Default value to return if the key is not found

        Returns:
            The configuration value or the default value if not found
        """
        keys = key.split('.')
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                self.logger.debug(f"Configuration key '{key}' not found, using default: {default}")
                return default

        return value

    def set_discord_token(self, token: str) -> None:
        """
        Override the Discord bot token (e.g. from the command line).

        Args:
            token: The Discord bot token
        """
        self.config.setdefault('discord', {})['token'] = token

    def get_discord_token(self) -> str:
        """
        Get the Discord bot token.

        Returns:
            The Discord bot token

        Raises:
            ValueError: If the Discord bot token is not set
        """
        token = self.get('discord.token')
        if not token or token == "YOUR_DISCORD_BOT_TOKEN_HERE":
            self.logger.error("Discord bot token not set in configuration")
            raise ValueError("Discord bot token not set in configuration")
        return token

    def get_command_prefix(self) -> str:
        return self.get('discord.command_prefix', '!')

    def get_radio_command_name(self) -> str:
        """
        Get the name of the radio command group (``!vegas <subcommand>``).
        """
        return self.get('radio.command_name', 'vegas')

    # Audio library
    def get_audio_root_dir(self) -> str:
        return self.get('audio.root_dir', './audio')

    def get_audio_category_dirs(self) -> Dict[str, str]:
        """
        Get the sub-directory names for each clip category.

        Returns:
            Mapping of category name ('song', 'story', 'transition') to directory name
        """
        return {
            'song': self.get('audio.songs_dir', 'Songs'),
            'story': self.get('audio.stories_dir', 'Stories'),
            'transition': self.get('audio.transitions_dir', 'Transitions'),
        }

    def get_opening_clip_name(self) -> str:
        return self.get('audio.opening_clip', DEFAULT_OPENING_CLIP)

    def get_transition_links(self) -> Dict[str, str]:
        """
        Get the transition -> song link table.

        Returns:
            The configured mapping, or the built-in table if none is configured
        """
        links = self.get('transitions.links', None)
        if links is None:
            return dict(DEFAULT_TRANSITION_LINKS)
        if not isinstance(links, dict):
            self.logger.warning("transitions.links is not a mapping, using built-in table")
            return dict(DEFAULT_TRANSITION_LINKS)
        return {str(k): str(v) for k, v in links.items()}

    # Playback
    def get_tick_interval(self) -> float:
        """
        Get the pacing tick between clips and while paused.

        Returns:
            Tick interval in seconds
        """
        return float(self.get('playback.tick_interval', 0.25))

    def get_frame_duration(self) -> float:
        """
        Get the real-time duration of one audio frame.

        Returns:
            Frame duration in seconds
        """
        return float(self.get('playback.frame_duration', 0.02))

    def should_reseed_each_iteration(self) -> bool:
        value = self.get('playback.reseed_each_iteration', True)
        if isinstance(value, str):
            # quoted YAML strings such as "false"
            return value.strip().lower() in ('true', 'yes', 'on', '1')
        return bool(value)

    # Logging
    def get_log_level(self) -> str:
        """
        Get the logging level.

        Returns:
            The logging level
        """
        return self.get('logging.level', 'INFO')

    def get_log_file(self) -> Optional[str]:
        """
        Get the log file path.

        Returns:
            The log file path or None if not set
        """
        return self.get('logging.file', None)

    def get_log_max_size(self) -> int:
        """
        Get the maximum log file size.

        Returns:
            The maximum log file size in bytes
        """
        return self.get('logging.max_size', 10485760)  # 10 MB

    def get_log_backup_count(self) -> int:
        """
        Get the number of backup log files to keep.

        Returns:
            The number of backup log files
        """
        return self.get('logging.backup_count', 5)
