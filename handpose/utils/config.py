"""
Configuration Management

Handles loading and merging configuration files.

Usage:
    from handpose.utils.config import load_config

    config = load_config('configs/default.yaml')
"""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass, field

from ..exceptions import ConfigError


@dataclass
class HandConfig:
    """Hand skeleton and pose threshold configuration."""
    num_landmarks: int = 21
    max_hands: int = 2
    close_threshold: float = 0.31
    apart_threshold: float = 0.75
    extent_ratio: float = 2.0
    mirror_handedness: bool = True


@dataclass
class PipelineConfig:
    """Frame processing configuration."""
    max_queue_size: int = 0  # 0 = unbounded
    log_poses: bool = True


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    log_file: Optional[str] = None


@dataclass
class Config:
    """Main configuration container."""
    project_name: str = "handpose"
    version: str = "1.0.0"

    # Sub-configurations
    hand: HandConfig = field(default_factory=HandConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, config_dict: Optional[Dict[str, Any]]) -> 'Config':
        """Create Config from dictionary."""
        config = cls()
        config_dict = config_dict or {}

        # Project settings
        project = config_dict.get('project', {})
        config.project_name = project.get('name', config.project_name)
        config.version = project.get('version', config.version)

        # Hand config
        hand = config_dict.get('hand', {})
        thresholds = hand.get('thresholds', {})
        config.hand = HandConfig(
            num_landmarks=hand.get('num_landmarks', 21),
            max_hands=hand.get('max_hands', 2),
            close_threshold=thresholds.get('close', 0.31),
            apart_threshold=thresholds.get('apart', 0.75),
            extent_ratio=hand.get('extent_ratio', 2.0),
            mirror_handedness=hand.get('mirror_handedness', True)
        )

        # Pipeline config
        pipeline = config_dict.get('pipeline', {})
        config.pipeline = PipelineConfig(
            max_queue_size=pipeline.get('max_queue_size', 0),
            log_poses=pipeline.get('log_poses', True)
        )

        # Logging config
        logging_cfg = config_dict.get('logging', {})
        config.logging = LoggingConfig(
            level=logging_cfg.get('level', 'INFO'),
            log_file=logging_cfg.get('log_file')
        )

        config.validate()
        return config

    def validate(self):
        """
        Check value ranges.

        Raises:
            ConfigError: If a value is out of range
        """
        hand = self.hand
        if hand.num_landmarks != 21:
            raise ConfigError(f"num_landmarks must be 21, got {hand.num_landmarks}")
        if not 1 <= hand.max_hands <= 2:
            raise ConfigError(f"max_hands must be 1 or 2, got {hand.max_hands}")
        if hand.close_threshold <= 0 or hand.apart_threshold <= 0:
            raise ConfigError("Pose thresholds must be positive")
        if hand.close_threshold > hand.apart_threshold:
            raise ConfigError(
                f"close threshold ({hand.close_threshold}) must not exceed "
                f"apart threshold ({hand.apart_threshold})"
            )
        if hand.extent_ratio <= 0:
            raise ConfigError(f"extent_ratio must be positive, got {hand.extent_ratio}")
        if self.pipeline.max_queue_size < 0:
            raise ConfigError("max_queue_size must be non-negative")


def load_config(config_path: str) -> Config:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to YAML config file

    Returns:
        Config object
    """
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path, 'r') as f:
        config_dict = yaml.safe_load(f)

    return Config.from_dict(config_dict)


def merge_configs(base: Dict, override: Dict) -> Dict:
    """
    Merge two config dictionaries.

    Args:
        base: Base configuration
        override: Override values

    Returns:
        Merged configuration
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value

    return result


def config_to_dict(config: Config) -> Dict[str, Any]:
    """Convert Config to the nested dictionary layout used on disk."""
    return {
        'project': {
            'name': config.project_name,
            'version': config.version
        },
        'hand': {
            'num_landmarks': config.hand.num_landmarks,
            'max_hands': config.hand.max_hands,
            'extent_ratio': config.hand.extent_ratio,
            'mirror_handedness': config.hand.mirror_handedness,
            'thresholds': {
                'close': config.hand.close_threshold,
                'apart': config.hand.apart_threshold
            }
        },
        'pipeline': {
            'max_queue_size': config.pipeline.max_queue_size,
            'log_poses': config.pipeline.log_poses
        },
        'logging': {
            'level': config.logging.level,
            'log_file': config.logging.log_file
        }
    }


def save_config(config: Config, path: str):
    """Save configuration to YAML file."""
    with open(path, 'w') as f:
        yaml.dump(config_to_dict(config), f, default_flow_style=False)
