"""
Configuration for building Criteria from YAML.

A single criteria block looks like:

    negate: false
    auto_refresh: true
    rules:
      - name: Christmas Day
        rule: "month == 12; day == 25"
      - name: Easter Monday
        rule: "Date == Easter + 1"
      - rule: "DayOfWeek == Saturday"

A calendars file holds several named blocks under a top-level 'calendars' key.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import yaml

from .criteria import Criteria, read_flag

logger = logging.getLogger(__name__)


def _read_yaml(yaml_path: Union[str, Path]) -> Dict[str, Any]:
    yaml_path = Path(yaml_path)
    if not yaml_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {yaml_path}")
    try:
        with open(yaml_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing {yaml_path}: {e}")
    if not isinstance(data, dict):
        raise ValueError(f"Error parsing {yaml_path}: expected a mapping at top level")
    return data


@dataclass
class CriteriaConfig:
    """
    Configuration for one Criteria.

    Attributes:
        negate: Negate the whole criteria.
        auto_refresh: Recompute cached results after rule additions.
        rules: List of rule entries; each is rule text or a dict with 'rule', 'negate', 'name'.
        name: Optional name of the calendar this config describes.
    """
    negate: bool = False
    auto_refresh: bool = True
    rules: List[Union[str, Dict[str, Any]]] = field(default_factory=list)
    name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], name: Optional[str] = None) -> CriteriaConfig:
        """
        Create configuration from a dictionary.

        Args:
            data: Dictionary with optional 'negate', 'auto_refresh' and 'rules' keys.
            name: Optional calendar name.

        Returns:
            CriteriaConfig instance
        """
        rules = data.get('rules') or []
        if not isinstance(rules, list):
            raise ValueError(f"'rules' must be a list, got {type(rules).__name__}")
        return cls(
            negate=read_flag(data, 'negate'),
            auto_refresh=read_flag(data, 'auto_refresh', default=True),
            rules=list(rules),
            name=name,
        )

    @classmethod
    def from_yaml(cls, yaml_path: Union[str, Path]) -> CriteriaConfig:
        """
        Load configuration from a YAML file holding a single criteria block.

        Args:
            yaml_path: Path to YAML config file.

        Returns:
            CriteriaConfig: Configuration instance loaded from YAML.
        """
        data = _read_yaml(yaml_path)
        logger.info(f"Loaded criteria config from {yaml_path}")
        return cls.from_dict(data, name=data.get('name'))

    def build(self) -> Criteria:
        """
        Compile the configured rules into a Criteria.

        Rules are loaded with the cache refresh deferred, then auto_refresh is
        restored to the configured value.

        Raises:
            CompileError: If any rule is malformed.
        """
        criteria = Criteria(negate=self.negate, auto_refresh=False)
        criteria.add_rules(self.rules)
        criteria.auto_refresh = self.auto_refresh
        logger.debug(f"Built criteria '{self.name or ''}' with {len(criteria)} rule(s)")
        return criteria


def load_calendars(yaml_path: Union[str, Path]) -> Dict[str, Criteria]:
    """
    Load every named calendar from a YAML file.

    The file must have a top-level 'calendars' mapping of name -> criteria block.

    Args:
        yaml_path: Path to YAML file.

    Returns:
        Dict[str, Criteria]: Compiled criteria by calendar name.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the YAML is invalid or has no 'calendars' mapping.
        CompileError: If any rule is malformed.
    """
    data = _read_yaml(yaml_path)
    calendars = data.get('calendars')
    if not isinstance(calendars, dict):
        raise ValueError(f"Error parsing {yaml_path}: missing 'calendars' mapping")

    result: Dict[str, Criteria] = {}
    for name, block in calendars.items():
        if block is not None and not isinstance(block, dict):
            raise ValueError(f"Error parsing {yaml_path}: calendar '{name}' must be a mapping")
        config = CriteriaConfig.from_dict(block or {}, name=str(name))
        result[str(name)] = config.build()
    logger.info(f"Loaded {len(result)} calendar(s) from {yaml_path}")
    return result
