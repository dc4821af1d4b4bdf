"""Base configuration class for data forms.

Provides hooks for applications to customize builder defaults.
"""

from typing import Dict, Optional
from dataclasses import dataclass, field


@dataclass
class DataFormConfig:
    """Base configuration for data form behavior.

    Applications can subclass this to provide custom configuration.

    Attributes:
        locale: Locale stamped on every compiled field and used to pick
            validation messages
        boolean_labels: Options offered by ``select:boolean`` fields
        date_formats: strftime patterns for the storage form of each
            string-backed date sub-type (``date:timestamp`` is stored as
            epoch milliseconds)
        node_id_length: Length of the random form and group ids
        dayfirst: Read ambiguous free-form dates such as "01.05.2024" as
            day first
    """

    locale: str = "en"
    boolean_labels: Dict[str, str] = field(
        default_factory=lambda: {"0": "No", "1": "Yes"}
    )
    date_formats: Dict[str, str] = field(
        default_factory=lambda: {
            "date": "%Y-%m-%d",
            "date:time": "%H:%M:%S",
            "date:datetime": "%Y-%m-%dT%H:%M:%S",
        }
    )
    node_id_length: int = 5
    dayfirst: bool = False


# Global config instance (set by application)
_form_config: Optional[DataFormConfig] = None


def set_form_config(config: Optional[DataFormConfig]) -> None:
    """Set the global data form configuration.

    Args:
        config: DataFormConfig instance, or None to restore defaults
    """
    global _form_config
    _form_config = config


def get_form_config() -> DataFormConfig:
    """Get the current data form configuration.

    Returns:
        Current DataFormConfig or default if not set
    """
    if _form_config is None:
        return DataFormConfig()
    return _form_config
