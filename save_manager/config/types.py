"""Configuration schemas for save-manager."""

from __future__ import annotations

from dataclasses import dataclass


DEFAULT_DATE_FORMAT = "%m/%d %H:%M"


@dataclass
class SaveManagerConfig:
    """Main save-manager configuration."""
    data_dir: str | None = None
    date_format: str = DEFAULT_DATE_FORMAT
    activate_on_create: bool = True
    list_limit: int = 0  # 0 = show every version

    @classmethod
    def from_dict(cls, data: dict) -> SaveManagerConfig:
        """Create SaveManagerConfig from dictionary."""
        storage = data.get("storage", {})
        if not isinstance(storage, dict):
            storage = {}
        display = data.get("display", {})
        if not isinstance(display, dict):
            display = {}

        data_dir = storage.get("dataDir")
        date_format = display.get("dateFormat", DEFAULT_DATE_FORMAT)
        list_limit = display.get("listLimit", 0)
        activate = data.get("activateOnCreate", True)

        return cls(
            data_dir=data_dir if isinstance(data_dir, str) and data_dir.strip() else None,
            date_format=date_format if isinstance(date_format, str) and date_format else DEFAULT_DATE_FORMAT,
            activate_on_create=activate if isinstance(activate, bool) else True,
            list_limit=list_limit if isinstance(list_limit, int) and list_limit >= 0 else 0,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        data: dict = {
            "display": {
                "dateFormat": self.date_format,
                "listLimit": self.list_limit,
            },
            "activateOnCreate": self.activate_on_create,
        }
        if self.data_dir:
            data["storage"] = {"dataDir": self.data_dir}
        return data
