import json
from pathlib import Path
from typing import Dict, Union

from loguru import logger


class AddressLabelRepository:
    """Static address directory kept as a JSON object of address -> display name."""

    def __init__(self, labels_path: Union[str, Path]):
        self.labels_path = Path(labels_path)

    def get_all_labels(self) -> Dict[str, str]:
        """
        Load the directory with addresses lowercased.

        Raises:
            OSError: the file is missing or unreadable
            ValueError: the file is not a JSON object

        Entries whose name is not a string (null, numbers, nested objects) are
        dropped rather than rendered as "None" or "42".
        """
        with open(self.labels_path, "r", encoding="utf-8") as f:
            raw = json.load(f)

        if not isinstance(raw, dict):
            raise ValueError(f"Label directory {self.labels_path} must be a JSON object")

        labels = {}
        skipped = 0
        for address, name in raw.items():
            if not isinstance(name, str):
                skipped += 1
                continue
            labels[address.lower()] = name

        if skipped:
            logger.warning(f"Skipped {skipped} labels with non-string names in {self.labels_path}")
        logger.info(f"Loaded {len(labels)} address labels from {self.labels_path}")
        return labels
