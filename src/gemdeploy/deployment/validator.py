"""YAML validation for the rendered deployment manifest."""

import logging
from pathlib import Path
from typing import Any

import yaml

from .errors import ManifestValidationError

logger = logging.getLogger(__name__)


class ManifestValidator:
    """Validate deployment.yaml before it is submitted to the cluster."""

    # Required fields for any Kubernetes workload document
    REQUIRED_FIELDS = [
        "apiVersion",
        "kind",
        "metadata.name",
        "spec",
    ]

    def _load_documents(self, file_path: Path) -> list[dict[str, Any]]:
        try:
            with open(file_path, "r") as f:
                # Use safe_load_all for multi-document YAML files
                docs = [doc for doc in yaml.safe_load_all(f) if doc is not None]
        except OSError as e:
            raise ManifestValidationError(f"Cannot read {file_path}: {e}")
        except yaml.YAMLError as e:
            raise ManifestValidationError(f"Invalid YAML syntax in {file_path}: {e}")

        if not docs:
            raise ManifestValidationError(f"No valid YAML documents found in {file_path}")
        return docs

    def _get_nested_field(self, data: dict[str, Any], field_path: str) -> Any | None:
        """
        Get nested field from dictionary using dot notation.

        Args:
            data: Dictionary to search
            field_path: Dot-separated field path (e.g., "metadata.name")

        Returns:
            Field value if found, None otherwise
        """
        current = data
        for part in field_path.split("."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return None
        return current

    def validate(self, file_path: str | Path) -> dict[str, Any]:
        """
        Validate a deployment manifest.

        Args:
            file_path: Path to the manifest

        Returns:
            The first document of the manifest

        Raises:
            ManifestValidationError: If the file is not valid YAML or the first
                document misses a required field
        """
        file_path = Path(file_path)
        docs = self._load_documents(file_path)
        data = docs[0]

        if not isinstance(data, dict):
            raise ManifestValidationError(f"Expected a mapping in {file_path}")

        missing_fields = [
            field for field in self.REQUIRED_FIELDS
            if self._get_nested_field(data, field) is None
        ]
        if missing_fields:
            raise ManifestValidationError(
                f"Missing required fields in {file_path}: {', '.join(missing_fields)}"
            )

        logger.info(f"Manifest valid: {file_path} ({data['kind']} {data['metadata']['name']})")
        return data
