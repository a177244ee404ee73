"""Adapter metadata JSON file storage."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, Optional

from defi_adapters.core.constants import Chain, Protocol

logger = logging.getLogger(__name__)

DEFAULT_FILE_KEY = "metadata"


@dataclass(frozen=True)
class MetadataKey:
    """Identifies one adapter metadata file."""

    protocol: Protocol
    product: str
    chain: Chain
    file_key: str = DEFAULT_FILE_KEY


class MetadataFileStore:
    """
    Persistent storage for adapter metadata.

    Uses JSON files so they can be reviewed and committed.
    Directory structure:
        metadata_dir/
            {protocol}/
                {product}/
                    {chain-name}.{file-key}.json
    """

    def __init__(self, metadata_dir: Path):
        self.metadata_dir = Path(metadata_dir)

    def path_for(self, key: MetadataKey) -> Path:
        return (
            self.metadata_dir
            / key.protocol.value
            / key.product
            / f"{key.chain.chain_name}.{key.file_key}.json"
        )

    def load(self, key: MetadataKey) -> Optional[Dict[str, Any]]:
        """
        Load a metadata file.

        Args:
            key: Metadata file key

        Returns:
            Parsed metadata or None if the file does not exist
        """
        file_path = self.path_for(key)
        if not file_path.exists():
            logger.debug(f"Metadata file not found: {file_path}")
            return None

        with open(file_path, "r") as f:
            return json.load(f)

    def save(self, key: MetadataKey, metadata: Dict[str, Any]) -> Path:
        """
        Write a metadata file, creating parent directories.

        Returns:
            Path of the written file
        """
        file_path = self.path_for(key)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        with open(file_path, "w") as f:
            json.dump(metadata, f, indent=2)

        logger.info(f"Wrote metadata file: {file_path}")
        return file_path

    async def get_or_build(
        self,
        key: MetadataKey,
        builder: Callable[[], Awaitable[Dict[str, Any]]],
        write_through: bool = False,
    ) -> Dict[str, Any]:
        """
        Load metadata from file, or build it when the file is missing.

        Args:
            key: Metadata file key
            builder: Async function building the metadata
            write_through: Save freshly built metadata to file

        Returns:
            Metadata dict
        """
        metadata = self.load(key)
        if metadata is not None:
            return metadata

        metadata = await builder()
        if write_through:
            self.save(key, metadata)
        return metadata
