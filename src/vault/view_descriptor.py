"""Generation of Obsidian Bases view descriptors for synced databases."""

import logging
from typing import Any, Dict

import yaml

from src.models import CollectionSchema

from .filesafe_converter import FilesafeConverter
from .frontmatter_handler import KEY_COLLECTION_ID
from .local_store import LocalStore

logger = logging.getLogger(__name__)

VIEW_NAME = 'All entries'


class ViewDescriptorGenerator:
    """Builds the .base file that shows a synced database as a table.

    The descriptor selects notes inside the sync folder that carry the
    database's collection marker and lists the columns in schema order,
    without the title column (it is the note name).
    """

    @staticmethod
    def build(schema: CollectionSchema, folder_path: str) -> Dict[str, Any]:
        view: Dict[str, Any] = {'type': 'table', 'name': VIEW_NAME}
        if schema.display_order:
            view['order'] = list(schema.display_order)

        return {
            'filters': {
                'and': [
                    f'file.inFolder("{folder_path}")',
                    f'note["{KEY_COLLECTION_ID}"] == "{schema.database_id}"',
                ],
            },
            'views': [view],
        }

    @classmethod
    def render(cls, schema: CollectionSchema, folder_path: str) -> str:
        return yaml.safe_dump(
            cls.build(schema, folder_path),
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
        )

    @classmethod
    def write(cls, store: LocalStore, schema: CollectionSchema, folder_path: str) -> str:
        """Write (or overwrite) the descriptor next to the synced notes.

        Returns:
            Vault-relative path of the descriptor
        """
        path = f"{folder_path}/{FilesafeConverter.title_to_filename(schema.title, '.base')}"
        store.write(path, cls.render(schema, folder_path))
        logger.info(f"Wrote view descriptor {path}")
        return path
