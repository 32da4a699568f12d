"""Sync command orchestration for CLI.

This module provides the SyncCommand class that wires configuration, the
Notion client, the vault store and the sync engine together for the
import, refresh, list and config commands, and translates failures to exit codes.
"""

import logging
from pathlib import PurePosixPath
from typing import Callable, Optional

from src.cli.config import ConfigLoader
from src.cli.errors import CLIError, CollectionNotSyncedError, ConfigError
from src.cli.models import AppConfig, ExitCode
from src.cli.output import OutputHandler
from src.database_sync.errors import DatabaseSyncError
from src.database_sync.models import SyncResult
from src.database_sync.sync_engine import DatabaseSync
from src.notion_api.api_wrapper import NotionAPI
from src.notion_api.auth import Authenticator
from src.notion_api.errors import (
    APIAccessError,
    APIUnreachableError,
    InvalidCredentialsError,
    InvalidNotionIdError,
    NotionAPIError,
    SyncError,
)
from src.notion_api.id_parser import normalize_notion_id
from src.vault.errors import VaultError
from src.vault.local_store import LocalStore
from src.vault.models import SyncedCollection

logger = logging.getLogger(__name__)


class SyncCommand:
    """Runs the CLI workflows against a vault.

    The workflows:
        import:  normalize the id, fresh-import the database
        refresh: resolve a synced database by id, URL, folder or title, refresh it
        list:    show the databases found in the vault
        config:  show or update the saved defaults

    Example:
        >>> output = OutputHandler(verbosity=1)
        >>> cmd = SyncCommand(output_handler=output)
        >>> exit_code = cmd.run_import("https://www.notion.so/...")
        >>> sys.exit(exit_code)
    """

    def __init__(
        self,
        config_path: str = ConfigLoader.DEFAULT_CONFIG_PATH,
        output_handler: Optional[OutputHandler] = None,
        authenticator: Optional[Authenticator] = None,
        notion: Optional[NotionAPI] = None,
        store: Optional[LocalStore] = None,
    ):
        """Initialize sync command with dependencies.

        Args:
            config_path: Path to configuration YAML file
            output_handler: OutputHandler for terminal output (optional)
            authenticator: Authenticator for the Notion API (optional)
            notion: Notion API client (optional)
            store: Vault store (optional, overrides vault_path)

        Note:
            All dependencies are optional to support testing. In production
            they are created from the configuration on first use.
        """
        self.config_path = config_path
        self.output_handler = output_handler or OutputHandler()
        self.authenticator = authenticator
        self.notion = notion
        self.store = store

    def _load_config(self, vault_path: Optional[str]) -> AppConfig:
        config = ConfigLoader.load(self.config_path)
        if vault_path:
            config.vault_path = vault_path
        logger.info(f"Using vault at {config.vault_path}")
        self.output_handler.debug(f"Config: {self.config_path}, vault: {config.vault_path}")
        return config

    def _get_store(self, config: AppConfig) -> LocalStore:
        if self.store is None:
            self.store = LocalStore(config.vault_path)
        return self.store

    def _get_notion(self) -> NotionAPI:
        """Build the API client, checking the key before any request."""
        if self.notion is None:
            if self.authenticator is None:
                self.authenticator = Authenticator()
            self.authenticator.get_api_key()
            self.notion = NotionAPI(self.authenticator)
        return self.notion

    def _execute(self, action: Callable[[], ExitCode]) -> ExitCode:
        """Run a workflow, translating exceptions to exit codes."""
        try:
            return action()

        except InvalidNotionIdError as e:
            logger.error(f"Invalid input: {e}")
            self.output_handler.error(str(e))
            return ExitCode.GENERAL_ERROR

        except InvalidCredentialsError as e:
            logger.error(f"Authentication failed: {e}")
            self.output_handler.error(f"Authentication failed: {e}")
            self.output_handler.info(
                "Check the NOTION_API_KEY environment variable and that the "
                "integration is shared with the database"
            )
            return ExitCode.AUTH_ERROR

        except (APIUnreachableError, APIAccessError, NotionAPIError) as e:
            logger.error(f"API error: {e}")
            self.output_handler.error(f"API error: {e}")
            self.output_handler.info("Check your internet connection and try again")
            return ExitCode.NETWORK_ERROR

        except ConfigError as e:
            logger.error(f"Configuration error: {e}")
            self.output_handler.error(str(e))
            return ExitCode.GENERAL_ERROR

        except (CLIError, DatabaseSyncError, VaultError, SyncError) as e:
            logger.error(f"Sync failed: {e}")
            self.output_handler.error(f"Error: {e}")
            return ExitCode.GENERAL_ERROR

        except Exception as e:
            logger.exception("Unexpected error during sync")
            self.output_handler.error(f"Unexpected error: {e}")
            return ExitCode.GENERAL_ERROR

    def _finish(self, result: SyncResult, verb: str) -> ExitCode:
        self.output_handler.print_summary(result, verb)
        if result.has_failures:
            return ExitCode.ROW_FAILURES
        return ExitCode.SUCCESS

    def run_import(
        self,
        identifier: str,
        output_folder: Optional[str] = None,
        vault_path: Optional[str] = None,
    ) -> ExitCode:
        """Fresh-import a database.

        Args:
            identifier: Database id or notion.so URL
            output_folder: Vault-relative parent folder (config default if None)
            vault_path: Vault root (config value if None)

        Returns:
            ExitCode indicating success or specific failure type
        """
        def _import() -> ExitCode:
            database_id = normalize_notion_id(identifier)
            config = self._load_config(vault_path)
            folder = output_folder or config.default_output_folder
            store = self._get_store(config)
            sync = DatabaseSync(self._get_notion(), store)

            logger.info(f"Importing database {database_id} into {folder}")
            with self.output_handler.sync_progress(database_id, "Importing") as on_progress:
                result = sync.fresh_import(database_id, folder, on_progress)
            return self._finish(result, "imported")

        return self._execute(_import)

    def run_refresh(
        self,
        identifier: str,
        vault_path: Optional[str] = None,
        force: bool = False,
    ) -> ExitCode:
        """Refresh a database that is already in the vault.

        Args:
            identifier: Database id, notion.so URL, folder path or title
            vault_path: Vault root (config value if None)
            force: Rewrite every entry, not only those edited since the last run

        Returns:
            ExitCode indicating success or specific failure type
        """
        def _refresh() -> ExitCode:
            config = self._load_config(vault_path)
            store = self._get_store(config)
            collection = self.resolve_collection(store, identifier)
            sync = DatabaseSync(self._get_notion(), store)

            logger.info(f"Refreshing '{collection.title}' ({collection.collection_id})")
            with self.output_handler.sync_progress(collection.title, "Refreshing") as on_progress:
                result = sync.refresh(collection, on_progress, force=force)
            return self._finish(result, "refreshed")

        return self._execute(_refresh)

    def run_list(self, vault_path: Optional[str] = None) -> ExitCode:
        """Show every database synced into the vault."""
        def _list() -> ExitCode:
            store = self._get_store(self._load_config(vault_path))
            self.output_handler.print_collections(store.list_synced_collections())
            return ExitCode.SUCCESS

        return self._execute(_list)

    def run_config(
        self,
        vault_path: Optional[str] = None,
        output_folder: Optional[str] = None,
    ) -> ExitCode:
        """Show the configuration, saving any values given first.

        Args:
            vault_path: New default vault root
            output_folder: New default parent folder for imports
        """
        def _config() -> ExitCode:
            config = ConfigLoader.load(self.config_path)
            if vault_path or output_folder:
                if vault_path:
                    config.vault_path = vault_path
                if output_folder:
                    config.default_output_folder = output_folder
                ConfigLoader.save(self.config_path, config)
                logger.info(f"Saved configuration to {self.config_path}")
                self.output_handler.success(f"Saved {self.config_path}")
            self.output_handler.print_config(config)
            return ExitCode.SUCCESS

        return self._execute(_config)

    @staticmethod
    def resolve_collection(store: LocalStore, identifier: str) -> SyncedCollection:
        """Find a synced database by id/URL, folder path or title.

        Raises:
            CollectionNotSyncedError: If nothing in the vault matches
        """
        collections = store.list_synced_collections()

        try:
            database_id = normalize_notion_id(identifier)
        except InvalidNotionIdError:
            database_id = None

        # An id-shaped identifier never falls back to folder or title matching
        if database_id is not None:
            for collection in collections:
                if collection.collection_id == database_id:
                    return collection
            raise CollectionNotSyncedError(identifier)

        wanted = PurePosixPath(identifier.strip().strip('/')).as_posix()
        for collection in collections:
            if collection.folder_path == wanted:
                return collection
        for collection in collections:
            if collection.title.lower() == wanted.lower():
                return collection

        raise CollectionNotSyncedError(identifier)
