"""DuckDB-backed local site.

A small stand-in for a hosting application: options live in a
``{prefix}options`` table, runSql statements run on the same DuckDB
connection, and plugins/themes are folders under a content directory.
It implements OptionStore, StatementExecutor, RowSource and
ExtensionManager, which is enough to export from and import into a site
without the real host.
"""

import json
import os
import re
import shutil
import tempfile
from typing import Any, Dict, List, Optional

import duckdb

from blueprint.logging import get_logger
from blueprint.protocols import ExecutionOutcome
from blueprint.resources.archive import extract_zip
from blueprint.util import validate_identifier

logger = get_logger(__name__)

MEMORY_DATABASE = ":memory:"

# MySQL spellings that DuckDB knows under another name
DIALECT_REWRITES = [
    (re.compile(r"^\s*REPLACE\s+INTO\b", re.IGNORECASE), "INSERT OR REPLACE INTO"),
    (re.compile(r"^\s*INSERT\s+IGNORE\s+INTO\b", re.IGNORECASE), "INSERT OR IGNORE INTO"),
]

MULTIPLE_STATEMENTS_ERROR = "Multiple statements are not allowed"

PLUGIN_NAME_PATTERN = re.compile(
    r"^[ \t/*#@]*Plugin Name:[ \t]*(.+?)[ \t]*(?:\*/)?[ \t]*$", re.MULTILINE
)

_MISSING = object()


class DuckDBSite:
    """Local site stored in DuckDB plus a content directory."""

    def __init__(
        self,
        database_path: str = MEMORY_DATABASE,
        table_prefix: str = "wp_",
        content_dir: Optional[str] = None,
    ):
        """
        Initialize the site.

        Args:
            database_path: DuckDB file, or ":memory:"
            table_prefix: Prefix for the site's tables
            content_dir: Directory holding plugins/ and themes/; a temporary
                directory is used when omitted
        """
        validate_identifier(f"{table_prefix}options")
        self.database_path = database_path
        self.table_prefix = table_prefix
        self._owns_content_dir = content_dir is None
        self.content_dir = content_dir or tempfile.mkdtemp(prefix="blueprint-site-")
        self.plugins_dir = os.path.join(self.content_dir, "plugins")
        self.themes_dir = os.path.join(self.content_dir, "themes")
        os.makedirs(self.plugins_dir, exist_ok=True)
        os.makedirs(self.themes_dir, exist_ok=True)

        if database_path != MEMORY_DATABASE:
            directory = os.path.dirname(os.path.abspath(database_path))
            os.makedirs(directory, exist_ok=True)

        self.connection = duckdb.connect(database_path)
        self.transaction_active = False
        self._create_tables()
        logger.debug(
            f"DuckDBSite ready: database={database_path}, content_dir={self.content_dir}"
        )

    @property
    def options_table(self) -> str:
        return f"{self.table_prefix}options"

    def _create_tables(self) -> None:
        self.connection.execute(
            f"CREATE TABLE IF NOT EXISTS {self.options_table} ("
            "option_name VARCHAR PRIMARY KEY, "
            "option_value VARCHAR, "
            "autoload VARCHAR DEFAULT 'yes')"
        )

    # Option store

    def get_option(self, name: str, default: Any = None) -> Any:
        row = self.connection.execute(
            f"SELECT option_value FROM {self.options_table} WHERE option_name = ?",
            [name],
        ).fetchone()
        if row is None:
            return default
        return self._decode(row[0])

    def update_option(self, name: str, value: Any) -> bool:
        """Store an option; False when the stored value is already equal."""
        if self.get_option(name, _MISSING) == value:
            return False

        self.connection.execute(
            f"INSERT OR REPLACE INTO {self.options_table} (option_name, option_value) "
            "VALUES (?, ?)",
            [name, json.dumps(value)],
        )
        return True

    @staticmethod
    def _decode(raw: Optional[str]) -> Any:
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            # Rows written by plain SQL hold bare strings
            return raw

    # Statement executor

    def begin(self) -> None:
        if self.transaction_active:
            logger.warning("Transaction already active, ignoring begin() call")
            return
        self.connection.begin()
        self.transaction_active = True

    def execute(self, sql: str) -> ExecutionOutcome:
        statement = sql
        for pattern, replacement in DIALECT_REWRITES:
            statement = pattern.sub(replacement, statement, count=1)

        try:
            # One statement per call, as the MySQL host driver runs them
            if len(self.connection.extract_statements(statement)) > 1:
                return ExecutionOutcome(0, MULTIPLE_STATEMENTS_ERROR)
            relation = self.connection.execute(statement)
            row = relation.fetchone()
        except duckdb.Error as e:
            logger.debug(f"Statement failed: {e}")
            return ExecutionOutcome(0, str(e))

        affected = int(row[0]) if row and isinstance(row[0], int) else 0
        return ExecutionOutcome(affected, None)

    def commit(self) -> None:
        if not self.transaction_active:
            logger.warning("No active transaction to commit")
            return
        self.connection.commit()
        self.transaction_active = False

    def rollback(self) -> None:
        if not self.transaction_active:
            logger.warning("No active transaction to roll back")
            return
        self.connection.rollback()
        self.transaction_active = False

    # Row source

    def fetch_rows(self, table: str) -> List[Dict[str, Any]]:
        validate_identifier(table)
        relation = self.connection.execute(f"SELECT * FROM {table}")
        columns = [column[0] for column in relation.description]
        return [dict(zip(columns, row)) for row in relation.fetchall()]

    # Extension manager

    def get_plugins(self) -> Dict[str, Dict[str, Any]]:
        plugins = {}
        for folder in sorted(os.listdir(self.plugins_dir)):
            folder_path = os.path.join(self.plugins_dir, folder)
            if not os.path.isdir(folder_path):
                continue
            main_file = self._find_main_file(folder_path, folder)
            if main_file is None:
                continue
            plugins[f"{folder}/{main_file}"] = {
                "Name": self._read_plugin_name(os.path.join(folder_path, main_file)) or folder,
                "slug": folder,
            }
        return plugins

    def is_plugin_active(self, plugin_path: str) -> bool:
        return plugin_path in (self.get_option("active_plugins") or [])

    def install_plugin(self, package_path: str) -> Optional[str]:
        folder = self._install_package(package_path, self.plugins_dir)
        if folder is None:
            return None
        main_file = self._find_main_file(os.path.join(self.plugins_dir, folder), folder)
        if main_file is None:
            logger.warning(f"Package {package_path} contains no plugin file")
            return None
        return f"{folder}/{main_file}"

    def activate_plugin(self, plugin_path: str) -> Optional[str]:
        if plugin_path not in self.get_plugins():
            return f"Plugin file does not exist: {plugin_path}"

        active = list(self.get_option("active_plugins") or [])
        if plugin_path not in active:
            active.append(plugin_path)
            self.update_option("active_plugins", sorted(active))
        return None

    def get_themes(self) -> Dict[str, Dict[str, Any]]:
        return {
            folder: {"Name": folder, "slug": folder}
            for folder in sorted(os.listdir(self.themes_dir))
            if os.path.isdir(os.path.join(self.themes_dir, folder))
        }

    def get_current_theme(self) -> Optional[str]:
        return self.get_option("stylesheet")

    def install_theme(self, package_path: str) -> Optional[str]:
        return self._install_package(package_path, self.themes_dir)

    def switch_theme(self, folder_name: str) -> Optional[str]:
        if folder_name not in self.get_themes():
            return f"The requested theme does not exist: {folder_name}"
        self.update_option("template", folder_name)
        self.update_option("stylesheet", folder_name)
        return None

    def _install_package(self, package_path: str, target_dir: str) -> Optional[str]:
        """Unpack a zip (or copy a folder) into target_dir, return the folder name."""
        if os.path.isdir(package_path):
            folder = os.path.basename(os.path.normpath(package_path))
            shutil.copytree(package_path, os.path.join(target_dir, folder), dirs_exist_ok=True)
            return folder

        staging = tempfile.mkdtemp(prefix="blueprint-package-")
        try:
            members = extract_zip(package_path, staging)
            top_level = {member.split("/", 1)[0] for member in members if member.strip("/")}
            if len(top_level) == 1 and os.path.isdir(os.path.join(staging, *top_level)):
                folder = top_level.pop()
                source = os.path.join(staging, folder)
            else:
                folder = os.path.splitext(os.path.basename(package_path))[0]
                source = staging
            shutil.copytree(source, os.path.join(target_dir, folder), dirs_exist_ok=True)
            return folder
        finally:
            shutil.rmtree(staging, ignore_errors=True)

    @staticmethod
    def _find_main_file(folder_path: str, folder: str) -> Optional[str]:
        preferred = f"{folder}.php"
        if os.path.isfile(os.path.join(folder_path, preferred)):
            return preferred
        candidates = sorted(name for name in os.listdir(folder_path) if name.endswith(".php"))
        return candidates[0] if candidates else None

    @staticmethod
    def _read_plugin_name(path: str) -> Optional[str]:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            match = PLUGIN_NAME_PATTERN.search(f.read(8192))
        return match.group(1).strip() if match else None

    def close(self) -> None:
        self.connection.close()
        if self._owns_content_dir:
            shutil.rmtree(self.content_dir, ignore_errors=True)

    def __enter__(self) -> "DuckDBSite":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
