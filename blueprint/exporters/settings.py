"""Exporters for site options and table contents."""

from typing import Iterable, List, Optional

from blueprint.context import BlueprintContext
from blueprint.exporters.base import HasAlias, StepExporter
from blueprint.logging import get_logger
from blueprint.steps.run_sql import RunSql
from blueprint.steps.site_options import SetSiteOptions
from blueprint.util import array_to_insert_sql

logger = get_logger(__name__)


class ExportSiteOptions(StepExporter, HasAlias):
    """Exports a fixed list of options as a single setSiteOptions step."""

    def __init__(
        self,
        context: BlueprintContext,
        option_names: Iterable[str],
        alias: str = "setSiteOptions",
        label: str = "Site options",
    ):
        super().__init__(context)
        self.option_names = list(option_names)
        self.alias = alias
        self.label = label

    def export(self) -> SetSiteOptions:
        store = self.context.options
        options = {name: store.get_option(name) for name in self.option_names}
        step = SetSiteOptions(options)
        if self.alias != self.get_step_name():
            step.set_meta_values({"alias": self.alias})
        return step

    def get_step_name(self) -> str:
        return SetSiteOptions.get_step_name()

    def get_alias(self) -> str:
        return self.alias

    def get_label(self) -> str:
        return self.label

    def get_description(self) -> str:
        return f"It includes the options: {', '.join(self.option_names)}."

    def check_step_capabilities(self) -> bool:
        return self.context.actor_can("manage_options")


class ExportTableRows(StepExporter, HasAlias):
    """Exports every row of the given tables as runSql steps."""

    def __init__(
        self,
        context: BlueprintContext,
        tables: Iterable[str],
        alias: str = "tableRows",
        label: str = "Table rows",
        statement_type: str = "replace into",
    ):
        super().__init__(context)
        self.tables = list(tables)
        self.alias = alias
        self.label = label
        self.statement_type = statement_type

    def export(self) -> List[RunSql]:
        steps = []
        for table in self.tables:
            rows = self.context.rows.fetch_rows(table)
            logger.debug(f"Exporting {len(rows)} rows from {table}")
            for row in rows:
                step = RunSql(
                    array_to_insert_sql(row, table, self.statement_type),
                    name=f"{table}.sql",
                )
                step.set_meta_values({"alias": self.alias})
                steps.append(step)
        return steps

    def get_step_name(self) -> str:
        return RunSql.get_step_name()

    def get_alias(self) -> str:
        return self.alias

    def get_label(self) -> str:
        return self.label

    def get_description(self) -> str:
        return f"It includes all rows of: {', '.join(self.tables)}."

    def check_step_capabilities(self) -> bool:
        return self.context.actor_can("manage_options")


def create_settings_exporters(
    context: BlueprintContext,
    option_names: Optional[Iterable[str]] = None,
    tables: Optional[Iterable[str]] = None,
) -> List[StepExporter]:
    """Exporters for the configured options and tables; empty lists yield none."""
    exporters: List[StepExporter] = []
    if option_names:
        exporters.append(ExportSiteOptions(context, option_names))
    if tables:
        exporters.append(ExportTableRows(context, tables))
    return exporters
