"""Study-plan JSON import and export."""

from plansync.core.transfer.exporter import export_documents, write_export
from plansync.core.transfer.importer import ParsedImport, PlanImporter, generate_plan_id

__all__ = ["ParsedImport", "PlanImporter", "export_documents", "generate_plan_id", "write_export"]
