from plansync.cli.progress.rich import RichSyncProgress

__all__ = ["RichSyncProgress"]
