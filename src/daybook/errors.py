"""Exceptions raised by daybook."""


class DaybookError(Exception):
    """Base class for daybook errors."""

    pass


class RecurringEntryError(DaybookError):
    """Raised when a recurring entry is changed through one of its projections."""

    def __init__(self, action: str = "Edit"):
        super().__init__(f"{action} not allowed on a recurring entry. Go to its source entry to change it.")
        self.action = action


class ProjectJournalError(DaybookError):
    """Raised when a project journal cannot be located or created."""

    pass
