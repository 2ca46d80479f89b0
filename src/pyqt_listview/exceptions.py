"""List view exceptions."""


class ListViewError(Exception):
    """Base class for list view errors."""


class InvalidConfiguration(ListViewError, ValueError):
    """Raised when a view configuration cannot be used to build a view."""


class UnknownSortKey(ListViewError, KeyError):
    """Reported when a sort key is not declared in the view configuration."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self):
        return f"Unknown sort key: {self.name!r}"


class UnknownFilterName(ListViewError, KeyError):
    """Reported when a filter name is not declared in the view configuration."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self):
        return f"Unknown filter: {self.name!r}"
