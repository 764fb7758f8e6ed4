class LauncherError(Exception):
    """Base class for errors reported by the launcher commands."""


class UnknownProfileError(LauncherError):
    def __init__(self, name: str, source: str):
        super().__init__(f"Profile '{name}' not found in {source}")
        self.name = name
        self.source = source
