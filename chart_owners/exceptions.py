from typing import Any


class ChartOwnersError(Exception):
    pass


class CredentialError(ChartOwnersError):
    pass


class WalkError(ChartOwnersError):
    def __init__(self, msg: Any) -> None:
        super().__init__("error walking the directory tree: " + str(msg))


class OwnersFileError(ChartOwnersError):
    def __init__(self, path: str, msg: Any) -> None:
        super().__init__(f"error reading OWNERS file {path}: {msg!s}")
        self.path = path


class RemoteError(ChartOwnersError):
    pass


class LoadError(ChartOwnersError):
    def __init__(self, path: str, msg: Any) -> None:
        super().__init__(f"error loading chart metadata {path}: {msg!s}")
        self.path = path


class WriteError(ChartOwnersError):
    def __init__(self, path: str, msg: Any) -> None:
        super().__init__(f"error writing {path}: {msg!s}")
        self.path = path


class SerializationError(ChartOwnersError):
    pass
