class ChordSyncError(RuntimeError):
    pass


class MalformedDocument(ChordSyncError):
    def __init__(self, message: str, position: int):
        super().__init__(f"{message} at offset {position}")
        self.position = position


class InvalidOffset(ChordSyncError):
    pass


class Busy(ChordSyncError):
    pass


class PersistenceFailure(ChordSyncError):
    pass
