class CorpusError(Exception):
    pass


class SetupError(CorpusError):
    """
    Broken fixtures, settings, or key lookups. Raised before anything is built.
    """
    pass


class OperationRejected(CorpusError):
    """
    The state transition refused an operation built by the generator.
    """

    def __init__(self, kind, reason):
        self.kind = kind
        self.reason = reason
        super().__init__(f"{kind.label} rejected: {reason!r}")
