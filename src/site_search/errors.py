"""Exception classes for site search."""


class SiteSearchError(Exception):
    """Base exception for site search errors."""

    pass


class BuildError(SiteSearchError):
    """Raised when the index cannot be built from a corpus."""

    pass


class DuplicateDocumentError(BuildError, ValueError):
    """Raised when two documents in a corpus share an id."""

    def __init__(self, doc_id: int):
        self.doc_id = doc_id
        super().__init__(f"Duplicate document id in corpus: {doc_id}")


class CorpusError(SiteSearchError):
    """Raised when the corpus file is missing or malformed."""

    def __init__(self, source: str, message: str):
        self.source = source
        super().__init__(f"Invalid corpus {source}: {message}")


class ArtifactError(SiteSearchError):
    """Raised when a serialized index cannot be read back."""

    pass
