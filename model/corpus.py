# model/corpus.py
from pydantic import BaseModel, Field


class DocumentMetadata(BaseModel):
    source: str = "official_report"
    year: int | None = None
    filename: str | None = None
    content_hash: str | None = None
    processed_at: str | None = None


class Document(BaseModel):
    """
    The current reference document for one source tag (`doc_id`).
    Replaced wholesale on ingestion; never versioned.
    """

    id: str
    doc_id: str
    name: str
    content: str
    metadata: DocumentMetadata = Field(default_factory=DocumentMetadata)
    public_read: bool = True
    created_at: str | None = None


class ChunkMetadata(BaseModel):
    chunk_index: int
    source: str
    total_chunks: int


class Chunk(BaseModel):
    # Immutable once written; owned by exactly one Document.
    model_config = {"frozen": True}

    id: str
    document_id: str
    content: str
    metadata: ChunkMetadata

    @property
    def source(self) -> str:
        return self.metadata.source
