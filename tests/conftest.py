"""
Pytest configuration and shared fixtures for Glance tests

Provides:
- In-memory SQLite database sessions
- Fake blob storage, vector store, embedder and chunker
- A minimal PDF builder with a real text layer
- Test users and an API client with dependency overrides
"""

import pytest
import textwrap
from typing import Dict, Generator, List, Tuple
from unittest.mock import MagicMock
from urllib.parse import quote, unquote, urlparse

from botocore.exceptions import ClientError
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

import glance.models  # noqa: F401  (registers tables on Base.metadata)
from glance.core.exceptions import UpstreamError
from glance.core.security import CurrentUser
from glance.database import Base
from glance.middleware.rate_limiter import RateLimiter
from glance.models.document import Document, utcnow
from glance.prompts.base import PromptBuilder
from glance.services.vector_indexer import VectorIndexer
from glance.storage.base import StorageBackend


ALICE = CurrentUser(id="user_alice", session_id="sess_alice")
BOB = CurrentUser(id="user_bob", session_id="sess_bob")


# ==============================================================================
# PDF builder
# ==============================================================================

def make_pdf(pages: List[str]) -> bytes:
    """Build a small PDF with one Helvetica text block per page"""
    objects: List[bytes] = []

    def add(body: bytes) -> int:
        objects.append(body)
        return len(objects)

    catalog = add(b"")
    pages_obj = add(b"")
    font = add(b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>")

    kids = []
    for text in pages:
        ops = ["BT", "/F1 12 Tf", "14 TL", "72 720 Td"]
        for line in textwrap.wrap(text, 80):
            escaped = line.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")
            ops.append(f"({escaped}) Tj T*")
        ops.append("ET")
        stream = "\n".join(ops).encode("latin-1")
        content = add(b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream")
        page = add(
            f"<< /Type /Page /Parent {pages_obj} 0 R /MediaBox [0 0 612 792] "
            f"/Resources << /Font << /F1 {font} 0 R >> >> /Contents {content} 0 R >>".encode()
        )
        kids.append(page)

    objects[catalog - 1] = f"<< /Type /Catalog /Pages {pages_obj} 0 R >>".encode()
    objects[pages_obj - 1] = (
        f"<< /Type /Pages /Kids [{' '.join(f'{k} 0 R' for k in kids)}] /Count {len(kids)} >>".encode()
    )

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += f"{number} 0 obj\n".encode() + body + b"\nendobj\n"

    xref_offset = len(out)
    out += f"xref\n0 {len(objects) + 1}\n".encode()
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += f"{offset:010d} 00000 n \n".encode()
    out += (
        f"trailer\n<< /Size {len(objects) + 1} /Root {catalog} 0 R >>\n"
        f"startxref\n{xref_offset}\n%%EOF\n"
    ).encode()
    return bytes(out)


SAMPLE_TEXT = (
    "Transformers rely on self-attention. They process tokens in parallel. "
    "Positional encodings restore word order!"
)


@pytest.fixture
def pdf_builder():
    return make_pdf


@pytest.fixture
def sample_pdf() -> bytes:
    return make_pdf([SAMPLE_TEXT, "The second page discusses training. Training uses large corpora."])


@pytest.fixture
def empty_pdf() -> bytes:
    """Valid PDF without a text layer"""
    return make_pdf([""])


# ==============================================================================
# Fakes
# ==============================================================================

def _client_error(operation: str) -> ClientError:
    return ClientError({"Error": {"Code": "InternalError", "Message": "simulated failure"}}, operation)


class FakeStorage(StorageBackend):
    """In-memory blob storage with switchable failures"""

    base_url = "https://test-bucket.s3.us-east-1.amazonaws.com"

    def __init__(self):
        self.blobs: Dict[str, Tuple[bytes, str]] = {}
        self.deleted: List[str] = []
        self.fail_save = False
        self.fail_delete = False

    def save(self, key, content, content_type=None):
        if self.fail_save:
            raise _client_error("PutObject")
        self.blobs[key] = (content, content_type)
        return self.get_url(key)

    def delete(self, key):
        if self.fail_delete:
            raise _client_error("DeleteObject")
        self.blobs.pop(key, None)
        self.deleted.append(key)

    def get_url(self, key):
        return f"{self.base_url}/{quote(key)}"

    def key_from_url(self, url):
        return unquote(urlparse(url).path).lstrip("/") or None


class FakeVectorStore:
    """In-memory stand-in for ChromaVectorStore"""

    def __init__(self):
        self.records: Dict[str, Dict] = {}
        self.fail_delete = False

    def upsert(self, ids, embeddings, documents, metadatas):
        for chunk_id, embedding, text, meta in zip(ids, embeddings, documents, metadatas):
            self.records[chunk_id] = {"embedding": embedding, "text": text, "metadata": meta}

    def query(self, namespace, embedding, k):
        hits = [
            {
                "id": chunk_id,
                "text": record["text"],
                "metadata": record["metadata"],
                "score": sum(a * b for a, b in zip(embedding, record["embedding"])),
            }
            for chunk_id, record in self.records.items()
            if record["metadata"]["namespace"] == namespace
        ]
        hits.sort(key=lambda h: h["score"], reverse=True)
        return hits[:k]

    def count(self, namespace):
        return sum(1 for r in self.records.values() if r["metadata"]["namespace"] == namespace)

    def delete_namespace(self, namespace):
        if self.fail_delete:
            raise UpstreamError("The vector database is unavailable. Please try again.")
        self.records = {
            chunk_id: record for chunk_id, record in self.records.items()
            if record["metadata"]["namespace"] != namespace
        }


VOCABULARY = ["attention", "token", "training", "page", "order", "parallel"]


class FakeEmbedder:
    """Bag-of-words vectors over a tiny vocabulary"""

    def __init__(self):
        self.calls = 0

    async def embed_batch(self, texts):
        self.calls += 1
        return [[float(t.lower().count(word)) for word in VOCABULARY] + [1.0] for t in texts]

    async def embed(self, text):
        return (await self.embed_batch([text]))[0]


class FakeChunker:
    """One window per page"""

    def chunk_pages(self, pages):
        return [
            {"content": text, "chunk_index": i, "page": page, "metadata": {}}
            for i, (page, text) in enumerate(p for p in pages if p[1].strip())
        ]


class FakeTokenizer:
    """Whitespace tokenizer in place of tiktoken"""

    def encode(self, text):
        return text.split(" ")

    def decode(self, tokens):
        return " ".join(tokens)


# ==============================================================================
# Database
# ==============================================================================

@pytest.fixture
def test_db_engine_sqlite():
    """Fresh in-memory SQLite database per test"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(test_db_engine_sqlite) -> Generator[Session, None, None]:
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_db_engine_sqlite)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_document(db_session):
    """Insert a document record directly"""

    def _make(owner_id: str = ALICE.id, status: str = "ready", **fields) -> Document:
        key = fields.pop("file_key", f"{owner_id}/1700000000000-abcd-paper.pdf")
        document = Document(
            owner_id=owner_id,
            title=fields.pop("title", "paper.pdf"),
            file_name=fields.pop("file_name", "paper.pdf"),
            file_key=key,
            file_url=fields.pop("file_url", f"{FakeStorage.base_url}/{quote(key)}"),
            file_size=fields.pop("file_size", 1024),
            status=status,
            promoted_at=fields.pop("promoted_at", None if status == "processing" else utcnow()),
            **fields,
        )
        db_session.add(document)
        db_session.commit()
        db_session.refresh(document)
        return document

    return _make


# ==============================================================================
# Services
# ==============================================================================

@pytest.fixture
def fake_storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def fake_vector_store() -> FakeVectorStore:
    return FakeVectorStore()


@pytest.fixture
def fake_embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
def indexer(fake_embedder, fake_vector_store) -> VectorIndexer:
    return VectorIndexer(embedder=fake_embedder, vector_store=fake_vector_store, chunker=FakeChunker())


@pytest.fixture
def prompt_builder() -> PromptBuilder:
    builder = PromptBuilder(context_max_tokens=200)
    builder._tokenizer = FakeTokenizer()
    return builder


@pytest.fixture
def rate_limiter() -> RateLimiter:
    return RateLimiter(limit=3, window_seconds=60, max_keys=10)


@pytest.fixture
def completion_response():
    """Build a LiteLLM-style completion response"""

    def _make(content="This is a test response"):
        response = MagicMock()
        response.choices = [MagicMock(message=MagicMock(content=content))]
        return response

    return _make


# ==============================================================================
# API client
# ==============================================================================

@pytest.fixture
def alice() -> CurrentUser:
    return ALICE


@pytest.fixture
def bob() -> CurrentUser:
    return BOB


@pytest.fixture
def current_user():
    """Mutable holder for the authenticated caller (switch users mid-test)"""
    return {"user": ALICE}


@pytest.fixture
def client(db_session, fake_storage, indexer, prompt_builder, rate_limiter, current_user):
    """Create test client with mocked dependencies"""
    from glance.main import app
    from glance.api import deps
    from glance.database import get_db
    from glance.services.chat_service import ChatService
    from glance.services.writing_service import WritingService

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[deps.get_current_user] = lambda: current_user["user"]
    app.dependency_overrides[deps.get_storage] = lambda: fake_storage
    app.dependency_overrides[deps.get_indexer] = lambda: indexer
    app.dependency_overrides[deps.get_chat_service] = lambda: ChatService(indexer=indexer, prompt_builder=prompt_builder)
    app.dependency_overrides[deps.get_writing_service] = lambda: WritingService(prompt_builder=prompt_builder)
    app.dependency_overrides[deps.get_search_rate_limiter] = lambda: rate_limiter

    client = TestClient(app)
    yield client

    app.dependency_overrides.clear()


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests for individual components"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests for API endpoints"
    )
