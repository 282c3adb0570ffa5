"""
Configuration management for Glance
Uses pydantic-settings for environment variable validation
"""

from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "Glance"
    APP_VERSION: str = "0.1.0"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    API_RELOAD: bool = False
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    # Database (PostgreSQL in production, SQLite for local development)
    DATABASE_URL: str = "sqlite:///./glance.db"

    # Identity provider (Clerk-issued session JWTs)
    CLERK_JWKS_URL: str = ""  # e.g. https://<instance>.clerk.accounts.dev/.well-known/jwks.json
    CLERK_ISSUER: str = ""  # Optional: expected "iss" claim
    CLERK_SECRET_KEY: str = ""
    AUTH_LEEWAY_SECONDS: int = 30

    # Object storage (S3 or compatible)
    S3_BUCKET_NAME: str = "glance-documents"
    S3_REGION: str = "us-east-1"
    S3_ACCESS_KEY_ID: str = ""  # Optional: uses AWS credential chain if empty
    S3_SECRET_ACCESS_KEY: str = ""
    S3_ENDPOINT_URL: str = ""  # Optional: for MinIO, DigitalOcean Spaces, etc.
    MAX_UPLOAD_SIZE: int = 30 * 1024 * 1024  # 30MiB

    # LLM (LiteLLM format: provider/model)
    OPENAI_API_KEY: str = ""
    LLM_PROVIDER: str = "openai"
    CHAT_MODEL: str = "gpt-4o-mini"
    CHAT_TEMPERATURE: float = 0.7
    CHAT_MAX_TOKENS: int = 500
    CHAT_PRESENCE_PENALTY: float = 0.2
    CHAT_FREQUENCY_PENALTY: float = 0.2
    CHAT_CONTEXT_MAX_TOKENS: int = 3000  # Upper bound for retrieved context in the prompt
    LLM_TIMEOUT: int = 60

    # Embeddings
    EMBEDDING_MODEL: str = "text-embedding-3-small"
    EMBEDDING_DIMENSIONS: int = 1536

    # Vector database (hosted Chroma server)
    VECTOR_DB_HOST: str = "localhost"
    VECTOR_DB_PORT: int = 8001
    VECTOR_DB_SSL: bool = False
    VECTOR_DB_API_KEY: str = ""
    VECTOR_INDEX_NAME: str = "glance-documents"
    RETRIEVAL_TOP_K: int = 4

    # Processing
    CHUNK_SIZE: int = 1000
    CHUNK_OVERLAP: int = 200
    CHUNK_TOKENIZER: str = "character"  # chonkie tokenizer; "character" keeps sizes in chars
    SENTENCE_CHUNK_SIZE: int = 2000
    INDEX_ON_UPLOAD: bool = True
    HTTP_TIMEOUT_SECONDS: float = 30.0

    # Rate limiting (search endpoint)
    SEARCH_RATE_LIMIT: int = 10
    SEARCH_RATE_WINDOW_SECONDS: int = 60
    RATE_LIMIT_MAX_KEYS: int = 500

    # Cleanup sweep
    CLEANUP_MAX_ATTEMPTS: int = 5
    PENDING_UPLOAD_TTL_MINUTES: int = 30

    class Config:
        env_file = ".env"
        case_sensitive = True


# Global settings instance
settings = Settings()


# Editor rewrite presets: action name -> instruction prefixed to the selected text
WRITING_ACTIONS = {
    "improve": "Enhance this text while maintaining its core message. Make it more professional and engaging: ",
    "rephrase": "Rephrase this text in a different way while keeping the same meaning: ",
    "explain": "Explain this concept in detail, breaking it down into clear, understandable parts: ",
    "summarize": "Provide a concise summary of the main points in this text: ",
    "key_points": "Extract and list the key points from this text: ",
    "academic": "Convert this text into a formal academic style: ",
}
