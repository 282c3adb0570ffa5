"""
Business Logic Services

Includes:
- MetadataStore: Owner-scoped document records and the cleanup log
- DocumentService: Upload, re-index and delete with compensation
- VectorIndexer: Window chunking, embedding and namespace management
- ChatService: Retrieval-augmented chat over one document
- WritingService: Editor rewrite presets
- AcademicSearchService: Google Scholar / ResearchGate scraping
"""

# Lazy imports to avoid circular dependencies
# Import services directly from their modules instead
