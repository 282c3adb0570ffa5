"""
API Routes and Endpoints

Routers:
    - upload: PDF upload
    - documents: Document list/detail/star/delete/reindex
    - chat: Document chat and the writing assistant
    - search: Academic paper search
    - system: Configuration check
"""

from glance.api import upload, documents, chat, search, system

__all__ = ["upload", "documents", "chat", "search", "system"]
