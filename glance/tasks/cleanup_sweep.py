"""
Cleanup Sweep Task
Reconciles blob storage and the vector index with the metadata store

Runs once per invocation (cron, scheduler, or `glance-sweep`):
- retries every logged compensating action (blob / namespace deletions that failed)
- purges write-ahead records stuck in 'processing' (the upload crashed
  between the record and its promotion), together with their blob and namespace
"""

import argparse
import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from glance.config import settings
from glance.database import SessionLocal
from glance.models.cleanup_task import CleanupTask
from glance.services.metadata_store import MetadataStore
from glance.storage.base import StorageBackend
from glance.vector_store.chroma_store import ChromaVectorStore

logger = logging.getLogger(__name__)


def _run_task(task: CleanupTask, storage: StorageBackend, vector_store: ChromaVectorStore):
    if task.kind == "blob":
        storage.delete(task.target)
    elif task.kind == "namespace":
        vector_store.delete_namespace(task.target)
    else:
        raise ValueError(f"Unknown cleanup kind: {task.kind}")


def run_cleanup_sweep(
    db: Session,
    storage: StorageBackend,
    vector_store: ChromaVectorStore,
    max_attempts: Optional[int] = None,
    pending_ttl_minutes: Optional[int] = None,
) -> Dict[str, Any]:
    """
    One reconciliation pass

    Args:
        db: Database session
        storage: Blob storage backend
        vector_store: Vector store holding the namespaces
        max_attempts: Attempts after which a task is abandoned (default CLEANUP_MAX_ATTEMPTS)
        pending_ttl_minutes: Age after which 'processing' records are stale (default PENDING_UPLOAD_TTL_MINUTES)

    Returns:
        Summary counts: completed, failed, abandoned, stale_purged
    """
    max_attempts = max_attempts if max_attempts is not None else settings.CLEANUP_MAX_ATTEMPTS
    pending_ttl_minutes = pending_ttl_minutes if pending_ttl_minutes is not None else settings.PENDING_UPLOAD_TTL_MINUTES

    metadata = MetadataStore(db)
    summary = {"completed": 0, "failed": 0, "abandoned": 0, "stale_purged": 0}

    logger.info("[Cleanup Sweep] Starting reconciliation pass...")

    # 1. Logged compensating actions
    for task in metadata.pending_cleanup_tasks():
        if task.attempts >= max_attempts:
            logger.error(
                f"[Cleanup Sweep] Abandoned {task.kind}:{task.target} after "
                f"{task.attempts} attempts (last error: {task.last_error})"
            )
            summary["abandoned"] += 1
            continue

        try:
            _run_task(task, storage, vector_store)
        except Exception as e:
            metadata.record_cleanup_failure(task, e)
            logger.warning(
                f"[Cleanup Sweep] Retry failed for {task.kind}:{task.target} "
                f"(attempt {task.attempts}/{max_attempts}): {e}"
            )
            summary["failed"] += 1
            continue

        metadata.complete_cleanup(task)
        summary["completed"] += 1

    # 2. Stale write-ahead records
    for document in metadata.stale_pending(pending_ttl_minutes):
        document_id = str(document.id)
        owner_id = document.owner_id
        file_key = document.file_key

        try:
            storage.delete(file_key)
        except Exception as e:
            metadata.log_cleanup("blob", file_key, owner_id, e)

        try:
            vector_store.delete_namespace(document_id)
        except Exception as e:
            metadata.log_cleanup("namespace", document_id, owner_id, e)

        metadata.delete(document)
        logger.warning(f"[Cleanup Sweep] Purged stale upload {document_id} ({file_key})")
        summary["stale_purged"] += 1

    logger.info(
        f"[Cleanup Sweep] Done: {summary['completed']} completed, {summary['failed']} failed, "
        f"{summary['abandoned']} abandoned, {summary['stale_purged']} stale uploads purged"
    )
    return summary


def main(argv=None) -> int:
    """Entry point for the glance-sweep console script"""
    parser = argparse.ArgumentParser(
        prog="glance-sweep",
        description="Retry failed blob/namespace deletions and purge stale uploads",
    )
    parser.add_argument(
        "--max-attempts",
        type=int,
        default=settings.CLEANUP_MAX_ATTEMPTS,
        help="Abandon a cleanup task after this many failed attempts",
    )
    parser.add_argument(
        "--pending-ttl-minutes",
        type=int,
        default=settings.PENDING_UPLOAD_TTL_MINUTES,
        help="Purge 'processing' uploads older than this",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(levelname)s:%(name)s:%(message)s",
    )

    from glance.database import create_tables
    from glance.storage.factory import get_storage_backend

    create_tables()
    db = SessionLocal()
    try:
        run_cleanup_sweep(
            db,
            storage=get_storage_backend(),
            vector_store=ChromaVectorStore(),
            max_attempts=args.max_attempts,
            pending_ttl_minutes=args.pending_ttl_minutes,
        )
    finally:
        db.close()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
